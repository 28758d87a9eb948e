"""
Gewichtete Aggregation der Judge-Scores.

total = Summe(score * weight) in Reihenfolge der Scores.
Keine Normalisierung auf die Gewichtssumme: was konfiguriert ist, wird gerechnet.
"""

from collections import Counter
from typing import Iterable, List, Sequence

from resume_judge.models.pydantic import Criterion, ScoreEntry


def calculate_weighted_score(criteria: Sequence[Criterion], scores: Iterable[ScoreEntry]) -> float:
    # Bei doppelten IDs gewinnt das zuletzt deklarierte Gewicht
    weights = {criterion.id: criterion.weight for criterion in criteria}
    total = 0.0
    for entry in scores:
        total += entry.score * weights.get(entry.criterion_id, 0.0)
    return total


def find_duplicate_criterion_ids(criteria: Sequence[Criterion]) -> List[str]:
    counts = Counter(criterion.id for criterion in criteria)
    return [criterion_id for criterion_id, n in counts.items() if n > 1]
