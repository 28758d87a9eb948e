"""
Bewertet alle Lebensläufe in Dateien/Ordnern lokal gegen eine Rubrik (ohne HTTP-Server).

Rubrik als JSON oder YAML: Liste von {id, name, description, weight}
(oder ein Objekt mit Key "criteria").

Beispiel:
    python scripts/evaluate_folder.py rubric.yaml resumes/ --concurrency 3 --output results.json
"""

import argparse
import json
import sys
import uuid
from pathlib import Path

import yaml
from dotenv import load_dotenv

from resume_judge.core.errors import ValidationError
from resume_judge.models.pydantic import Criterion, DocumentHandle
from resume_judge.pipeline.batch_pipeline import BatchPipeline
from resume_judge.services.extraction.text_extractor import EXTENSION_FORMATS


def positive_int(value: str) -> int:
    """argparse-Typ für --concurrency (>= 1)."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: '{value}'") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {number}")
    return number


def load_rubric(path: Path) -> list[Criterion]:
    """Liest die Rubrik aus JSON oder YAML."""
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in {".yaml", ".yml"}:
        data = yaml.safe_load(text)
    else:
        data = json.loads(text)
    if isinstance(data, dict):
        data = data.get("criteria", [])
    return [Criterion.model_validate(item) for item in data or []]


def collect_documents(paths: list[Path]) -> list[DocumentHandle]:
    """Expandiert Ordner (nur unterstützte Endungen), Dateien werden unverändert übernommen."""
    files: list[Path] = []
    for p in paths:
        if p.is_dir():
            files.extend(sorted(f for f in p.iterdir() if f.is_file() and f.suffix.lower() in EXTENSION_FORMATS))
        else:
            files.append(p)
    return [DocumentHandle(id=str(uuid.uuid4()), display_name=f.name, locator=str(f)) for f in files]


def main(argv: list[str] | None = None) -> int:
    load_dotenv()

    parser = argparse.ArgumentParser(description="Evaluate resumes against a weighted rubric")
    parser.add_argument("rubric", type=str, help="Path to rubric JSON/YAML")
    parser.add_argument("paths", nargs="+", type=str, help="Resume files or folders")
    parser.add_argument("--concurrency", type=positive_int, default=None, help="Override LLM_MAX_CONCURRENCY")
    parser.add_argument("--api-key", type=str, default=None, help="Override OPENAI_API_KEY")
    parser.add_argument("--output", type=str, default=None, help="Write results as JSON to this file")
    args = parser.parse_args(argv)

    criteria = load_rubric(Path(args.rubric))
    documents = collect_documents([Path(p) for p in args.paths])

    pipeline = BatchPipeline()
    try:
        batch = pipeline.run(criteria, documents, credential=args.api_key, concurrency_limit=args.concurrency)
    except ValidationError as e:
        print(f"❌ {e.kind}: {e.message}")
        return 2

    for result in batch.results:
        if result.status == "ok":
            print(f"  {result.total:6.2f}  {result.document}")
        else:
            print(f"  {'ERROR':>6}  {result.document}  [{result.error_kind}] {result.message}")

    if args.output:
        Path(args.output).write_text(
            json.dumps(batch.model_dump(by_alias=True), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        print(f"✅ Results written to {args.output}")

    return 0 if not batch.failed else 1


if __name__ == "__main__":
    sys.exit(main())
