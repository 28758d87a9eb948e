from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Criterion(BaseModel):
    """
    Ein gewichtetes Bewertungskriterium der Rubrik.
    Unveränderlich, sobald es an die Pipeline übergeben wurde.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    weight: float = Field(ge=0.0, le=1.0)


class DocumentHandle(BaseModel):
    """
    Verweis auf ein hochgeladenes Dokument.
    locator ist für den TextExtractor auflösbar (hier: Dateipfad).
    """
    model_config = ConfigDict(frozen=True)

    id: str
    display_name: str
    locator: str
    # Optionaler MIME-Typ, falls der Pfad keine Endung hat
    content_type: Optional[str] = None


class ScoreEntry(BaseModel):
    """
    Score eines Kriteriums. Auf dem Draht heißt criterion_id "id".
    """
    model_config = ConfigDict(populate_by_name=True)

    criterion_id: str = Field(alias="id")
    score: float
    evidence: List[str] = Field(default_factory=list)


class JudgeResponse(BaseModel):
    """
    Normalisierte Antwort des LLM-Judges.
    scores dürfen Kriterien außerhalb der Rubrik enthalten.
    """
    scores: List[ScoreEntry] = Field(default_factory=list)
    notes: List[str] = Field(default_factory=list)


class EvaluationResult(BaseModel):
    """
    Ergebnis für ein erfolgreich bewertetes Dokument.
    """
    status: Literal["ok"] = "ok"
    document: str
    scores: List[ScoreEntry] = Field(default_factory=list)
    total: float
    notes: List[str] = Field(default_factory=list)


class DocumentFailure(BaseModel):
    """
    Fehlereintrag an der Position eines fehlgeschlagenen Dokuments.
    """
    status: Literal["error"] = "error"
    document: str
    error_kind: str
    message: str


DocumentOutcome = Annotated[
    Union[EvaluationResult, DocumentFailure],
    Field(discriminator="status"),
]


class BatchResult(BaseModel):
    """
    Ein Eintrag pro Eingabedokument, in Eingabereihenfolge.
    """
    results: List[DocumentOutcome] = Field(default_factory=list)

    @property
    def succeeded(self) -> List[EvaluationResult]:
        return [r for r in self.results if isinstance(r, EvaluationResult)]

    @property
    def failed(self) -> List[DocumentFailure]:
        return [r for r in self.results if isinstance(r, DocumentFailure)]


# ---------- HTTP-Adapter ---------- #


class EvaluateRequest(BaseModel):
    """
    Request-Body für den /evaluate-Endpoint.
    """
    session_id: Optional[str] = None
    criteria: List[Criterion]
    files: List[DocumentHandle]
    api_key: Optional[str] = None


class UploadResponse(BaseModel):
    """
    Response-Body für den /upload-Endpoint.
    """
    session_id: str
    files: List[DocumentHandle]
