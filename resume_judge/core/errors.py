"""
Fehler-Taxonomie der Evaluationspipeline.

- ValidationError: batch-weit, wird vor dem Dispatch geworfen
- ExtractionError / JudgeError: pro Dokument, landen als DocumentFailure im BatchResult
"""


class EvaluationError(Exception):
    """Basisklasse aller fachlichen Pipeline-Fehler."""

    kind = "EvaluationError"

    def __init__(self, message: str = ""):
        super().__init__(message or self.kind)
        self.message = message or self.kind


# ---------- batch-weit ---------- #


class ValidationError(EvaluationError):
    kind = "ValidationError"


class EmptyBatch(ValidationError):
    kind = "EmptyBatch"

    def __init__(self, message: str = "No files to evaluate"):
        super().__init__(message)


class EmptyRubric(ValidationError):
    kind = "EmptyRubric"

    def __init__(self, message: str = "No criteria provided"):
        super().__init__(message)


class MissingCredential(ValidationError):
    kind = "MissingCredential"

    def __init__(self, message: str = "Missing OpenAI API key"):
        super().__init__(message)


# ---------- pro Dokument: Extraktion ---------- #


class ExtractionError(EvaluationError):
    kind = "ExtractionError"


class SourceUnavailable(ExtractionError):
    kind = "SourceUnavailable"


class UnsupportedFormat(ExtractionError):
    kind = "UnsupportedFormat"

    def __init__(self, extension: str):
        self.extension = extension
        super().__init__(f"Unsupported file type: {extension or '<none>'}")


# ---------- pro Dokument: Judge ---------- #


class JudgeError(EvaluationError):
    kind = "JudgeError"


class JudgeUnavailable(JudgeError):
    """Provider nicht erreichbar, Rate-Limit, Timeout etc."""

    kind = "JudgeUnavailable"

    def __init__(self, message: str, transient: bool = True):
        super().__init__(message)
        self.transient = transient


class MalformedJudgeResponse(JudgeError):
    kind = "MalformedJudgeResponse"

    def __init__(self, message: str, raw_text: str | None = None):
        super().__init__(message)
        self.raw_text = raw_text
