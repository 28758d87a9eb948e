from resume_judge.services.extraction.text_extractor import (
    DocumentFormat,
    detect_format,
    extract_text,
    extract_text_async,
)

__all__ = ["DocumentFormat", "detect_format", "extract_text", "extract_text_async"]
