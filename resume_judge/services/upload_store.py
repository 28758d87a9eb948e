"""
Ablage hochgeladener Dateien für den /upload-Endpoint.

Layout: <upload_dir>/<session_id>/<file_id>-<filename>
"""

import logging
import tempfile
import uuid
from pathlib import Path
from typing import Iterable, Tuple

from resume_judge.models.pydantic import DocumentHandle

logger = logging.getLogger(__name__)


def _safe_name(filename: str) -> str:
    # Pfadanteile aus dem Client-Dateinamen verwerfen
    name = Path(filename.replace("\\", "/")).name
    return name or "upload"


def store_uploads(
    files: Iterable[Tuple[str, bytes, str | None]],
    upload_dir: str | None = None,
) -> tuple[str, list[DocumentHandle]]:
    """
    Speichert (filename, content, content_type)-Tupel in einem neuen Session-Verzeichnis.

    Returns:
        (session_id, handles) in Upload-Reihenfolge
    """
    session_id = str(uuid.uuid4())
    root = Path(upload_dir or tempfile.gettempdir())
    session_dir = root / session_id
    session_dir.mkdir(parents=True, exist_ok=True)

    handles: list[DocumentHandle] = []
    for filename, content, content_type in files:
        file_id = str(uuid.uuid4())
        display_name = _safe_name(filename)
        path = session_dir / f"{file_id}-{display_name}"
        path.write_bytes(content)
        handles.append(
            DocumentHandle(
                id=file_id,
                display_name=display_name,
                locator=str(path),
                content_type=content_type,
            )
        )

    logger.info("Stored %d uploads for session %s", len(handles), session_id)
    return session_id, handles


def is_stored_upload(locator: str, upload_dir: str | None = None) -> bool:
    """True, wenn der Locator (nach Auflösen von .. und Symlinks) im Upload-Verzeichnis liegt."""
    root = Path(upload_dir or tempfile.gettempdir()).resolve()
    return Path(locator).resolve().is_relative_to(root)
