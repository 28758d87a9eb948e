import os

import pytest

os.environ.setdefault("TEST_MODE", "1")

from resume_judge.models.pydantic import Criterion, DocumentHandle  # noqa: E402


@pytest.fixture
def rubric():
    return [
        Criterion(id="python", name="Python", description="Production Python experience", weight=0.5),
        Criterion(id="cloud", name="Cloud", description="Hands-on cloud platforms", weight=0.3),
        Criterion(id="lead", name="Leadership", description="Led a team", weight=0.2),
    ]


@pytest.fixture
def make_txt(tmp_path):
    """Legt eine .txt-Datei an und liefert das passende DocumentHandle."""

    def _make(name: str, content: str = "Experienced engineer") -> DocumentHandle:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return DocumentHandle(id=name, display_name=name, locator=str(path))

    return _make
