"""
API-Tests für /health, /upload und /evaluate.

Die Pipeline läuft mit dem FakeLLMClient (TEST_MODE=1): jedes Kriterium
bekommt Score 1, der Gesamtscore ist damit die Gewichtssumme.
"""

from fastapi import FastAPI
from fastapi.testclient import TestClient
import pytest

from resume_judge.api import routes
from resume_judge.api.routes import router

CRITERIA = [
    {"id": "python", "name": "Python", "description": "Production Python", "weight": 0.5},
    {"id": "cloud", "name": "Cloud", "description": "AWS or GCP", "weight": 0.3},
]


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(routes.settings, "upload_dir", str(tmp_path))
    app = FastAPI()
    app.include_router(router)
    return TestClient(app)


def _upload(client, *files):
    resp = client.post("/upload", files=[("files", f) for f in files])
    assert resp.status_code == 200
    return resp.json()


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_upload_stores_files_and_returns_handles(client, tmp_path):
    data = _upload(client, ("alice.txt", b"Alice, Python", "text/plain"), ("bob.md", b"# Bob", "text/markdown"))

    assert data["session_id"]
    assert [f["display_name"] for f in data["files"]] == ["alice.txt", "bob.md"]
    for f in data["files"]:
        assert f["locator"].startswith(str(tmp_path / data["session_id"]))
    assert open(data["files"][0]["locator"], "rb").read() == b"Alice, Python"


def test_upload_without_files_is_rejected(client):
    resp = client.post("/upload")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "No files uploaded"


def test_upload_then_evaluate(client):
    handles = _upload(client, ("alice.txt", b"Alice, Python", "text/plain"), ("bob.txt", b"Bob, AWS", "text/plain"))

    resp = client.post(
        "/evaluate",
        json={"session_id": handles["session_id"], "criteria": CRITERIA, "files": handles["files"], "api_key": "sk-test"},
    )

    assert resp.status_code == 200
    results = resp.json()["results"]
    assert [r["document"] for r in results] == ["alice.txt", "bob.txt"]
    for r in results:
        assert r["status"] == "ok"
        assert r["total"] == pytest.approx(0.8)
        # Wire-Format der Scores: "id" statt criterion_id
        assert [s["id"] for s in r["scores"]] == ["python", "cloud"]


def test_evaluate_renders_failed_documents(client):
    handles = _upload(client, ("alice.txt", b"Alice", "text/plain"), ("setup.exe", b"MZ", "application/octet-stream"))

    resp = client.post("/evaluate", json={"criteria": CRITERIA, "files": handles["files"], "api_key": "sk-test"})

    assert resp.status_code == 200
    ok, failed = resp.json()["results"]
    assert ok["status"] == "ok"
    assert failed["status"] == "error"
    assert failed["document"] == "setup.exe"
    assert failed["error_kind"] == "UnsupportedFormat"


def test_evaluate_without_files_is_400(client):
    resp = client.post("/evaluate", json={"criteria": CRITERIA, "files": [], "api_key": "sk-test"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "No files to evaluate"


def test_evaluate_without_criteria_is_400(client):
    handles = _upload(client, ("alice.txt", b"Alice", "text/plain"))
    resp = client.post("/evaluate", json={"criteria": [], "files": handles["files"], "api_key": "sk-test"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "No criteria provided"


def test_evaluate_without_any_key_is_400(client, monkeypatch):
    monkeypatch.setattr(routes.batch_pipeline.judge, "default_credential", None)
    handles = _upload(client, ("alice.txt", b"Alice", "text/plain"))

    resp = client.post("/evaluate", json={"criteria": CRITERIA, "files": handles["files"]})

    assert resp.status_code == 400
    assert "API key" in resp.json()["detail"]


def test_evaluate_rejects_weight_out_of_range(client):
    bad = [dict(CRITERIA[0], weight=1.5)]
    resp = client.post("/evaluate", json={"criteria": bad, "files": [], "api_key": "sk-test"})
    assert resp.status_code == 422


@pytest.mark.parametrize("locator", ["/etc/passwd.txt", "{tmp}/../outside.txt"])
def test_evaluate_rejects_locator_outside_upload_dir(client, tmp_path, monkeypatch, locator):
    calls = []
    monkeypatch.setattr(routes.batch_pipeline, "run_batch", lambda *a, **kw: calls.append(kw))
    files = [{"id": "x", "display_name": "outside.txt", "locator": locator.format(tmp=tmp_path)}]

    resp = client.post("/evaluate", json={"criteria": CRITERIA, "files": files, "api_key": "sk-test"})

    assert resp.status_code == 400
    assert resp.json()["detail"] == "File is not an upload: outside.txt"
    assert calls == []
