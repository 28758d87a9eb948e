#!/usr/bin/env python3
"""Demo-Request: Upload + Evaluate gegen einen laufenden Server"""

import json
import sys
from pathlib import Path

import requests

BASE_URL = "http://localhost:8000"

criteria = [
    {"id": "python", "name": "Python", "description": "Production experience with Python", "weight": 0.5},
    {"id": "cloud", "name": "Cloud", "description": "Hands-on AWS, GCP or Azure", "weight": 0.3},
    {"id": "lead", "name": "Leadership", "description": "Led a team or a project", "weight": 0.2},
]

paths = [Path(p) for p in sys.argv[1:]]
if not paths:
    print("Usage: python demo_request.py resume1.pdf resume2.docx ...")
    sys.exit(1)

try:
    upload = requests.post(
        f"{BASE_URL}/upload",
        files=[("files", (p.name, p.read_bytes())) for p in paths],
        timeout=60,
    )
    upload.raise_for_status()
    handles = upload.json()

    response = requests.post(
        f"{BASE_URL}/evaluate",
        json={"session_id": handles["session_id"], "criteria": criteria, "files": handles["files"]},
        timeout=300,
    )
    response.raise_for_status()
    result = response.json()
except requests.exceptions.ConnectionError:
    print(f"❌ Server nicht erreichbar unter {BASE_URL}")
    print("   Bitte starten Sie den Server mit: uvicorn resume_judge.server:app")
    sys.exit(1)
except Exception as e:
    print(f"❌ Fehler: {e}")
    sys.exit(1)

print("=" * 70)
print("OUTPUT: GESAMTSCORES")
print("=" * 70)
for entry in result["results"]:
    if entry["status"] == "ok":
        print(f"  {entry['total']:6.2f}  {entry['document']}")
        for score in entry["scores"]:
            print(f"          {score['id']}: {score['score']:g}  {'; '.join(score['evidence'])[:60]}")
    else:
        print(f"  FEHLER  {entry['document']}: [{entry['error_kind']}] {entry['message']}")
print()
print(json.dumps(result, indent=2, ensure_ascii=False)[:2000])
