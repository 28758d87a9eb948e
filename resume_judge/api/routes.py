from typing import List, Optional

from fastapi import APIRouter, File, HTTPException, UploadFile

from resume_judge.core.config import settings
from resume_judge.core.errors import ValidationError
from resume_judge.models.pydantic import BatchResult, EvaluateRequest, UploadResponse
from resume_judge.pipeline.batch_pipeline import BatchPipeline
from resume_judge.services.upload_store import is_stored_upload, store_uploads

router = APIRouter()
batch_pipeline = BatchPipeline()


# einfacher Health-Check
@router.get("/health")
async def health():
    return {"status": "ok"}


# nimmt Dateien entgegen und liefert Handles für /evaluate
@router.post("/upload", response_model=UploadResponse)
async def upload(files: Optional[List[UploadFile]] = File(default=None)):
    if not files:
        raise HTTPException(status_code=400, detail="No files uploaded")

    payload = [(f.filename or "upload", await f.read(), f.content_type) for f in files]
    session_id, handles = store_uploads(payload, settings.upload_dir)
    return UploadResponse(session_id=session_id, files=handles)


# bewertet die hochgeladenen Dateien gegen die Rubrik
@router.post("/evaluate", response_model=BatchResult)
async def evaluate(req: EvaluateRequest):
    # nur Dateien aus /upload bewerten, keine beliebigen Serverpfade
    for doc in req.files:
        if not is_stored_upload(doc.locator, settings.upload_dir):
            raise HTTPException(status_code=400, detail=f"File is not an upload: {doc.display_name}")

    try:
        return await batch_pipeline.run_batch(
            criteria=req.criteria,
            documents=req.files,
            credential=req.api_key,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
