from dotenv import load_dotenv
import logging

load_dotenv()
from contextlib import asynccontextmanager

from fastapi import FastAPI

from resume_judge.api.routes import router as api_router
from resume_judge.core.config import settings

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)


def validate_startup_config():
    """Prüft die Konfiguration beim Startup."""
    if not settings.openai_api_key:
        # Kein harter Fehler: Requests können einen eigenen api_key mitbringen
        logger.warning(
            "OPENAI_API_KEY is not set. "
            "Every /evaluate request must then provide its own api_key."
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    validate_startup_config()
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.include_router(api_router)


@app.get("/")
async def root():
    return {"message": "Resume Judge API running"}
