from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CONCURRENCY = 3


class Settings(BaseSettings):
    # .env wird automatisch gelesen
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "ResumeJudge"
    log_level: str = "INFO"

    # Fallback-Key, wenn der Request keinen eigenen mitbringt
    openai_api_key: str | None = None
    llm_model: str = "gpt-4.1-mini"
    llm_timeout_seconds: float = 60.0

    # Admission-Gate: max. gleichzeitige Einheiten (Extract -> Judge -> Aggregate)
    llm_max_concurrency: int = DEFAULT_CONCURRENCY

    # Retry nur für transiente Provider-Fehler, 0 = ein Versuch pro Dokument
    judge_max_retries: int = 0
    judge_retry_backoff_seconds: float = 1.0

    # Optionale Deadline für den ganzen Batch
    batch_timeout_seconds: float | None = None

    # None -> System-Tempverzeichnis
    upload_dir: str | None = None

    @field_validator("llm_max_concurrency", mode="before")
    @classmethod
    def _fallback_concurrency(cls, value):
        # Ungültige Werte fallen auf den Default zurück statt den Start zu blockieren
        try:
            limit = int(value)
        except (TypeError, ValueError):
            return DEFAULT_CONCURRENCY
        return limit if limit >= 1 else DEFAULT_CONCURRENCY

    @field_validator("openai_api_key", "batch_timeout_seconds", "upload_dir", mode="before")
    @classmethod
    def _empty_as_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


settings = Settings()
