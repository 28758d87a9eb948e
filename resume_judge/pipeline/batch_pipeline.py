import asyncio
import logging
import os
from typing import Sequence

from tenacity import AsyncRetrying, before_sleep_log, retry_if_exception, stop_after_attempt, wait_incrementing

from resume_judge.core.config import Settings, settings as default_settings
from resume_judge.core.errors import (
    EmptyBatch,
    EmptyRubric,
    EvaluationError,
    JudgeUnavailable,
)
from resume_judge.llm.fake_client import FakeLLMClient
from resume_judge.llm.llm_client import LLMClient
from resume_judge.llm.openai_client import OpenAIClient
from resume_judge.models.pydantic import (
    BatchResult,
    Criterion,
    DocumentFailure,
    DocumentHandle,
    DocumentOutcome,
    EvaluationResult,
    JudgeResponse,
)
from resume_judge.services.extraction.text_extractor import extract_text_async
from resume_judge.services.judges.llm_judge import LLMJudge, resolve_credential
from resume_judge.services.scoring import calculate_weighted_score, find_duplicate_criterion_ids

logger = logging.getLogger(__name__)


def _is_transient(exc: BaseException) -> bool:
    """Tenacity-Prädikat: nur transiente Provider-Fehler wiederholen."""
    return isinstance(exc, JudgeUnavailable) and exc.transient


TEST_MODE = os.getenv("TEST_MODE") == "1"


class BatchPipeline:
    """
    Orchestriert Extract -> Judge -> Aggregate für einen Batch von Dokumenten.

    - höchstens concurrency_limit Einheiten gleichzeitig (Semaphore)
    - Fehler pro Dokument landen als DocumentFailure an dessen Position
    - Ergebnis in Eingabereihenfolge, unabhängig von der Fertigstellung
    """

    def __init__(
        self,
        settings: Settings | None = None,
        llm_client: LLMClient | None = None,
        judge: LLMJudge | None = None,
    ) -> None:
        self.settings = settings or default_settings

        # LLM-Client einmal zentral instanziieren
        if llm_client is None:
            if TEST_MODE:
                llm_client = FakeLLMClient()
            else:
                llm_client = OpenAIClient(timeout=self.settings.llm_timeout_seconds)
        self.llm_client = llm_client

        self.judge = judge or LLMJudge(
            self.llm_client,
            default_model=self.settings.llm_model,
            default_credential=self.settings.openai_api_key,
        )

    def run(
        self,
        criteria: Sequence[Criterion],
        documents: Sequence[DocumentHandle],
        credential: str | None = None,
        concurrency_limit: int | None = None,
    ) -> BatchResult:
        """Synchroner Einstieg für Skripte ohne eigenen Event-Loop."""
        return asyncio.run(self.run_batch(criteria, documents, credential, concurrency_limit))

    async def run_batch(
        self,
        criteria: Sequence[Criterion],
        documents: Sequence[DocumentHandle],
        credential: str | None = None,
        concurrency_limit: int | None = None,
    ) -> BatchResult:
        """
        Bewertet alle Dokumente gegen die Rubrik.

        Raises:
            EmptyBatch / EmptyRubric / MissingCredential: vor jedem Dispatch
        """
        if not documents:
            raise EmptyBatch()
        if not criteria:
            raise EmptyRubric()
        api_key = resolve_credential(credential, self.judge.default_credential)

        limit = concurrency_limit if concurrency_limit is not None else self.settings.llm_max_concurrency
        if limit < 1:
            raise ValueError(f"concurrency_limit must be >= 1, got {limit}")

        duplicates = find_duplicate_criterion_ids(criteria)
        if duplicates:
            logger.warning("Duplicate criterion ids %s, last declared weight wins", duplicates)

        criteria = tuple(criteria)
        gate = asyncio.Semaphore(limit)
        logger.info("Starting batch: %d documents, %d criteria, concurrency=%d", len(documents), len(criteria), limit)

        # Tasks in Eingabereihenfolge anlegen -> Slots werden FIFO vergeben
        tasks = [
            asyncio.create_task(self._run_unit(index, doc, criteria, api_key, gate))
            for index, doc in enumerate(documents)
        ]
        try:
            done, pending = await asyncio.wait(tasks, timeout=self.settings.batch_timeout_seconds)
        except asyncio.CancelledError:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        if pending:
            logger.warning(
                "Batch deadline of %.1fs reached, cancelling %d unfinished documents",
                self.settings.batch_timeout_seconds,
                len(pending),
            )
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

        results: list[DocumentOutcome] = []
        for doc, task in zip(documents, tasks):
            if task in done:
                results.append(task.result())
            else:
                results.append(
                    DocumentFailure(
                        document=doc.display_name,
                        error_kind="BatchTimeout",
                        message=f"Batch deadline of {self.settings.batch_timeout_seconds}s exceeded",
                    )
                )

        batch = BatchResult(results=results)
        logger.info("Batch finished: %d ok, %d failed", len(batch.succeeded), len(batch.failed))
        return batch

    async def _run_unit(
        self,
        index: int,
        doc: DocumentHandle,
        criteria: tuple[Criterion, ...],
        api_key: str,
        gate: asyncio.Semaphore,
    ) -> DocumentOutcome:
        async with gate:
            try:
                return await self._evaluate_document(doc, criteria, api_key)
            except EvaluationError as exc:
                logger.warning("Document %d (%s) failed: %s: %s", index, doc.display_name, exc.kind, exc.message)
                return DocumentFailure(document=doc.display_name, error_kind=exc.kind, message=exc.message)
            except Exception as exc:  # noqa: BLE001
                logger.exception("Unexpected error for document %d (%s)", index, doc.display_name)
                return DocumentFailure(document=doc.display_name, error_kind="UnexpectedError", message=str(exc))

    async def _evaluate_document(
        self,
        doc: DocumentHandle,
        criteria: tuple[Criterion, ...],
        api_key: str,
    ) -> EvaluationResult:
        resume_text = await extract_text_async(doc.locator, doc.content_type)
        evaluation = await self._judge_with_retry(resume_text, criteria, api_key)
        total = calculate_weighted_score(criteria, evaluation.scores)

        # Nur Scores zu Kriterien der Rubrik ins Ergebnis übernehmen
        known_ids = {c.id for c in criteria}
        scores = [s for s in evaluation.scores if s.criterion_id in known_ids]
        notes = list(evaluation.notes)
        for s in evaluation.scores:
            if s.criterion_id not in known_ids:
                notes.append(f"ignored score for unknown criterion '{s.criterion_id}'")

        return EvaluationResult(
            document=doc.display_name,
            scores=scores,
            total=total,
            notes=notes,
        )

    async def _judge_with_retry(
        self,
        resume_text: str,
        criteria: tuple[Criterion, ...],
        api_key: str,
    ) -> JudgeResponse:
        max_retries = max(self.settings.judge_max_retries, 0)
        backoff = self.settings.judge_retry_backoff_seconds
        # lineares Backoff, der Slot im Admission-Gate bleibt belegt
        retrying = AsyncRetrying(
            retry=retry_if_exception(_is_transient),
            stop=stop_after_attempt(max_retries + 1),
            wait=wait_incrementing(start=backoff, increment=backoff),
            before_sleep=before_sleep_log(logger, logging.INFO),
            reraise=True,
        )
        return await retrying(self.judge.judge, resume_text, criteria, api_key)
