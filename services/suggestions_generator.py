import asyncio
import logging
from typing import Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.database import SessionLocal
from schemas.suggestion import GenerationKey, GenerationReport
from services.candidate_generator import CandidateGenerator, FetchWords
from services.generation_lock import GenerationLock, generation_lock
from services.gpt_client import fetch_new_words_suggestions
from services.prompt_logger import log_prompt_report
from services.suggestion_merger import merge_candidates
from services.suggestion_source import SuggestionSource

logger = logging.getLogger(__name__)

ReportSink = Callable[[GenerationReport], Awaitable[None]]

UNSET = object()


class SuggestionsGenerator:
    def __init__(
        self,
        db: AsyncSession,
        *,
        lock: GenerationLock = generation_lock,
        fetch_words: FetchWords = fetch_new_words_suggestions,
        report_sink: ReportSink = log_prompt_report,
        timeout=UNSET,
    ):
        self.source = SuggestionSource(db)
        self.candidates = CandidateGenerator(self.source, fetch_words)
        self.lock = lock
        self.report_sink = report_sink
        self.timeout = settings.GENERATION_TIMEOUT_SECONDS if timeout is UNSET else timeout

    async def generate(self, user_id: str, first_lang: str, second_lang: str) -> int | None:
        """Run one generation pass for the key.

        Returns the number of inserted suggestions, or None when another pass
        for the same key is already running.
        """
        key = GenerationKey(user_id=user_id, first_lang=first_lang, second_lang=second_lang)
        if self.lock.is_in_progress(key):
            logger.debug("Generation for %s already in progress, skipping", key)
            return None

        self.lock.start(key)
        try:
            if self.timeout is not None:
                return await asyncio.wait_for(self._run(key), self.timeout)
            return await self._run(key)
        finally:
            self.lock.end(key)

    async def _run(self, key: GenerationKey) -> int:
        user_words = await self.source.user_words(key)
        user_suggestions = await self.source.user_suggestions(key)

        batch = await self.candidates.generate(key, user_words=user_words, user_suggestions=user_suggestions)
        records = merge_candidates(
            batch.words,
            key=key,
            user_words=user_words,
            user_suggestions=user_suggestions,
        )

        if records:
            await self.source.suggestion_repo.insert_many(records)
        logger.info(
            "Generated %d suggestions for %s from %s (%d candidates)",
            len(records),
            key,
            batch.source.value,
            len(batch.words),
        )

        if batch.source.uses_llm and batch.metadata:
            await self._report(GenerationReport.from_metadata(key, batch.metadata, len(records)))
        return len(records)

    async def _report(self, report: GenerationReport) -> None:
        try:
            await self.report_sink(report)
        except Exception:
            logger.exception("Failed to log prompt report for %s_%s_%s", report.user_id, report.first_lang, report.second_lang)


async def generate_suggestions_in_background(user_id: str, first_lang: str, second_lang: str) -> None:
    async with SessionLocal() as db:
        generator = SuggestionsGenerator(
            db,
            fetch_words=fetch_new_words_suggestions,
            report_sink=log_prompt_report,
        )
        await generator.generate(user_id, first_lang, second_lang)


_background_tasks: set[asyncio.Task] = set()


def _log_task_failure(task: asyncio.Task) -> None:
    _background_tasks.discard(task)
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Background suggestion generation failed: %r", exc, exc_info=exc)


def spawn_generation(user_id: str, first_lang: str, second_lang: str) -> asyncio.Task:
    task = asyncio.create_task(
        generate_suggestions_in_background(user_id, first_lang, second_lang),
        name=f"suggestions:{user_id}_{first_lang}_{second_lang}",
    )
    _background_tasks.add(task)
    task.add_done_callback(_log_task_failure)
    return task
