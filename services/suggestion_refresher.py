import asyncio
import logging
from typing import Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.config import settings
from core.database import SessionLocal
from repositories.word_repo import UserWordRepository
from services.suggestions_generator import generate_suggestions_in_background

logger = logging.getLogger(__name__)

Generate = Callable[[str, str, str], Awaitable[None]]


class SuggestionRefresher:
    """Runs generation for every (user, language pair) that has saved words."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] = SessionLocal,
        generate: Generate = generate_suggestions_in_background,
    ):
        self.session_factory = session_factory
        self.generate = generate

    async def refresh_all(self) -> int:
        async with self.session_factory() as db:
            keys = await UserWordRepository(db).list_generation_keys()

        refreshed = 0
        for user_id, first_lang, second_lang in keys:
            try:
                await self.generate(user_id, first_lang, second_lang)
                refreshed += 1
            except Exception:
                logger.exception("Error refreshing suggestions for %s_%s_%s", user_id, first_lang, second_lang)
        logger.info("Refreshed suggestions for %d of %d keys", refreshed, len(keys))
        return refreshed

    async def run_forever(self, interval: float | None = None) -> None:
        interval = settings.REFRESH_INTERVAL_SECONDS if interval is None else interval
        while True:
            await asyncio.sleep(interval)
            await self.refresh_all()
