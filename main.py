import asyncio
import logging

from core.config import settings
from core.database import engine, init_models
from core.log_config import setup_logging
from services.suggestion_refresher import SuggestionRefresher

logger = logging.getLogger(__name__)


async def background_task() -> None:
    await init_models()
    refresher = SuggestionRefresher()
    logger.info("Suggestion refresher started, interval %ss", settings.REFRESH_INTERVAL_SECONDS)
    try:
        await refresher.run_forever()
    finally:
        await engine.dispose()


if __name__ == "__main__":
    setup_logging(settings.LOG_LEVEL)
    try:
        asyncio.run(background_task())
    except KeyboardInterrupt:
        pass
