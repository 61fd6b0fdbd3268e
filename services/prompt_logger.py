import logging

from core.database import SessionLocal
from repositories.prompt_report_repo import PromptReportRepository
from schemas.suggestion import GenerationReport

logger = logging.getLogger(__name__)


async def log_prompt_report(report: GenerationReport) -> None:
    async with SessionLocal() as db:
        entity = await PromptReportRepository(db).add(report)
    logger.info(
        "Prompt report %s stored for %s_%s_%s (%d words added)",
        entity.id,
        report.user_id,
        report.first_lang,
        report.second_lang,
        report.words_added,
    )
