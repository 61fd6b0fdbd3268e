from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.prompt_report import PromptReport
from schemas.suggestion import GenerationReport


class PromptReportRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(self, report: GenerationReport) -> PromptReport:
        entity = PromptReport(
            user_id=report.user_id,
            first_lang=report.first_lang,
            second_lang=report.second_lang,
            words_added=report.words_added,
            prompt_tokens=report.prompt_tokens,
            completion_tokens=report.completion_tokens,
            total_tokens=report.total_tokens,
            model=report.model,
            details=report.details(),
        )
        self.db.add(entity)
        await self.db.commit()
        await self.db.refresh(entity)
        return entity

    async def list_for_user(self, user_id: str, limit: int = 20) -> list[PromptReport]:
        stmt = (
            select(PromptReport)
            .where(PromptReport.user_id == user_id)
            .order_by(PromptReport.id.desc())
            .limit(limit)
        )
        return list((await self.db.execute(stmt)).scalars())
