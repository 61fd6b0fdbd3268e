from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.word import Word


class UserWordRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find(self, *, user_id: str, first_lang: str, second_lang: str) -> list[Word]:
        stmt = (
            select(Word)
            .where(
                Word.user_id == user_id,
                Word.first_lang == first_lang,
                Word.second_lang == second_lang,
            )
            .order_by(Word.id)
        )
        return list((await self.db.execute(stmt)).scalars())

    async def list_generation_keys(self) -> list[tuple[str, str, str]]:
        stmt = (
            select(Word.user_id, Word.first_lang, Word.second_lang)
            .distinct()
            .order_by(Word.user_id, Word.first_lang, Word.second_lang)
        )
        return [tuple(row) for row in (await self.db.execute(stmt)).all()]
