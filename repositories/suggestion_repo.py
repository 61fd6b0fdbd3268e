from typing import Any, Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.defaultSuggestion import DefaultSuggestion
from models.wordSuggestion import WordSuggestion


class WordSuggestionRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find(self, *, user_id: str, first_lang: str, second_lang: str) -> list[WordSuggestion]:
        stmt = (
            select(WordSuggestion)
            .where(
                WordSuggestion.user_id == user_id,
                WordSuggestion.first_lang == first_lang,
                WordSuggestion.second_lang == second_lang,
            )
            .order_by(WordSuggestion.id)
        )
        return list((await self.db.execute(stmt)).scalars())

    async def insert_many(self, records: Iterable[dict[str, Any]]) -> list[WordSuggestion]:
        entities = [WordSuggestion(**record) for record in records]
        self.db.add_all(entities)
        await self.db.commit()
        return entities


class DefaultSuggestionRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find(self, *, first_lang: str, second_lang: str) -> list[DefaultSuggestion]:
        stmt = (
            select(DefaultSuggestion)
            .where(
                DefaultSuggestion.first_lang == first_lang,
                DefaultSuggestion.second_lang == second_lang,
            )
            .order_by(DefaultSuggestion.id)
        )
        return list((await self.db.execute(stmt)).scalars())

    async def insert_many(self, records: Iterable[dict[str, Any]]) -> list[DefaultSuggestion]:
        entities = [DefaultSuggestion(**record) for record in records]
        self.db.add_all(entities)
        await self.db.commit()
        return entities
