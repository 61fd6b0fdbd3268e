from sqlalchemy.ext.asyncio import AsyncSession

from models.defaultSuggestion import DefaultSuggestion
from repositories.suggestion_repo import DefaultSuggestionRepository
from services.suggestion_merger import normalize_word


class DefaultSuggestionServices:
    def __init__(self, db: AsyncSession):
        self.repo = DefaultSuggestionRepository(db)

    async def seed(self, *, first_lang: str, second_lang: str, pairs: list[tuple[str, str]]) -> list[DefaultSuggestion]:
        """Add (word, translation) pairs to the pool, skipping words it already holds."""
        existing = {normalize_word(item.word) for item in await self.repo.find(first_lang=first_lang, second_lang=second_lang)}
        records = []
        for word, translation in pairs:
            word = normalize_word(word)
            if not word or word in existing:
                continue
            existing.add(word)
            records.append(
                {
                    "word": word,
                    "translation": normalize_word(translation),
                    "first_lang": first_lang,
                    "second_lang": second_lang,
                }
            )
        if not records:
            return []
        return await self.repo.insert_many(records)
