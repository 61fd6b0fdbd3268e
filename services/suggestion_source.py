from sqlalchemy.ext.asyncio import AsyncSession

from models.defaultSuggestion import DefaultSuggestion
from models.word import Word
from models.wordSuggestion import WordSuggestion
from repositories.suggestion_repo import DefaultSuggestionRepository, WordSuggestionRepository
from repositories.word_repo import UserWordRepository
from schemas.suggestion import GenerationKey


class SuggestionSource:
    def __init__(self, db: AsyncSession):
        self.word_repo = UserWordRepository(db)
        self.suggestion_repo = WordSuggestionRepository(db)
        self.default_repo = DefaultSuggestionRepository(db)

    async def user_words(self, key: GenerationKey) -> list[Word]:
        return await self.word_repo.find(
            user_id=key.user_id,
            first_lang=key.first_lang,
            second_lang=key.second_lang,
        )

    async def user_suggestions(self, key: GenerationKey) -> list[WordSuggestion]:
        return await self.suggestion_repo.find(
            user_id=key.user_id,
            first_lang=key.first_lang,
            second_lang=key.second_lang,
        )

    async def default_suggestions(self, key: GenerationKey) -> list[DefaultSuggestion]:
        return await self.default_repo.find(first_lang=key.first_lang, second_lang=key.second_lang)

    async def unseen_defaults(
        self,
        key: GenerationKey,
        known_words: set[str],
    ) -> list[DefaultSuggestion]:
        """Defaults for the pair that the user has not met yet, in pool order."""
        defaults = await self.default_suggestions(key)
        return [item for item in defaults if (item.word or "").strip() not in known_words]
