import logging
from typing import Any, Awaitable, Callable, Sequence

from core.config import settings
from schemas.suggestion import CandidateBatch, CandidateSource, GeneratedWords, GenerationKey, WordCandidate
from services.gpt_client import fetch_new_words_suggestions
from services.suggestion_merger import known_words
from services.suggestion_source import SuggestionSource

logger = logging.getLogger(__name__)

FetchWords = Callable[..., Awaitable[GeneratedWords]]


def select_recent_words(words: Sequence[Any], limit: int) -> list[Any]:
    """Top `limit` words by `add_date`, newest first.

    Words sharing a date keep the order they were read in; words without a
    date come after every dated one.
    """
    if limit <= 0:
        return []
    dated = [item for item in words if item.add_date is not None]
    undated = [item for item in words if item.add_date is None]
    # sorted() is stable under reverse=True, so ties keep read order
    ordered = sorted(dated, key=lambda item: item.add_date, reverse=True) + undated
    return ordered[:limit]


class CandidateGenerator:
    def __init__(
        self,
        source: SuggestionSource,
        fetch_words: FetchWords = fetch_new_words_suggestions,
        *,
        context_size: int | None = None,
    ):
        self.source = source
        self.fetch_words = fetch_words
        self.context_size = settings.SUGGESTION_CONTEXT_WORDS if context_size is None else context_size

    async def generate(
        self,
        key: GenerationKey,
        *,
        user_words: Sequence[Any],
        user_suggestions: Sequence[Any],
    ) -> CandidateBatch:
        known = known_words(user_words, user_suggestions)
        unseen = await self.source.unseen_defaults(key, known)

        if unseen:
            logger.debug("Using %d unseen defaults for %s", len(unseen), key)
            candidates = [
                WordCandidate(word=item.word, translation=item.translation or "")
                for item in unseen
            ]
            return CandidateBatch(words=candidates, source=CandidateSource.DEFAULTS)

        excluded = sorted(known)
        if user_words:
            context = [item.text for item in select_recent_words(user_words, self.context_size)]
            logger.debug("Asking LLM for %s with context %s", key, context)
            generated = await self.fetch_words(
                key.first_lang,
                key.second_lang,
                context,
                excluded_words=excluded,
            )
            source = CandidateSource.USER_CONTEXT
        else:
            logger.debug("Cold start for %s", key)
            generated = await self.fetch_words(
                key.first_lang,
                key.second_lang,
                [],
                True,
                excluded_words=excluded,
            )
            source = CandidateSource.COLD_START

        return CandidateBatch(
            words=generated.words,
            metadata=generated.metadata,
            source=source,
        )
