from typing import Any, Iterable

from schemas.suggestion import GenerationKey, WordCandidate


def normalize_word(value: str | None) -> str:
    return (value or "").strip()


def known_words(user_words: Iterable[Any], user_suggestions: Iterable[Any]) -> set[str]:
    """Words the user already has, either learned (`text`) or suggested (`word`)."""
    known = {normalize_word(item.text) for item in user_words}
    known.update(normalize_word(item.word) for item in user_suggestions)
    known.discard("")
    return known


def merge_candidates(
    candidates: Iterable[WordCandidate],
    *,
    key: GenerationKey,
    user_words: Iterable[Any],
    user_suggestions: Iterable[Any],
    excluded_words: Iterable[str] = (),
) -> list[dict[str, str]]:
    """Drop candidates the user already knows and build insertable suggestion records.

    Matching is case-sensitive on the stripped word. Repeats inside
    `candidates` keep their first occurrence and survivors stay in input order.
    """
    seen = known_words(user_words, user_suggestions)
    seen.update(normalize_word(word) for word in excluded_words)

    records = []
    for candidate in candidates:
        word = normalize_word(candidate.word)
        if not word or word in seen:
            continue
        seen.add(word)
        records.append(
            {
                "word": word,
                "translation": normalize_word(candidate.translation),
                "first_lang": key.first_lang,
                "second_lang": key.second_lang,
                "user_id": key.user_id,
            }
        )
    return records
