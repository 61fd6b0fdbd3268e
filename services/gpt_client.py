import json
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from core.config import settings
from schemas.suggestion import GeneratedWords, WordCandidate

logger = logging.getLogger(__name__)

LANG_DISPLAY = {
    "en": "English",
    "de": "German",
    "pl": "Polish",
    "es": "Spanish",
    "fr": "French",
    "it": "Italian",
    "pt": "Portuguese",
    "uk": "Ukrainian",
    "ru": "Russian",
}


class GptClientError(RuntimeError):
    pass


def lang_name(code: str) -> str:
    return LANG_DISPLAY.get(code.lower(), code)


def build_prompt(
    first_lang: str,
    second_lang: str,
    context_words: list[str],
    cold_start: bool = False,
    excluded_words: list[str] | None = None,
    count: int | None = None,
) -> dict[str, Any]:
    count = count or settings.SUGGESTION_BATCH_SIZE
    source = lang_name(first_lang)
    target = lang_name(second_lang)

    system = (
        "You help a language learner build vocabulary. "
        "Always return STRICT JSON only (no markdown, no code fences, no prose)."
    )

    lines = [f"Suggest exactly {count} useful {source} words for a learner whose translation language is {target}."]
    if cold_start:
        lines.append("The learner has no saved vocabulary yet, so start with very common everyday words.")
    elif context_words:
        lines.append(
            "The learner recently saved these words; suggest related words of a similar level: "
            + ", ".join(context_words)
            + "."
        )
    if excluded_words:
        lines.append("Do NOT suggest any of these words: " + ", ".join(excluded_words) + ".")
    lines.append(
        'Output a JSON object: {"words": [{"word": "<' + source + ' word>", "translation": "<' + target + ' translation>"}]}'
    )

    return {
        "model": settings.OPENAI_MODEL,
        "messages": [
            {"role": "system", "content": system},
            {"role": "user", "content": "\n".join(lines)},
        ],
        "temperature": 0.7,
        "response_format": {"type": "json_object"},
    }


def parse_words(content: str) -> list[WordCandidate]:
    try:
        payload = json.loads(content)
    except (TypeError, json.JSONDecodeError) as exc:
        raise GptClientError("Completion is not valid JSON") from exc

    items = payload.get("words") if isinstance(payload, dict) else payload
    if not isinstance(items, list):
        raise GptClientError("Completion has no word list")
    try:
        return [WordCandidate.model_validate(item) for item in items]
    except ValidationError as exc:
        raise GptClientError("Unexpected word entry in completion") from exc


async def fetch_new_words_suggestions(
    first_lang: str,
    second_lang: str,
    context_words: list[str],
    cold_start: bool = False,
    excluded_words: list[str] | None = None,
    *,
    client: httpx.AsyncClient | None = None,
) -> GeneratedWords:
    api_key = settings.OPENAI_API_KEY
    if not api_key:
        raise GptClientError("OPENAI_API_KEY not configured")

    excluded_words = list(excluded_words or [])
    body = build_prompt(first_lang, second_lang, context_words, cold_start, excluded_words)
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }

    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=settings.OPENAI_TIMEOUT_SECONDS)
    try:
        r = await client.post(settings.OPENAI_URL, headers=headers, json=body)
        r.raise_for_status()
        data = r.json()
    except httpx.HTTPError as exc:
        raise GptClientError("Completion request failed") from exc
    except ValueError as exc:
        raise GptClientError("Completion response is not JSON") from exc
    finally:
        if owns_client:
            await client.aclose()

    if not isinstance(data, dict):
        raise GptClientError("Unexpected completion response")
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        raise GptClientError("Unexpected completion response")
    message = choices[0].get("message")
    if not isinstance(message, dict):
        raise GptClientError("Completion has no message")
    words = parse_words(message.get("content"))

    usage = data.get("usage")
    if not isinstance(usage, dict):
        usage = {}
    metadata = {
        "prompt": body["messages"][-1]["content"],
        "model": data.get("model", body["model"]),
        "words": [item.word for item in words],
        "context_words": list(context_words),
        "excluded_words": excluded_words,
        "total_words": len(words),
        "has_excluded_words": bool(excluded_words),
        "cold_start": cold_start,
        "success": True,
        "prompt_tokens": usage.get("prompt_tokens"),
        "completion_tokens": usage.get("completion_tokens"),
        "total_tokens": usage.get("total_tokens"),
    }
    logger.info(
        "LLM returned %d words for %s->%s (tokens: %s)",
        len(words),
        first_lang,
        second_lang,
        metadata["total_tokens"],
    )
    return GeneratedWords(words=words, metadata=metadata)
