import asyncio
from datetime import datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, Mock

import pytest

from core.config import settings
from schemas.suggestion import GeneratedWords, GenerationReport, WordCandidate
from services.generation_lock import GenerationLock
from services.suggestions_generator import SuggestionsGenerator

USER_ID = "user1"
FIRST_LANG = "en"
SECOND_LANG = "pl"
TOKEN = f"{USER_ID}_{FIRST_LANG}_{SECOND_LANG}"


def generated(*pairs, metadata=None):
    return GeneratedWords(
        words=[WordCandidate(word=word, translation=translation) for word, translation in pairs],
        metadata=metadata or {},
    )


@pytest.fixture
def lock():
    return Mock(wraps=GenerationLock())


@pytest.fixture
def fetch_words():
    return AsyncMock(return_value=generated())


@pytest.fixture
def report_sink():
    return AsyncMock(return_value=None)


@pytest.fixture
def make_generator(lock, fetch_words, report_sink):
    def make(words=(), suggestions=(), defaults=(), **options):
        generator = SuggestionsGenerator(
            MagicMock(),
            lock=lock,
            fetch_words=fetch_words,
            report_sink=report_sink,
            **options,
        )
        source = generator.source
        source.word_repo.find = AsyncMock(return_value=list(words))
        source.suggestion_repo.find = AsyncMock(return_value=list(suggestions))
        source.suggestion_repo.insert_many = AsyncMock(return_value=None)
        source.default_repo.find = AsyncMock(return_value=list(defaults))
        return generator

    return make


def run(generator):
    return asyncio.run(generator.generate(USER_ID, FIRST_LANG, SECOND_LANG))


def test_skips_when_generation_in_progress(make_generator, lock, fetch_words):
    generator = make_generator()
    lock.start(TOKEN)
    lock.reset_mock()

    assert run(generator) is None

    lock.is_in_progress.assert_called_once()
    assert lock.is_in_progress.call_args.args[0].token == TOKEN
    lock.start.assert_not_called()
    lock.end.assert_not_called()
    generator.source.word_repo.find.assert_not_awaited()
    generator.source.suggestion_repo.find.assert_not_awaited()
    generator.source.default_repo.find.assert_not_awaited()
    fetch_words.assert_not_awaited()


def test_starts_and_ends_generation(make_generator, lock):
    generator = make_generator()

    run(generator)

    assert lock.start.call_args.args[0].token == TOKEN
    assert lock.end.call_args.args[0].token == TOKEN
    assert not lock.is_in_progress(TOKEN)


def test_queries_are_scoped_to_user_and_pair(make_generator):
    generator = make_generator()

    run(generator)

    generator.source.word_repo.find.assert_awaited_once_with(
        user_id=USER_ID, first_lang=FIRST_LANG, second_lang=SECOND_LANG
    )
    generator.source.suggestion_repo.find.assert_awaited_once_with(
        user_id=USER_ID, first_lang=FIRST_LANG, second_lang=SECOND_LANG
    )
    generator.source.default_repo.find.assert_awaited_once_with(first_lang=FIRST_LANG, second_lang=SECOND_LANG)


def test_unseen_defaults_are_used_without_llm(make_generator, fetch_words, report_sink):
    generator = make_generator(defaults=[SimpleNamespace(word="banana", translation="banan")])

    assert run(generator) == 1

    fetch_words.assert_not_awaited()
    report_sink.assert_not_awaited()
    generator.source.suggestion_repo.insert_many.assert_awaited_once_with(
        [
            {
                "word": "banana",
                "translation": "banan",
                "first_lang": FIRST_LANG,
                "second_lang": SECOND_LANG,
                "user_id": USER_ID,
            }
        ]
    )


def test_all_unseen_defaults_are_inserted(make_generator, fetch_words):
    defaults = [SimpleNamespace(word=f"word{i}", translation=f"slowo{i}") for i in range(12)]
    generator = make_generator(defaults=defaults)

    assert run(generator) == 12

    fetch_words.assert_not_awaited()
    records = generator.source.suggestion_repo.insert_many.await_args.args[0]
    assert [r["word"] for r in records] == [f"word{i}" for i in range(12)]


def test_cold_start_uses_llm(make_generator, fetch_words):
    fetch_words.return_value = generated(("mela", "jabłko"), metadata={"model": "gpt-4o-mini", "success": True})
    generator = make_generator()

    run(generator)

    fetch_words.assert_awaited_once_with(FIRST_LANG, SECOND_LANG, [], True, excluded_words=[])
    records = generator.source.suggestion_repo.insert_many.await_args.args[0]
    assert records == [
        {
            "word": "mela",
            "translation": "jabłko",
            "first_lang": FIRST_LANG,
            "second_lang": SECOND_LANG,
            "user_id": USER_ID,
        }
    ]


def test_recent_user_words_are_llm_context(make_generator, fetch_words):
    words = [
        SimpleNamespace(text="cat", add_date=datetime(2025, 6, 1)),
        SimpleNamespace(text="dog", add_date=datetime(2025, 6, 5)),
        SimpleNamespace(text="apple", add_date=datetime(2025, 6, 10)),
    ]
    generator = make_generator(words=words)

    run(generator)

    fetch_words.assert_awaited_once_with(
        FIRST_LANG, SECOND_LANG, ["apple", "dog", "cat"], excluded_words=["apple", "cat", "dog"]
    )


def test_only_unique_suggestions_are_stored(make_generator, fetch_words):
    fetch_words.return_value = generated(("hello", "cześć"), ("newword", "nowe słowo"), ("test", "testowe"))
    generator = make_generator(
        words=[SimpleNamespace(text="world", add_date=datetime(2025, 6, 1))],
        suggestions=[SimpleNamespace(word="test")],
        defaults=[SimpleNamespace(word="world", translation="świat"), SimpleNamespace(word="test", translation="test")],
    )

    run(generator)

    records = generator.source.suggestion_repo.insert_many.await_args.args[0]
    assert [r["word"] for r in records] == ["hello", "newword"]


def test_no_insert_when_nothing_survives(make_generator, fetch_words, report_sink):
    fetch_words.return_value = generated(("test", "testowe"), metadata={"prompt_tokens": 10})
    generator = make_generator(suggestions=[SimpleNamespace(word="test")])

    assert run(generator) == 0

    generator.source.suggestion_repo.insert_many.assert_not_awaited()
    assert report_sink.await_args.args[0].words_added == 0


def test_prompt_report_counts_inserted_words(make_generator, fetch_words, report_sink):
    fetch_words.return_value = generated(
        ("newword", "nowe słowo"),
        ("test", "testowe"),
        metadata={"prompt_tokens": 100, "completion_tokens": 50, "model": "gpt-4o-mini"},
    )
    generator = make_generator(suggestions=[SimpleNamespace(word="test")])

    run(generator)

    report_sink.assert_awaited_once()
    report = report_sink.await_args.args[0]
    assert isinstance(report, GenerationReport)
    assert report.words_added == 1
    assert report.prompt_tokens == 100
    assert report.completion_tokens == 50
    assert (report.user_id, report.first_lang, report.second_lang) == (USER_ID, FIRST_LANG, SECOND_LANG)


def test_no_report_without_metadata(make_generator, fetch_words, report_sink):
    fetch_words.return_value = generated(("newword", "nowe słowo"))
    generator = make_generator()

    run(generator)

    report_sink.assert_not_awaited()


def test_report_failure_does_not_fail_generation(make_generator, fetch_words, report_sink, lock):
    fetch_words.return_value = generated(("newword", "nowe słowo"), metadata={"prompt_tokens": 1})
    report_sink.side_effect = RuntimeError("audit store down")
    generator = make_generator()

    assert run(generator) == 1

    generator.source.suggestion_repo.insert_many.assert_awaited_once()
    assert not lock.is_in_progress(TOKEN)


def test_llm_failure_releases_lock(make_generator, fetch_words, report_sink, lock):
    fetch_words.side_effect = RuntimeError("llm down")
    generator = make_generator()

    with pytest.raises(RuntimeError, match="llm down"):
        run(generator)

    lock.end.assert_called_once()
    assert not lock.is_in_progress(TOKEN)
    generator.source.suggestion_repo.insert_many.assert_not_awaited()
    report_sink.assert_not_awaited()


def test_insert_failure_propagates(make_generator, fetch_words, lock):
    fetch_words.return_value = generated(("newword", "nowe słowo"))
    generator = make_generator()
    generator.source.suggestion_repo.insert_many.side_effect = RuntimeError("write failed")

    with pytest.raises(RuntimeError, match="write failed"):
        run(generator)

    assert not lock.is_in_progress(TOKEN)


def test_concurrent_calls_run_once(make_generator, fetch_words):
    async def slow_fetch(*args, **kwargs):
        await asyncio.sleep(0.01)
        return generated(("newword", "nowe słowo"))

    fetch_words.side_effect = slow_fetch
    generator = make_generator()

    async def scenario():
        return await asyncio.gather(
            generator.generate(USER_ID, FIRST_LANG, SECOND_LANG),
            generator.generate(USER_ID, FIRST_LANG, SECOND_LANG),
        )

    assert asyncio.run(scenario()) == [1, None]
    fetch_words.assert_awaited_once()
    generator.source.word_repo.find.assert_awaited_once()
    generator.source.suggestion_repo.insert_many.assert_awaited_once()


def test_different_keys_do_not_contend(make_generator, fetch_words):
    async def slow_fetch(*args, **kwargs):
        await asyncio.sleep(0.01)
        return generated(("newword", "nowe słowo"))

    fetch_words.side_effect = slow_fetch
    generator = make_generator()

    async def scenario():
        return await asyncio.gather(
            generator.generate("user1", FIRST_LANG, SECOND_LANG),
            generator.generate("user2", FIRST_LANG, SECOND_LANG),
        )

    assert asyncio.run(scenario()) == [1, 1]
    assert fetch_words.await_count == 2


def test_timeout_releases_lock(make_generator, fetch_words, lock):
    async def stuck_fetch(*args, **kwargs):
        await asyncio.sleep(5)

    fetch_words.side_effect = stuck_fetch
    generator = make_generator(timeout=0.01)

    with pytest.raises(asyncio.TimeoutError):
        run(generator)

    assert not lock.is_in_progress(TOKEN)


def test_timeout_defaults_to_settings(make_generator, fetch_words, lock, monkeypatch):
    async def stuck_fetch(*args, **kwargs):
        await asyncio.sleep(5)

    monkeypatch.setattr(settings, "GENERATION_TIMEOUT_SECONDS", 0.01)
    fetch_words.side_effect = stuck_fetch
    generator = make_generator()

    with pytest.raises(asyncio.TimeoutError):
        run(generator)

    assert not lock.is_in_progress(TOKEN)


def test_explicit_none_disables_configured_timeout(make_generator, fetch_words, monkeypatch):
    async def slow_fetch(*args, **kwargs):
        await asyncio.sleep(0.05)
        return generated(("newword", "nowe słowo"))

    monkeypatch.setattr(settings, "GENERATION_TIMEOUT_SECONDS", 0.001)
    fetch_words.side_effect = slow_fetch
    generator = make_generator(timeout=None)

    assert run(generator) == 1


def test_zero_timeout_is_a_deadline(make_generator, fetch_words, lock):
    async def slow_fetch(*args, **kwargs):
        await asyncio.sleep(0.05)
        return generated(("newword", "nowe słowo"))

    fetch_words.side_effect = slow_fetch
    generator = make_generator(timeout=0)

    with pytest.raises(asyncio.TimeoutError):
        run(generator)

    assert not lock.is_in_progress(TOKEN)
