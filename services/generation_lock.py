import threading
from contextlib import asynccontextmanager
from typing import AsyncIterator

from schemas.suggestion import GenerationKey


class GenerationLock:
    """Keyed in-flight markers for suggestion generation.

    This is a try-lock, not a queue: a caller that finds its key taken is
    expected to give up rather than wait. Markers live in process memory only,
    so a restart clears every key.
    """

    def __init__(self):
        self._keys: set[str] = set()
        self._guard = threading.Lock()

    @staticmethod
    def _token(key: GenerationKey | str) -> str:
        return key.token if isinstance(key, GenerationKey) else key

    def is_in_progress(self, key: GenerationKey | str) -> bool:
        with self._guard:
            return self._token(key) in self._keys

    def start(self, key: GenerationKey | str) -> None:
        with self._guard:
            self._keys.add(self._token(key))

    def end(self, key: GenerationKey | str) -> None:
        with self._guard:
            self._keys.discard(self._token(key))

    def try_acquire(self, key: GenerationKey | str) -> bool:
        token = self._token(key)
        with self._guard:
            if token in self._keys:
                return False
            self._keys.add(token)
            return True

    release = end

    @asynccontextmanager
    async def hold(self, key: GenerationKey | str) -> AsyncIterator[bool]:
        if not self.try_acquire(key):
            yield False
            return
        try:
            yield True
        finally:
            self.end(key)

    def in_progress(self) -> frozenset[str]:
        with self._guard:
            return frozenset(self._keys)


generation_lock = GenerationLock()
