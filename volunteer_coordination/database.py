from collections.abc import Iterator, MutableMapping
from contextlib import contextmanager
from typing import Generic, TypeVar

from volunteer_coordination.errors import DuplicateRecordError

K = TypeVar("K")
V = TypeVar("V")


class InMemoryKeyValueDatabase(Generic[K, V]):
    """
    Simple in-memory key/value database with snapshot transactions.
    """

    def __init__(self) -> None:
        self._store: MutableMapping[K, V] = {}

    def put(self, key: K, value: V) -> None:
        self._store[key] = value

    def insert(self, key: K, value: V) -> None:
        """
        Store a value under a key that must not exist yet.
        Raises DuplicateRecordError otherwise.
        """
        if key in self._store:
            raise DuplicateRecordError(key)
        self._store[key] = value

    def get(self, key: K) -> V | None:
        return self._store.get(key)

    def delete(self, key: K) -> None:
        self._store.pop(key, None)

    def all(self) -> list[V]:
        return list(self._store.values())

    def __contains__(self, key: object) -> bool:
        return key in self._store

    def __len__(self) -> int:
        return len(self._store)

    @contextmanager
    def transaction(self) -> Iterator["InMemoryKeyValueDatabase[K, V]"]:
        """
        Run a block of writes all-or-nothing.

        Values are treated as immutable, so a shallow copy of the mapping is
        enough to restore the previous state when the block raises.
        """
        snapshot = dict(self._store)
        try:
            yield self
        except BaseException:
            self._store.clear()
            self._store.update(snapshot)
            raise
