from __future__ import annotations

from typing import Generic, TypeVar

T = TypeVar("T")


class MemoryCache(Generic[T]):
    """Process-local key/value memo.

    Values must be pure functions of their key; concurrent writers of the
    same key simply store the same value twice.
    """

    def __init__(self) -> None:
        self._items: dict[str, T] = {}

    def get(self, key: str) -> T | None:
        return self._items.get(key)

    def set(self, key: str, value: T) -> None:
        self._items[key] = value

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)


_PLACEHOLDER_CACHE: MemoryCache[str] = MemoryCache()


def get_placeholder_cache() -> MemoryCache[str]:
    return _PLACEHOLDER_CACHE
