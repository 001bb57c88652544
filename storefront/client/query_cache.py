from __future__ import annotations

from typing import Any, Callable, Dict, Hashable, Tuple

QueryKey = Tuple[Hashable, ...]


def make_key(path: str, params: Dict[str, Any] | None = None) -> QueryKey:
    if not params:
        return (path,)
    return (path, tuple(sorted((k, v) for k, v in params.items() if v not in (None, ""))))


class QueryCache:
    """Cached query results keyed by (path, params).

    Entries live until a mutation invalidates their path; the next read
    refetches.
    """

    def __init__(self) -> None:
        self._entries: Dict[QueryKey, Any] = {}

    def __contains__(self, key: QueryKey) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: QueryKey, default: Any = None) -> Any:
        return self._entries.get(key, default)

    def set(self, key: QueryKey, value: Any) -> None:
        self._entries[key] = value

    def fetch(self, key: QueryKey, loader: Callable[[], Any]) -> Any:
        if key not in self._entries:
            self._entries[key] = loader()
        return self._entries[key]

    def invalidate(self, path: str) -> int:
        stale = [k for k in self._entries if k[0] == path]
        for k in stale:
            del self._entries[k]
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()
