"""Session-scoped cache of facts about the logged in user's server.

Entries live in a mapping owned by the caller's session (a web session
dictionary, or a plain dict in tests) under a scope derived from the server
and user, so two logins never see each other's entries. A populated key is
returned as-is until it is removed or the session is cleared.

Example:
    >>> cache = SessionCache({}, server="localhost:3306", user="pma")
    >>> cache.set("is_amazon_rds", False)
    >>> cache.get("is_amazon_rds")
    False
"""

from typing import Any, Callable, Dict, MutableMapping, Optional

_MISSING = object()


class SessionCache:
    """Key/value store for one login session."""

    ROOT_KEY = "cache"

    def __init__(
        self,
        storage: Optional[MutableMapping[str, Any]] = None,
        *,
        server: str = "default",
        user: str = "",
    ) -> None:
        self._storage: MutableMapping[str, Any] = storage if storage is not None else {}
        self.scope = f"server_{server}/{user}"

    def _entries(self, create: bool = False) -> Optional[Dict[str, Any]]:
        root = self._storage.get(self.ROOT_KEY)
        if root is None:
            if not create:
                return None
            root = {}
            self._storage[self.ROOT_KEY] = root
        entries = root.get(self.scope)
        if entries is None and create:
            entries = {}
            root[self.scope] = entries
        return entries

    def has(self, key: str) -> bool:
        entries = self._entries()
        return entries is not None and key in entries

    def get(self, key: str, default: Any = None) -> Any:
        entries = self._entries()
        if entries is None:
            return default
        return entries.get(key, default)

    def get_or_compute(self, key: str, compute: Callable[[], Any]) -> Any:
        """Return the cached value, computing and storing it on a miss."""
        entries = self._entries()
        value = _MISSING if entries is None else entries.get(key, _MISSING)
        if value is _MISSING:
            value = compute()
            self.set(key, value)
        return value

    def set(self, key: str, value: Any) -> None:
        self._entries(create=True)[key] = value

    def remove(self, key: str) -> None:
        entries = self._entries()
        if entries is not None:
            entries.pop(key, None)

    def clear(self) -> None:
        """Drop every entry of this scope, as on logout."""
        root = self._storage.get(self.ROOT_KEY)
        if root is not None:
            root.pop(self.scope, None)

    def __repr__(self) -> str:
        return f"SessionCache(scope={self.scope!r})"
