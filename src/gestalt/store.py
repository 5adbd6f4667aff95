"""Path-aware, lazily wrapped configuration store.

A :class:`Store` wraps a nested mapping. Looking up a key whose value is
itself a mapping returns a fresh child ``Store`` around that *same* mapping,
so writes through a child are visible from the parent. Each child remembers
the breadcrumb of the store it came from, which is only used to build error
messages.

Usage:
    store = Store({"db": {"host": "localhost"}})
    store.db.host              # "localhost"
    store["db"]["host"]        # same thing
    store.db.port = 5432       # writes into the original mapping
    store.get_path(["db", "port"])
"""

import copy
from collections.abc import Mapping
from typing import Any, Callable, Iterable, Iterator, Optional

from .errors import KeyNotFoundError, MethodNotFoundError

ROOT = "root"
SEPARATOR = " -> "


def render_key(key: Any) -> str:
    """Render a key the way it appears in a breadcrumb."""
    if isinstance(key, str):
        escaped = key.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return str(key)


class Store:
    """A nested configuration mapping with attribute-style navigation.

    Methods defined here win over same-named keys in attribute syntax
    (``store.get`` is the method); such keys stay reachable with ``[]``.
    Names starting with an underscore are never treated as keys.

    Args:
        configuration: Mapping to wrap. Not copied.
        key: Key this store was reached by (None for a synthetic root).
        parent: Store the lookup was made on, used for breadcrumbs only.
    """

    __slots__ = ("_configuration", "_key", "_trail")

    def __init__(
        self,
        configuration: Optional[dict] = None,
        key: Any = None,
        parent: Optional["Store"] = None,
    ):
        object.__setattr__(self, "_configuration", {} if configuration is None else configuration)
        object.__setattr__(self, "_key", key)
        # Only the parent's rendered trail is kept, never the parent itself
        trail = parent._crumbs() if parent is not None else ()
        object.__setattr__(self, "_trail", trail)

    # ------------------------------------------------------------------
    # Explicit access

    def get(self, key: Any) -> Any:
        """Return the value stored under ``key``.

        Mapping values are wrapped in a child ``Store``; anything else is
        returned as-is.

        Raises:
            KeyNotFoundError: If ``key`` is not present.
        """
        if key not in self._configuration:
            path = self.describe_path()
            raise KeyNotFoundError(
                f"Key {render_key(key)} is not present at {path}",
                key=key,
                path=path,
            )
        value = self._configuration[key]
        if isinstance(value, Mapping):
            return Store(value, key, self)
        return value

    def set(self, key: Any, value: Any) -> None:
        """Store ``value`` under ``key`` in the wrapped mapping."""
        self._configuration[key] = value

    def has(self, key: Any) -> bool:
        return key in self._configuration

    def get_path(self, keys: Iterable[Any]) -> Any:
        """Follow ``keys`` one level at a time, starting from this store.

        Raises:
            TypeError: If ``keys`` is a single string.
            KeyNotFoundError: At the first missing key, or when a key is
                looked up on a value that is not a mapping.
        """
        if isinstance(keys, str):
            raise TypeError(
                f"get_path expects a sequence of keys, not a string: {keys!r}"
                f" (use {keys.split('.')!r} for a dotted path)"
            )
        node: Any = self
        trail = self._crumbs()
        for key in keys:
            if not isinstance(node, Store):
                path = SEPARATOR.join(trail)
                raise KeyNotFoundError(
                    f"Key {render_key(key)} is not present at {path} "
                    f"(value is a {type(node).__name__}, not a mapping)",
                    key=key,
                    path=path,
                )
            trail = node._crumbs() + (render_key(key),)
            node = node.get(key)
        return node

    def to_dict(self) -> dict:
        """Return a deep copy of the wrapped mapping."""
        return copy.deepcopy(dict(self._configuration))

    # ------------------------------------------------------------------
    # Breadcrumbs

    def _crumbs(self) -> tuple:
        if self._trail:
            return self._trail + (render_key(self._key),)
        if self._key is None:
            return (render_key(ROOT),)
        return (render_key(self._key),)

    def describe_path(self) -> str:
        """Return the breadcrumb from the root to this store.

        Example: ``"root" -> "db" -> "host"``.
        """
        return SEPARATOR.join(self._crumbs())

    breadcrumbs = describe_path

    # ------------------------------------------------------------------
    # Dynamic dispatch

    def dispatch(self, name: str, *args: Any, block: Optional[Callable[[], Any]] = None) -> Any:
        """Resolve a named call against this store.

        Resolution order:
        1. ``"name="`` with exactly one argument assigns the argument.
        2. Without arguments: a ``block`` computes and assigns a value;
           otherwise the key is read.
        3. With arguments: a public method of the wrapped mapping with
           that name is called. ``block``, when given, is passed as the
           last argument.

        Raises:
            KeyNotFoundError: Tier 2 with no block and no such key.
            MethodNotFoundError: Tier 3 with no such mapping method.
        """
        if name.endswith("=") and len(args) == 1:
            self.set(name[:-1], args[0])
            return args[0]

        if not args:
            if block is not None:
                result = block()
                self.set(name, result)
                return result
            return self.get(name)

        operation = self._mapping_operation(name)
        if operation is None:
            raise MethodNotFoundError(name, self.describe_path())
        if block is not None:
            args = args + (block,)
        return operation(*args)

    def _mapping_operation(self, name: str) -> Optional[Callable[..., Any]]:
        if name.startswith("_"):
            return None
        operation = getattr(self._configuration, name, None)
        return operation if callable(operation) else None

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails. Underscore names belong to
        # the store itself (and to the copy/pickle protocol).
        if name.startswith("_"):
            raise AttributeError(name)
        if name in self._configuration:
            return self.get(name)
        operation = self._mapping_operation(name)
        if operation is not None:
            return operation
        return self.get(name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in Store.__slots__:
            object.__setattr__(self, name, value)
            return
        if name.startswith("_"):
            raise AttributeError(f"Cannot assign reserved attribute '{name}' on Store")
        self.set(name, value)

    # ------------------------------------------------------------------
    # Mapping-style sugar

    def __getitem__(self, key: Any) -> Any:
        return self.get(key)

    def __setitem__(self, key: Any, value: Any) -> None:
        self.set(key, value)

    def __contains__(self, key: Any) -> bool:
        return self.has(key)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._configuration)

    def __len__(self) -> int:
        return len(self._configuration)

    def __repr__(self) -> str:
        return f"<Store {self.describe_path()} keys={list(self._configuration)!r}>"
