"""
Named lookup tables for pluggable components (operators, selectors).
"""

from __future__ import annotations

from typing import Any, Callable, Generic, Iterable, Iterator, TypeVar

T = TypeVar("T")

_MISSING: Any = object()


class Registry(Generic[T]):
    """
    Maps names to components and refuses silent redefinition.

    ``register`` works as a plain call or as a decorator::

        @reg.register("bitflip")
        class BitFlipMutation: ...

    Iteration follows registration order; ``list()`` is sorted for messages.
    """

    def __init__(self, name: str = "Registry") -> None:
        self._name = name
        self._entries: dict[str, T] = {}

    @property
    def name(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"Registry({self._name!r}, {len(self._entries)} entries)"

    def _add(self, key: str, item: T, override: bool) -> T:
        if not override and key in self._entries:
            raise ValueError(f"'{key}' already exists in registry '{self._name}'; pass override=True to replace it")
        self._entries[key] = item
        return item

    def register(self, key: str, item: T | None = None, *, override: bool = False) -> Callable[[T], T] | T:
        """Add ``item`` under ``key``, or return a decorator when ``item`` is omitted."""
        if item is not None:
            return self._add(key, item, override)

        def decorator(obj: T) -> T:
            return self._add(key, obj, override)

        return decorator

    def get(self, key: str, default: Any = _MISSING) -> T:
        """Look ``key`` up; KeyError unless a default is supplied."""
        try:
            return self._entries[key]
        except KeyError:
            if default is _MISSING:
                raise KeyError(f"'{key}' not found in registry '{self._name}'") from None
            return default

    def list(self) -> list[str]:
        return sorted(self._entries)

    def items(self) -> Iterable[tuple[str, T]]:
        return self._entries.items()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __getitem__(self, key: str) -> T:
        return self.get(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["Registry"]
