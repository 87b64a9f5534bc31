"""
Mutable request parameter store.

Starlette's QueryParams and FormData are immutable, so each handler keeps
its own ordered multi-valued copy. Validation reads it as a snapshot and
writes validated values (including defaults) back into it.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any


class ParameterStore:
    """Ordered mapping of parameter name to one or more values."""

    def __init__(self, items: Iterable[tuple[str, Any]] = ()):
        self._values: dict[str, list[Any]] = {}
        for name, value in items:
            self._values.setdefault(name, []).append(value)

    @classmethod
    def from_multi_items(cls, *sources: Any) -> ParameterStore:
        """
        Build a store from objects exposing multi_items() (QueryParams, FormData).

        Upload fields are kept with their UploadFile as the value so their
        names take part in validation like any other parameter.
        """
        items: list[tuple[str, Any]] = []
        for source in sources:
            items.extend(source.multi_items())
        return cls(items)

    def get_all(self) -> dict[str, Any]:
        """
        Snapshot every parameter.

        Returns:
            Mapping of name to a scalar for single values, or a list for
            parameters submitted more than once
        """
        return {name: values[0] if len(values) == 1 else list(values) for name, values in self._values.items()}

    def get(self, name: str, default: Any = None) -> Any:
        """Get the first value of a parameter."""
        values = self._values.get(name)
        return values[0] if values else default

    def getlist(self, name: str) -> list[Any]:
        return list(self._values.get(name, []))

    def set(self, name: str, value: Any) -> None:
        """Replace all values of a parameter; lists and tuples store several values."""
        if isinstance(value, (list, tuple)):
            self._values[name] = list(value)
        else:
            self._values[name] = [value]

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ParameterStore({self.get_all()!r})"
