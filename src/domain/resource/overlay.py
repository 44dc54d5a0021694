"""Draft overlay: explicitly-set field values layered over an origin."""
from __future__ import annotations

from typing import Any, Dict, Iterator, Tuple


class _Unset:
    """Marker for a field that has no override."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (_Unset, ())


UNSET: Any = _Unset()


class Overlay:
    """Field name -> override value.

    A field that was never set reads as ``UNSET``; a field set to ``None``
    reads as ``None``. The two are never conflated.
    """

    def __init__(self) -> None:
        self._values: Dict[str, Any] = {}

    def set(self, field: str, value: Any) -> None:
        self._values[field] = value

    def unset(self, field: str) -> None:
        self._values.pop(field, None)

    def get(self, field: str) -> Any:
        return self._values.get(field, UNSET)

    def is_set(self, field: str) -> bool:
        return field in self._values

    def items(self) -> Iterator[Tuple[str, Any]]:
        return iter(list(self._values.items()))

    def clear(self) -> None:
        self._values.clear()

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._values)

    def __contains__(self, field: object) -> bool:
        return field in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Overlay({self._values!r})"
