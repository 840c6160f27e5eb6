from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

ElementValue = bool | int | float | str | bytes


@dataclass(frozen=True)
class Element:
    """One named, typed value from a self-describing advertisement."""

    name: str
    value: ElementValue
    unit: str = ""

    def value_bool(self) -> bool | None:
        if isinstance(self.value, bool):
            return self.value
        return None

    def value_float(self) -> float | None:
        # bool is an int subclass; a binary state is not a number
        if isinstance(self.value, bool):
            return None
        if isinstance(self.value, (int, float)):
            return float(self.value)
        return None

    def value_int(self) -> int | None:
        if isinstance(self.value, bool):
            return None
        if isinstance(self.value, int):
            return self.value
        if isinstance(self.value, float) and self.value.is_integer():
            return int(self.value)
        return None

    def __str__(self) -> str:
        return f"{self.name}: {self.value}{self.unit}"


@dataclass(frozen=True)
class Envelope:
    format: str
    elements: list[Element] = field(default_factory=list)

    def __iter__(self) -> Iterator[Element]:
        return iter(self.elements)
