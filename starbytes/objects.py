"""Runtime values that have no direct built-in Python counterpart.

Strings, arrays, dictionaries and booleans are plain ``str``, ``list``,
``dict`` and ``bool``; numbers, class types, class instances and function
references are modelled here.
"""

from __future__ import annotations

import enum
import itertools
from dataclasses import dataclass, field
from typing import Any, Optional, Union

MAX_PROPERTY_NAME = 100


class Compare(enum.IntEnum):
    """Outcome of comparing two runtime values."""

    EQUAL = 0x00
    LESS = 0x01
    GREATER = 0x02
    NOTEQUAL = LESS | GREATER


class NumType(enum.Enum):
    FLOAT = "float"
    INT = "int"


def _compare(lhs: Any, rhs: Any) -> Compare:
    if lhs == rhs:
        return Compare.EQUAL
    if lhs < rhs:
        return Compare.LESS
    if lhs > rhs:
        return Compare.GREATER
    return Compare.NOTEQUAL


@dataclass(frozen=True)
class Num:
    """A number that is either an integer or a floating point value."""

    kind: NumType
    value: Union[int, float]

    def __post_init__(self) -> None:
        converted = int(self.value) if self.kind is NumType.INT else float(self.value)
        object.__setattr__(self, "value", converted)

    def _result_kind(self, other: "Num") -> NumType:
        if NumType.FLOAT in (self.kind, other.kind):
            return NumType.FLOAT
        return NumType.INT

    def add(self, other: "Num") -> "Num":
        return Num(self._result_kind(other), self.value + other.value)

    def sub(self, other: "Num") -> "Num":
        return Num(self._result_kind(other), self.value - other.value)

    def convert_to(self, kind: NumType) -> "Num":
        return Num(kind, self.value)

    def compare(self, other: "Num") -> Compare:
        return _compare(self.value, other.value)


def compare_strings(lhs: str, rhs: str) -> Compare:
    """Compare two strings in code point order."""
    return _compare(lhs, rhs)


_class_ids = itertools.count(1)


@dataclass(frozen=True)
class ClassType:
    """A user defined class; every class made gets its own id."""

    name: str
    id: int


def make_class(name: str) -> ClassType:
    return ClassType(name, next(_class_ids))


@dataclass(eq=False)
class ClassObject:
    """An instance of a user defined class with named properties."""

    class_type: ClassType
    properties: dict[str, Any] = field(default_factory=dict)

    def add_property(self, name: str, value: Any) -> None:
        if len(name.encode("utf-8")) >= MAX_PROPERTY_NAME:
            raise ValueError(
                f"Property name is longer than {MAX_PROPERTY_NAME - 1} bytes: {name!r}"
            )
        self.properties[name] = value

    def get_property(self, name: str) -> Optional[Any]:
        return self.properties.get(name)


@dataclass(frozen=True)
class FuncRef:
    """A reference to a function template."""

    template: Any