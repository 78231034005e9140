"""Predicate values produced by the search compiler.

They are plain data so a data source can either evaluate them in-process
(``evaluate``) or translate them into its own query language.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from gridquery.services.property_resolver import PropertyAccessor


@dataclass(frozen=True)
class Contains:
    """Field is present and its text contains ``text`` (ordinal, case-sensitive).

    With ``stringify`` the field value is converted with ``str()`` first.
    """

    accessor: PropertyAccessor
    text: str
    stringify: bool = False

    def evaluate(self, record: Any) -> bool:
        value = self.accessor.get(record)
        if value is None:
            return False
        if self.stringify:
            value = str(value)
        elif not isinstance(value, str):
            return False
        return self.text in value


@dataclass(frozen=True)
class Equals:
    accessor: PropertyAccessor
    value: Any

    def evaluate(self, record: Any) -> bool:
        current = self.accessor.get(record)
        return current is not None and current == self.value


@dataclass(frozen=True, init=False)
class Or:
    terms: tuple["Predicate", ...]

    def __init__(self, *terms: "Predicate"):
        object.__setattr__(self, "terms", tuple(terms))

    def evaluate(self, record: Any) -> bool:
        return any(term.evaluate(record) for term in self.terms)


Predicate = Union[Contains, Equals, Or]
