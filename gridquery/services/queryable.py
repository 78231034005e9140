from __future__ import annotations

from typing import Any, Iterable, Iterator, Protocol

from gridquery.services.predicates import Predicate
from gridquery.services.property_resolver import FieldKind, PropertyAccessor


class UnsupportedQueryError(ValueError):
    """Raised when a data source cannot express the requested operation."""


class Queryable(Protocol):
    record_type: type

    def filter(self, predicate: Predicate) -> "Queryable": ...

    def order_by(self, accessor: PropertyAccessor, descending: bool = False) -> "Queryable": ...

    def then_by(self, accessor: PropertyAccessor, descending: bool = False) -> "Queryable": ...

    def skip(self, count: int) -> "Queryable": ...

    def take(self, count: int) -> "Queryable": ...

    def count(self) -> int: ...

    def __iter__(self) -> Iterator[Any]: ...


def _check_orderable(accessor: PropertyAccessor) -> None:
    if accessor.kind is FieldKind.ENUM:
        return
    # Types without their own ordering (plain classes, dataclasses) cannot be sorted.
    if getattr(accessor.field_type, "__lt__", object.__lt__) is object.__lt__:
        raise UnsupportedQueryError(f"{accessor.dotted_path} has no ordering")


def _sort_key(accessor: PropertyAccessor):
    # Missing values sort before any present value; enums sort by their value.
    by_value = accessor.kind is FieldKind.ENUM

    def key(record: Any):
        value = accessor.get(record)
        if value is None:
            return (False, 0)
        return (True, value.value if by_value else value)

    return key


class InMemoryQueryable:
    """Lazy view over an in-process collection.

    Operations are recorded and replayed on every iteration, so ``records``
    should be re-iterable (a list, tuple or similar) when more than one view
    is consumed.
    """

    def __init__(self, record_type: type, records: Iterable[Any], _ops: tuple = ()):
        self.record_type = record_type
        self._records = records
        self._ops = _ops

    def _with(self, *ops: tuple) -> "InMemoryQueryable":
        return InMemoryQueryable(self.record_type, self._records, self._ops + ops)

    def filter(self, predicate: Predicate) -> "InMemoryQueryable":
        return self._with(("filter", predicate))

    def order_by(self, accessor: PropertyAccessor, descending: bool = False) -> "InMemoryQueryable":
        _check_orderable(accessor)
        return self._with(("sort", ((accessor, descending),)))

    def then_by(self, accessor: PropertyAccessor, descending: bool = False) -> "InMemoryQueryable":
        if not self._ops or self._ops[-1][0] != "sort":
            raise UnsupportedQueryError("then_by requires a preceding order_by")
        _check_orderable(accessor)
        keys = self._ops[-1][1] + ((accessor, descending),)
        return InMemoryQueryable(self.record_type, self._records, self._ops[:-1] + (("sort", keys),))

    def skip(self, count: int) -> "InMemoryQueryable":
        return self._with(("skip", max(count, 0)))

    def take(self, count: int) -> "InMemoryQueryable":
        return self._with(("take", max(count, 0)))

    def count(self) -> int:
        return sum(1 for _ in self)

    def __iter__(self) -> Iterator[Any]:
        rows = list(self._records)
        for op, arg in self._ops:
            if op == "filter":
                rows = [row for row in rows if arg.evaluate(row)]
            elif op == "sort":
                # Stable sorts applied from the lowest priority key up.
                for accessor, descending in reversed(arg):
                    rows.sort(key=_sort_key(accessor), reverse=descending)
            elif op == "skip":
                rows = rows[arg:]
            elif op == "take":
                rows = rows[:arg]
        return iter(rows)
