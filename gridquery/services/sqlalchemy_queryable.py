from __future__ import annotations

from typing import Any, Iterator, Optional

from sqlalchemy import Boolean, String, and_, case, cast, or_, select
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import ColumnProperty, Query, RelationshipProperty

from gridquery.services.predicates import Contains, Equals, Or, Predicate
from gridquery.services.property_resolver import PropertyAccessor
from gridquery.services.queryable import UnsupportedQueryError


class SqlAlchemyQueryable:
    """Queryable over a SQLAlchemy ORM ``Query``.

    Predicates are compiled into SQL as they are added; ordering and the
    offset/limit window are kept aside and rendered by ``query`` because ORM
    queries refuse filter/order changes after a window is applied. Once any
    ordering is present the primary key is appended as the last ascending key
    so rows that tie on every requested key keep a deterministic order.
    """

    def __init__(
        self,
        query: Query,
        model: Optional[type] = None,
        _order: tuple = (),
        _offset: int = 0,
        _limit: Optional[int] = None,
    ):
        self._query = query
        self.record_type = model or query.column_descriptions[0]["entity"]
        self._order = _order
        self._offset = _offset
        self._limit = _limit

    def _copy(self, **changes: Any) -> "SqlAlchemyQueryable":
        state = {
            "query": self._query,
            "model": self.record_type,
            "_order": self._order,
            "_offset": self._offset,
            "_limit": self._limit,
        }
        state.update(changes)
        return SqlAlchemyQueryable(**state)

    def _ensure_unwindowed(self, operation: str) -> None:
        if self._offset or self._limit is not None:
            raise UnsupportedQueryError(f"{operation} cannot follow skip/take")

    def _column(self, accessor: PropertyAccessor):
        model = accessor.record_type
        relationships = []
        for name in accessor.path[:-1]:
            attr = getattr(model, name)
            prop = attr.property
            if not isinstance(prop, RelationshipProperty) or prop.uselist:
                raise UnsupportedQueryError(f"{accessor.dotted_path}: '{name}' is not a scalar relationship")
            relationships.append(attr)
            model = prop.mapper.class_
        column = getattr(model, accessor.path[-1])
        if not isinstance(column.property, ColumnProperty):
            raise UnsupportedQueryError(f"{accessor.dotted_path} does not end on a column")
        return relationships, column

    @staticmethod
    def _text_of(column):
        # Booleans render as True/False, matching str() on in-process records.
        if isinstance(column.property.columns[0].type, Boolean):
            return case((column.is_(True), "True"), else_="False")
        return cast(column, String)

    def _clause(self, predicate: Predicate):
        if isinstance(predicate, Or):
            clauses = []
            for term in predicate.terms:
                try:
                    clauses.append(self._clause(term))
                except UnsupportedQueryError:
                    continue
            if not clauses:
                raise UnsupportedQueryError("none of the alternatives can be expressed in SQL")
            return or_(*clauses)

        relationships, column = self._column(predicate.accessor)
        if isinstance(predicate, Contains):
            target = self._text_of(column) if predicate.stringify else column
            clause = and_(column.is_not(None), target.contains(predicate.text, autoescape=True))
        elif isinstance(predicate, Equals):
            clause = column == predicate.value
            if predicate.accessor.nullable:
                clause = and_(column.is_not(None), clause)
        else:
            raise UnsupportedQueryError(f"unsupported predicate {predicate!r}")

        for rel in reversed(relationships):
            clause = rel.has(clause)
        return clause

    def _order_expression(self, accessor: PropertyAccessor):
        relationships, column = self._column(accessor)
        expression = column
        for rel in reversed(relationships):
            prop = rel.property
            expression = (
                select(expression)
                .where(prop.primaryjoin)
                .correlate(prop.parent.local_table)
                .scalar_subquery()
            )
        return expression

    def filter(self, predicate: Predicate) -> "SqlAlchemyQueryable":
        self._ensure_unwindowed("filter")
        return self._copy(query=self._query.filter(self._clause(predicate)))

    def order_by(self, accessor: PropertyAccessor, descending: bool = False) -> "SqlAlchemyQueryable":
        self._ensure_unwindowed("order_by")
        expression = self._order_expression(accessor)
        return self._copy(_order=(expression.desc() if descending else expression.asc(),))

    def then_by(self, accessor: PropertyAccessor, descending: bool = False) -> "SqlAlchemyQueryable":
        if not self._order:
            raise UnsupportedQueryError("then_by requires a preceding order_by")
        self._ensure_unwindowed("then_by")
        expression = self._order_expression(accessor)
        return self._copy(_order=self._order + (expression.desc() if descending else expression.asc(),))

    def skip(self, count: int) -> "SqlAlchemyQueryable":
        count = max(count, 0)
        limit = None if self._limit is None else max(self._limit - count, 0)
        return self._copy(_offset=self._offset + count, _limit=limit)

    def take(self, count: int) -> "SqlAlchemyQueryable":
        count = max(count, 0)
        return self._copy(_limit=count if self._limit is None else min(self._limit, count))

    @property
    def query(self) -> Query:
        q = self._query
        if self._order:
            tiebreakers = [column.asc() for column in sa_inspect(self.record_type).primary_key]
            q = q.order_by(*self._order, *tiebreakers)
        if self._offset:
            q = q.offset(self._offset)
        if self._limit is not None:
            q = q.limit(self._limit)
        return q

    def count(self) -> int:
        return self.query.count()

    def __iter__(self) -> Iterator[Any]:
        return iter(self.query.all())
