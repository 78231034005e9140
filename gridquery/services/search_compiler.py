from __future__ import annotations

import logging

from gridquery.schemas.datagrid import DataGridRequest
from gridquery.services import property_resolver, value_matcher
from gridquery.services.predicates import Or
from gridquery.services.queryable import Queryable, UnsupportedQueryError

_LOG = logging.getLogger("gridquery.search")


def _column_predicate(source: Queryable, path: str, text: str):
    accessor = property_resolver.resolve(source.record_type, path)
    if accessor is None:
        _LOG.debug("search_column_unresolved path=%s type=%s", path, source.record_type.__name__)
        return None
    predicate = value_matcher.build(accessor, text)
    if predicate is None:
        _LOG.debug("search_value_unmatched path=%s kind=%s", path, accessor.kind.value)
    return predicate


def _apply_filter(source: Queryable, predicate) -> Queryable:
    try:
        return source.filter(predicate)
    except UnsupportedQueryError:
        _LOG.debug("search_filter_unsupported predicate=%r", predicate)
        return source


def apply_global_search(source: Queryable, request: DataGridRequest) -> Queryable:
    if request.search is None or request.search.is_blank:
        return source
    if not request.columns:
        return source

    text = request.search.value.strip()
    terms = []
    for column in request.columns:
        if not column.searchable or not column.is_bound:
            continue
        predicate = _column_predicate(source, column.data, text)
        if predicate is not None:
            terms.append(predicate)

    if not terms:
        return source
    return _apply_filter(source, Or(*terms))


def apply_column_search(
    source: Queryable,
    request: DataGridRequest,
    require_searchable: bool = False,
) -> Queryable:
    if not request.columns:
        return source

    for column in request.columns:
        if column.search is None or column.search.is_blank:
            continue
        if not column.is_bound:
            continue
        if require_searchable and not column.searchable:
            continue
        predicate = _column_predicate(source, column.data, column.search.value.strip())
        if predicate is not None:
            source = _apply_filter(source, predicate)
    return source
