from __future__ import annotations

from typing import Any, Callable, Optional

from gridquery.core.config import settings
from gridquery.schemas.datagrid import DataGridRequest, DataGridResponse
from gridquery.services.order_compiler import apply_ordering
from gridquery.services.queryable import Queryable
from gridquery.services.search_compiler import apply_column_search, apply_global_search


class InvalidDataGridArgument(ValueError):
    pass


def apply_pagination(source: Queryable, request: DataGridRequest) -> Queryable:
    if request.start > 0:
        source = source.skip(request.start)
    if request.length > 0:
        source = source.take(request.length)
    return source


def translate(
    source: Optional[Queryable],
    request: Optional[DataGridRequest],
    column_search_requires_searchable: Optional[bool] = None,
) -> tuple[Queryable, Queryable]:
    """Apply global search, column search, ordering and pagination.

    Returns ``(unpaginated, paginated)``. Both are lazy views; the first one
    carries every filter and the ordering but no window, so it can be counted
    for the filtered total.
    """
    if source is None:
        raise InvalidDataGridArgument("source is required")
    if request is None:
        raise InvalidDataGridArgument("request is required")
    if column_search_requires_searchable is None:
        column_search_requires_searchable = settings.DATAGRID_COLUMN_SEARCH_REQUIRES_SEARCHABLE

    unpaginated = apply_global_search(source, request)
    unpaginated = apply_column_search(unpaginated, request, column_search_requires_searchable)
    unpaginated = apply_ordering(unpaginated, request)
    return unpaginated, apply_pagination(unpaginated, request)


def execute_request(
    source: Queryable,
    request: DataGridRequest,
    serialize: Optional[Callable[[Any], Any]] = None,
    column_search_requires_searchable: Optional[bool] = None,
) -> DataGridResponse:
    unpaginated, paginated = translate(source, request, column_search_requires_searchable)
    records_total = source.count()
    records_filtered = unpaginated.count()
    rows = list(paginated)
    data = [serialize(row) for row in rows] if serialize else rows
    return DataGridResponse.success(request.draw, records_total, records_filtered, data)
