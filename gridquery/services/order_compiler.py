from __future__ import annotations

import logging

from gridquery.schemas.datagrid import DataGridRequest
from gridquery.services import property_resolver
from gridquery.services.queryable import Queryable, UnsupportedQueryError

_LOG = logging.getLogger("gridquery.order")


def apply_ordering(source: Queryable, request: DataGridRequest) -> Queryable:
    if not request.order or not request.columns:
        return source

    ordered = None
    for entry in request.order:
        if entry.column < 0 or entry.column >= len(request.columns):
            _LOG.debug("order_column_out_of_range column=%s", entry.column)
            continue
        column = request.columns[entry.column]
        if not column.orderable or not column.is_bound:
            continue
        accessor = property_resolver.resolve(source.record_type, column.data)
        if accessor is None:
            _LOG.debug("order_column_unresolved path=%s", column.data)
            continue

        descending = not entry.is_ascending
        try:
            if ordered is None:
                ordered = source.order_by(accessor, descending)
            else:
                ordered = ordered.then_by(accessor, descending)
        except UnsupportedQueryError:
            _LOG.debug("order_column_unsupported path=%s", column.data)
            continue

    return ordered if ordered is not None else source
