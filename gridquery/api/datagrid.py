import enum
import logging
import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Optional

from fastapi import APIRouter, Depends
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from gridquery.db.session import get_db
from gridquery.schemas.datagrid import DataGridRequest, DataGridResponse
from gridquery.services.query_pipeline import execute_request
from gridquery.services.sqlalchemy_queryable import SqlAlchemyQueryable

_LOG = logging.getLogger("gridquery.datagrid")


def _serialize_value(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, enum.Enum):
        return value.name
    return value


def row_to_dict(row: Any) -> dict[str, Any]:
    mapper = sa_inspect(type(row))
    return {attr.key: _serialize_value(getattr(row, attr.key)) for attr in mapper.column_attrs}


def build_datagrid_router(
    query_factory: Callable[[Session], Query],
    path: str = "/query",
    serialize: Optional[Callable[[Any], Any]] = None,
    column_search_requires_searchable: Optional[bool] = None,
) -> APIRouter:
    """One POST endpoint answering data-grid requests over ``query_factory(db)``."""
    router = APIRouter()
    serializer = serialize or row_to_dict

    @router.post(path, response_model=DataGridResponse)
    def query_datagrid(request: DataGridRequest, db: Session = Depends(get_db)):
        try:
            source = SqlAlchemyQueryable(query_factory(db))
            return execute_request(source, request, serializer, column_search_requires_searchable)
        except SQLAlchemyError:
            _LOG.exception("datagrid_query_failed draw=%s", request.draw)
            return DataGridResponse.fail(request.draw, "Query execution failed")

    return router
