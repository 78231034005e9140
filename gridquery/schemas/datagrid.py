from pydantic import BaseModel, ConfigDict, Field
from typing import Any, List, Optional


class SearchSpec(BaseModel):
    value: Optional[str] = None
    # Reserved by the wire format; regex matching is not evaluated.
    regex: bool = False

    @property
    def is_blank(self) -> bool:
        return not (self.value or "").strip()


class OrderSpec(BaseModel):
    column: int
    dir: Optional[str] = None
    name: Optional[str] = None

    @property
    def is_ascending(self) -> bool:
        return (self.dir or "").lower() == "asc"


class ColumnSpec(BaseModel):
    data: Optional[str] = None
    name: Optional[str] = None
    searchable: bool = False
    orderable: bool = False
    search: Optional[SearchSpec] = None

    @property
    def is_bound(self) -> bool:
        return bool((self.data or "").strip())


class DataGridRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    draw: int = 0
    start: int = 0
    length: int = 0
    continuation_token: Optional[str] = Field(default=None, alias="continuationToken")
    search: Optional[SearchSpec] = None
    order: Optional[List[OrderSpec]] = None
    columns: Optional[List[ColumnSpec]] = None


class DataGridResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    draw: int
    records_total: int = Field(default=0, alias="recordsTotal")
    records_filtered: int = Field(default=0, alias="recordsFiltered")
    data: List[Any] = []
    error: Optional[str] = None
    continuation_token: Optional[str] = Field(default=None, alias="continuationToken")

    @classmethod
    def success(
        cls,
        draw: int,
        records_total: int,
        records_filtered: int,
        data: List[Any],
        continuation_token: Optional[str] = None,
    ) -> "DataGridResponse":
        return cls(
            draw=draw,
            records_total=records_total,
            records_filtered=records_filtered,
            data=list(data),
            continuation_token=continuation_token,
        )

    @classmethod
    def fail(cls, draw: int, error: str) -> "DataGridResponse":
        return cls(draw=draw, error=error)
