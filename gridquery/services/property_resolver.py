"""Resolution of dotted column paths ("User.Name") to typed field accessors.

A record type may be a dataclass, a pydantic model, a plain annotated class or
a SQLAlchemy mapped class. Every segment is matched case-insensitively against
the public fields of the current type, and the next segment is resolved against
the declared type of the field just found. Resolution never raises: any failure
yields ``None``.
"""

from __future__ import annotations

import enum
import inspect
import types
from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache
from typing import Annotated, Any, ClassVar, Optional, Union, get_args, get_origin, get_type_hints

from pydantic import BaseModel
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Mapped, Mapper


class FieldKind(str, enum.Enum):
    TEXT = "text"
    ENUM = "enum"
    NUMERIC = "numeric"
    OTHER = "other"


@dataclass(frozen=True)
class PropertyAccessor:
    record_type: type
    path: tuple[str, ...]
    field_type: Any
    nullable: bool
    kind: FieldKind

    @property
    def dotted_path(self) -> str:
        return ".".join(self.path)

    def get(self, record: Any) -> Any:
        """Walk the path on ``record``; a missing link anywhere yields ``None``."""
        value = record
        for name in self.path:
            if value is None:
                return None
            value = getattr(value, name, None)
        return value


def unwrap_type(hint: Any) -> tuple[Any, bool]:
    """Strip ``Optional``/``X | None``/``Annotated``/``Mapped`` wrappers.

    Returns the inner type and whether ``None`` was part of the declaration.
    Unions of several non-null types collapse to ``object``.
    """
    nullable = False
    while True:
        origin = get_origin(hint)
        if origin is Annotated or origin is Mapped:
            hint = get_args(hint)[0]
            continue
        if origin is Union or origin is types.UnionType:
            args = get_args(hint)
            non_null = [arg for arg in args if arg is not type(None)]
            if len(non_null) != len(args):
                nullable = True
            if len(non_null) == 1:
                hint = non_null[0]
                continue
            return object, nullable
        return hint, nullable


def _is_plain_class(field_type: Any) -> bool:
    return isinstance(field_type, type) and get_origin(field_type) is None


def classify(field_type: Any) -> FieldKind:
    if not _is_plain_class(field_type):
        return FieldKind.OTHER
    # Enum first: str/int based enums must not fall through to text or numeric.
    if issubclass(field_type, enum.Enum):
        return FieldKind.ENUM
    if issubclass(field_type, bool):
        return FieldKind.OTHER
    if issubclass(field_type, str):
        return FieldKind.TEXT
    if issubclass(field_type, (int, float, Decimal)):
        return FieldKind.NUMERIC
    return FieldKind.OTHER


def _mapped_members(mapper: Mapper) -> dict[str, tuple[Any, bool]]:
    members: dict[str, tuple[Any, bool]] = {}
    for attr in mapper.column_attrs:
        column = attr.columns[0]
        try:
            python_type = column.type.python_type
        except NotImplementedError:
            python_type = object
        members[attr.key] = (python_type, bool(getattr(column, "nullable", True)))
    for rel in mapper.relationships:
        # Collections have no single value to match or order on.
        if rel.uselist:
            continue
        members[rel.key] = (rel.mapper.class_, True)
    return members


def _annotated_members(record_type: type) -> dict[str, tuple[Any, bool]]:
    is_pydantic = issubclass(record_type, BaseModel)
    if is_pydantic:
        hints = {name: field.annotation for name, field in record_type.model_fields.items()}
    else:
        hints = get_type_hints(record_type)

    members: dict[str, tuple[Any, bool]] = {}
    for name, hint in hints.items():
        if name.startswith("_") or get_origin(hint) is ClassVar:
            continue
        members[name] = unwrap_type(hint)
    for name in dir(record_type):
        if name.startswith("_") or name in members:
            continue
        if is_pydantic and hasattr(BaseModel, name):
            continue
        attr = inspect.getattr_static(record_type, name, None)
        if isinstance(attr, property) and attr.fget is not None:
            hint = get_type_hints(attr.fget).get("return")
            if hint is not None:
                members[name] = unwrap_type(hint)
    return members


@lru_cache(maxsize=256)
def public_members(record_type: type) -> dict[str, tuple[Any, bool]]:
    """Map of public field name -> (declared inner type, nullable)."""
    mapper = sa_inspect(record_type, raiseerr=False)
    if isinstance(mapper, Mapper):
        return _mapped_members(mapper)
    return _annotated_members(record_type)


def _find_member(record_type: type, segment: str) -> Optional[tuple[str, Any, bool]]:
    wanted = segment.lower()
    matches = [
        (name, field_type, nullable)
        for name, (field_type, nullable) in public_members(record_type).items()
        if name.lower() == wanted
    ]
    # Names differing only by case are ambiguous.
    if len(matches) != 1:
        return None
    return matches[0]


@lru_cache(maxsize=1024)
def resolve(record_type: type, dotted_path: Optional[str]) -> Optional[PropertyAccessor]:
    if not dotted_path or not dotted_path.strip():
        return None
    try:
        current: Any = record_type
        names: list[str] = []
        field_type: Any = None
        nullable = False
        for segment in dotted_path.split("."):
            if not _is_plain_class(current):
                return None
            member = _find_member(current, segment)
            if member is None:
                return None
            name, field_type, nullable = member
            names.append(name)
            current = field_type
        return PropertyAccessor(
            record_type=record_type,
            path=tuple(names),
            field_type=field_type,
            nullable=nullable,
            kind=classify(field_type),
        )
    except Exception:
        return None
