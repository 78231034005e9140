from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional

from gridquery.services.predicates import Contains, Equals, Predicate
from gridquery.services.property_resolver import FieldKind, PropertyAccessor


def _parse_number(raw_text: str, field_type: type) -> Any:
    text = raw_text.strip()
    if not text:
        raise ValueError("empty number")
    if issubclass(field_type, int):
        return int(text)
    normalized = text.replace(",", ".")
    if issubclass(field_type, float):
        return float(normalized)
    if issubclass(field_type, Decimal):
        return Decimal(normalized)
    raise TypeError(f"unsupported numeric type {field_type!r}")


def _parse_enum(raw_text: str, enum_type: type) -> Any:
    wanted = raw_text.strip().lower()
    for name, member in enum_type.__members__.items():
        if name.lower() == wanted:
            return member
    for member in enum_type:
        if str(member.value) == raw_text.strip():
            return member
    raise ValueError(f"{raw_text!r} is not a member of {enum_type.__name__}")


def build(accessor: Optional[PropertyAccessor], raw_text: Optional[str]) -> Optional[Predicate]:
    """Build a single-field predicate for ``raw_text``, or ``None`` when the
    text cannot be matched against the field's kind."""
    if accessor is None or raw_text is None:
        return None
    try:
        if accessor.kind is FieldKind.TEXT:
            return Contains(accessor, raw_text)
        if accessor.kind is FieldKind.ENUM:
            return Equals(accessor, _parse_enum(raw_text, accessor.field_type))
        if accessor.kind is FieldKind.NUMERIC:
            return Equals(accessor, _parse_number(raw_text, accessor.field_type))
        return Contains(accessor, raw_text, stringify=True)
    except Exception:
        return None
