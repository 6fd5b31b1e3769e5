"""Lookup from incoming primitive field types to PostgreSQL column types."""

from __future__ import annotations

from typing import Callable, Dict, Mapping, Optional

from pg_export.errors import UnsupportedFieldType

DEFAULT_TYPE_MAP: Dict[str, str] = {
    "char": "text",
    "float": "numeric",
}

FieldTypeLookup = Callable[[str], str]


def make_field_type_lookup(extra: Optional[Mapping[str, str]] = None) -> FieldTypeLookup:
    """
    Build a ``field_type -> SQL type`` function over the default table,
    optionally extended (or overridden) by ``extra``.
    """
    table = dict(DEFAULT_TYPE_MAP)
    if extra:
        table.update(extra)

    def field_type_of(field_type: str) -> str:
        try:
            return table[field_type]
        except KeyError:
            raise UnsupportedFieldType(field_type) from None

    return field_type_of


field_type_of = make_field_type_lookup()
