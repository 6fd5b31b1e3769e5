"""CREATE TABLE text for the exported table."""

from __future__ import annotations

from typing import List

from pg_export.errors import InvalidIdentifier
from pg_export.models import ResolvedRoles
from pg_export.type_map import FieldTypeLookup, field_type_of as default_field_type_of

DEFAULT_SRID = 4326

GEOM_COLUMN = "geom"
TIME_COLUMN = "time"


def quote_ident(name: str) -> str:
    """
    Double-quote an identifier. Names containing a double quote are rejected
    instead of escaped.
    """
    if not name or '"' in name or "\x00" in name:
        raise InvalidIdentifier(name)
    return f'"{name}"'


def qualified_table(schema: str, table: str) -> str:
    return f"{quote_ident(schema)}.{quote_ident(table)}"


def column_definitions(
    resolved: ResolvedRoles,
    field_type_of: FieldTypeLookup = default_field_type_of,
    srid: int = DEFAULT_SRID,
) -> List[str]:
    """Column definitions in table order: geometry, time, then remaining fields."""
    cols: List[str] = []
    if resolved.has_geometry:
        cols.append(f"{GEOM_COLUMN} geometry(point, {int(srid)})")
    if resolved.has_time:
        cols.append(f"{TIME_COLUMN} timestamp")
    for fd in resolved.remaining:
        cols.append(f"{fd.field_name} {field_type_of(fd.field_type)}")
    return cols


def build_create_table(
    schema: str,
    table: str,
    resolved: ResolvedRoles,
    field_type_of: FieldTypeLookup = default_field_type_of,
    srid: int = DEFAULT_SRID,
) -> str:
    cols = column_definitions(resolved, field_type_of, srid)
    return f"create table {qualified_table(schema, table)}( {', '.join(cols)} );"
