from __future__ import annotations

from .roles import resolve_roles, normalize_role_map
from .schema import (
    build_create_table,
    column_definitions,
    quote_ident,
    DEFAULT_SRID,
)
from .insert import render_insert, geometry_literal, parse_time, validate_row
from .batching import RowBatcher, DEFAULT_BATCH_SIZE

__all__ = [
    "resolve_roles",
    "normalize_role_map",
    "build_create_table",
    "column_definitions",
    "quote_ident",
    "DEFAULT_SRID",
    "render_insert",
    "geometry_literal",
    "parse_time",
    "validate_row",
    "RowBatcher",
    "DEFAULT_BATCH_SIZE",
]
