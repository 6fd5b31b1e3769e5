"""
Multi-row INSERT rendering.

Geometry values are embedded as ``'srid=<srid>;point(<lat> <lon>)'`` string
literals; every other value becomes a ``$n`` positional parameter numbered
contiguously across the whole statement.
"""
from __future__ import annotations

import math
from datetime import date, datetime
from decimal import Decimal
from numbers import Real
from typing import Any, List, Sequence, Tuple

from pg_export.core.schema import DEFAULT_SRID, qualified_table
from pg_export.errors import InvalidRowValue
from pg_export.models import ResolvedRoles, Role, Row


def format_coordinate(value: Any) -> str:
    """Render a coordinate for the geometry literal; only finite numbers pass."""
    if isinstance(value, bool) or not isinstance(value, (Real, Decimal)):
        raise InvalidRowValue(f"Coordinate must be a number, got {value!r}")
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise InvalidRowValue(f"Coordinate must be finite, got {value!r}")
        return str(value)
    if isinstance(value, int):
        return str(value)
    number = float(value)
    if not math.isfinite(number):
        raise InvalidRowValue(f"Coordinate must be finite, got {value!r}")
    return repr(number)


def geometry_literal(lat: Any, lon: Any, srid: int = DEFAULT_SRID) -> str:
    return f"'srid={int(srid)};point({format_coordinate(lat)} {format_coordinate(lon)})'"


def parse_time(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        text = value.strip()
        if text[-1:] in ("Z", "z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            raise InvalidRowValue(f"Unparseable time value {value!r}") from None
    raise InvalidRowValue(f"Unsupported time value {value!r}")


def check_row(row: Row, resolved: ResolvedRoles) -> None:
    if len(row) != resolved.field_count:
        raise InvalidRowValue(
            f"Row has {len(row)} values, expected {resolved.field_count}"
        )


def render_insert(
    schema: str,
    table: str,
    rows: Sequence[Row],
    resolved: ResolvedRoles,
    srid: int = DEFAULT_SRID,
) -> Tuple[str, List[Any]]:
    """Return ``(statement, params)`` for one multi-row INSERT of ``rows``."""
    if not rows:
        raise ValueError("Cannot render an INSERT without rows")

    params: List[Any] = []
    tuples: List[str] = []
    lat_i = resolved.role_index.get(Role.LATITUDE)
    lon_i = resolved.role_index.get(Role.LONGITUDE)
    time_i = resolved.role_index.get(Role.TIME)

    for row in rows:
        check_row(row, resolved)
        values: List[str] = []
        if resolved.has_geometry:
            values.append(geometry_literal(row[lat_i], row[lon_i], srid))
        if time_i is not None:
            params.append(parse_time(row[time_i]))
            values.append(f"${len(params)}")
        for pos in resolved.remaining_index:
            params.append(row[pos])
            values.append(f"${len(params)}")
        tuples.append(f"({', '.join(values)})")

    text = f"insert into {qualified_table(schema, table)} values {', '.join(tuples)}"
    return text, params


def validate_row(row: Row, resolved: ResolvedRoles, srid: int = DEFAULT_SRID) -> None:
    """Raise :class:`InvalidRowValue` now rather than when the batch flushes."""
    check_row(row, resolved)
    if resolved.has_geometry:
        geometry_literal(
            row[resolved.role_index[Role.LATITUDE]],
            row[resolved.role_index[Role.LONGITUDE]],
            srid,
        )
    if resolved.has_time:
        parse_time(row[resolved.role_index[Role.TIME]])
