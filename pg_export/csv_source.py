"""Read a CSV file as field descriptors plus positional rows."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple

from pg_export.models import FieldDescriptor

DEFAULT_FIELD_TYPE = "char"

# field type -> conversion applied to non-empty cells
_CONVERTERS: Dict[str, Callable[[str], Any]] = {
    "float": float,
}


def read_header(path: Path) -> List[str]:
    with path.open(newline="", encoding="utf-8") as fh:
        return next(csv.reader(fh), [])


def count_rows(path: Path) -> int:
    """Number of data rows (header excluded)."""
    with path.open(newline="", encoding="utf-8") as fh:
        return max(0, sum(1 for cells in csv.reader(fh) if cells) - 1)


def describe_fields(
    header: List[str], types: Optional[Mapping[str, str]] = None
) -> List[FieldDescriptor]:
    types = types or {}
    unknown = set(types) - set(header)
    if unknown:
        raise ValueError(f"Types given for columns not in the header: {sorted(unknown)}")
    return [FieldDescriptor(name, types.get(name, DEFAULT_FIELD_TYPE)) for name in header]


def iter_rows(path: Path, fields: List[FieldDescriptor]) -> Iterator[List[Any]]:
    """Yield data rows with cells converted per field type; empty cells are ``None``."""
    converters = [_CONVERTERS.get(fd.field_type) for fd in fields]
    with path.open(newline="", encoding="utf-8") as fh:
        reader = csv.reader(fh)
        next(reader, None)
        for lineno, cells in enumerate(reader, start=2):
            if not cells:
                continue
            if len(cells) != len(fields):
                raise ValueError(
                    f"{path}:{lineno}: expected {len(fields)} cells, got {len(cells)}"
                )
            row: List[Any] = []
            for cell, conv in zip(cells, converters):
                if cell == "":
                    row.append(None)
                elif conv is not None:
                    row.append(conv(cell))
                else:
                    row.append(cell)
            yield row


def load_csv(
    path: Path, types: Optional[Mapping[str, str]] = None
) -> Tuple[List[FieldDescriptor], int]:
    """Return the field descriptors and data row count of ``path``."""
    fields = describe_fields(read_header(path), types)
    return fields, count_rows(path)
