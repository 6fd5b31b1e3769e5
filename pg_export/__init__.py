"""Public package exports for the :mod:`pg_export` library."""

from __future__ import annotations

from pg_export.errors import (
    AlreadyFinished,
    AlreadyInitialized,
    BadGeomConfiguration,
    BadRoleConfiguration,
    ExportError,
    InvalidIdentifier,
    InvalidRowValue,
    NotInitialized,
    UnsupportedFieldType,
)
from pg_export.exporter import Exporter
from pg_export.executor import PoolExecutor, StatementExecutor
from pg_export.models import ExporterState, FieldDescriptor, ResolvedRoles, Role

__all__ = [
    "Exporter",
    "PoolExecutor",
    "StatementExecutor",
    "ExporterState",
    "FieldDescriptor",
    "ResolvedRoles",
    "Role",
    "ExportError",
    "AlreadyInitialized",
    "NotInitialized",
    "AlreadyFinished",
    "BadRoleConfiguration",
    "BadGeomConfiguration",
    "UnsupportedFieldType",
    "InvalidIdentifier",
    "InvalidRowValue",
]
