"""Exceptions raised by the exporter and its building blocks."""

from __future__ import annotations


class ExportError(Exception):
    """Base class for every error reported by :mod:`pg_export`."""


class AlreadyInitialized(ExportError):
    def __init__(self) -> None:
        super().__init__("Exporter was already initialized")


class NotInitialized(ExportError):
    def __init__(self) -> None:
        super().__init__("Exporter was not initialized")


class AlreadyFinished(ExportError):
    def __init__(self) -> None:
        super().__init__("Exporter has already finished writing")


class BadRoleConfiguration(ExportError):
    """A role map that cannot be applied to the given fields."""


class BadGeomConfiguration(BadRoleConfiguration):
    """Latitude/longitude roles were configured only partially or point nowhere."""

    def __init__(self, detail: str | None = None) -> None:
        msg = "Configured variables to be used as a geometry but variables were not given"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class UnsupportedFieldType(ExportError):
    def __init__(self, field_type: str) -> None:
        self.field_type = field_type
        super().__init__(f"No SQL type mapping for field type {field_type!r}")


class InvalidIdentifier(ExportError):
    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"Invalid SQL identifier: {identifier!r}")


class InvalidRowValue(ExportError):
    """A row cannot be rendered into an INSERT statement."""
