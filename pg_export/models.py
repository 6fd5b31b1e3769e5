from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Sequence, Tuple, Union


class Role(str, Enum):
    """Semantic purpose a single input field can be assigned to."""
    LATITUDE = "LATITUDE"
    LONGITUDE = "LONGITUDE"
    TIME = "TIME"


class ExporterState(str, Enum):
    CREATED = "created"
    INITIALIZED = "initialized"
    FINISHED = "finished"


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """Name and primitive type of one positional row value."""
    field_name: str
    field_type: str

    @classmethod
    def coerce(cls, value: Union["FieldDescriptor", Mapping[str, Any]]) -> "FieldDescriptor":
        """Accept a descriptor or a ``{"fieldName", "fieldType"}`` mapping."""
        if isinstance(value, FieldDescriptor):
            return value
        name = value.get("fieldName", value.get("field_name"))
        ftype = value.get("fieldType", value.get("field_type"))
        if not name or not ftype:
            raise ValueError(f"Field descriptor needs a name and a type: {value!r}")
        return cls(field_name=str(name), field_type=str(ftype))


Row = Sequence[Any]
RoleMap = Mapping[Union[Role, str], str]


@dataclass(frozen=True, slots=True)
class ResolvedRoles:
    """
    Role positions derived from the field descriptors at init time.

    ``role_index`` maps each active role to its position in the row;
    ``remaining`` holds the unclaimed fields in declaration order and
    ``remaining_index`` their positions.
    """
    role_index: Dict[Role, int] = field(default_factory=dict)
    remaining: Tuple[FieldDescriptor, ...] = ()
    remaining_index: Tuple[int, ...] = ()
    field_count: int = 0

    @property
    def has_geometry(self) -> bool:
        return Role.LATITUDE in self.role_index and Role.LONGITUDE in self.role_index

    @property
    def has_time(self) -> bool:
        return Role.TIME in self.role_index
