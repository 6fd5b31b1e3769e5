"""Resolve which incoming fields are consumed by the geometry/time roles."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List

from pg_export.errors import BadGeomConfiguration, BadRoleConfiguration
from pg_export.models import FieldDescriptor, ResolvedRoles, Role, RoleMap

logger = logging.getLogger(__name__)

GEOMETRY_ROLES = (Role.LATITUDE, Role.LONGITUDE)


def normalize_role_map(role_map: RoleMap | None) -> Dict[Role, str]:
    """Return ``role_map`` keyed by :class:`Role`, rejecting unknown roles."""
    normalized: Dict[Role, str] = {}
    for key, field_name in (role_map or {}).items():
        try:
            role = key if isinstance(key, Role) else Role(str(key).upper())
        except ValueError:
            raise BadRoleConfiguration(f"Unknown role {key!r}") from None
        normalized[role] = field_name

    configured = [r for r in GEOMETRY_ROLES if r in normalized]
    if len(configured) == 1:
        raise BadGeomConfiguration(f"only {configured[0].value} is configured")

    names = list(normalized.values())
    if len(set(names)) != len(names):
        raise BadRoleConfiguration(f"A field is mapped to more than one role: {normalized}")
    return normalized


def resolve_roles(
    fields: Iterable[FieldDescriptor],
    role_map: RoleMap | None,
) -> ResolvedRoles:
    roles = normalize_role_map(role_map)
    by_name = {name: role for role, name in roles.items()}

    role_index: Dict[Role, int] = {}
    remaining: List[FieldDescriptor] = []
    remaining_index: List[int] = []
    count = 0
    for pos, fd in enumerate(fields):
        count += 1
        role = by_name.get(fd.field_name)
        if role is not None and role not in role_index:
            role_index[role] = pos
        else:
            remaining.append(fd)
            remaining_index.append(pos)

    missing = [r for r in roles if r not in role_index]
    if any(r in GEOMETRY_ROLES for r in missing):
        raise BadGeomConfiguration(
            ", ".join(f"{r.value}={roles[r]!r}" for r in missing if r in GEOMETRY_ROLES)
            + " not among the fields"
        )
    if missing:
        raise BadRoleConfiguration(
            f"Field {roles[missing[0]]!r} for role {missing[0].value} is not among the fields"
        )

    resolved = ResolvedRoles(
        role_index=role_index,
        remaining=tuple(remaining),
        remaining_index=tuple(remaining_index),
        field_count=count,
    )
    logger.debug(
        "Resolved roles %s; remaining fields: %s",
        {r.value: i for r, i in role_index.items()},
        [fd.field_name for fd in remaining],
    )
    return resolved
