"""Permission checks over flattened group registries.

Example
-------
::

    from pathlib import Path

    from aumos_group_permissions.groups import GroupStore
    from aumos_group_permissions.permissions import PermissionService, Principal

    service = PermissionService(GroupStore(Path("config/permissions.yml")))
    service.create()
    service.reload()
    assert service.check_permission(Principal(user_id="u1", group_key="owner"), "any.thing")
"""
from __future__ import annotations

from aumos_group_permissions.permissions.matcher import (
    ALL_PERMISSIONS,
    PERMISSION_SEPARATOR,
    candidate_permissions,
    matches_lowered,
    matches_permission,
)
from aumos_group_permissions.permissions.principal import (
    InMemoryPrincipalResolver,
    Principal,
    PrincipalResolver,
    Sender,
    SenderKind,
)
from aumos_group_permissions.permissions.service import (
    GroupExistsError,
    GroupNotFoundError,
    PermissionNotGrantedError,
    PermissionService,
    PermissionsError,
)

__all__ = [
    # Matching
    "ALL_PERMISSIONS",
    "PERMISSION_SEPARATOR",
    "candidate_permissions",
    "matches_lowered",
    "matches_permission",
    # Principals
    "InMemoryPrincipalResolver",
    "Principal",
    "PrincipalResolver",
    "Sender",
    "SenderKind",
    # Service
    "GroupExistsError",
    "GroupNotFoundError",
    "PermissionNotGrantedError",
    "PermissionService",
    "PermissionsError",
]
