"""aumos-group-permissions — Group-based hierarchical permissions.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    from pathlib import Path

    import aumos_group_permissions as perms

    service = perms.PermissionService(perms.GroupStore(Path("config/permissions.yml")))
    service.create()
    service.reload()
    service.check_permission(perms.Principal(user_id="u1", group_key="admin"), "round.restart")
"""
from __future__ import annotations

__version__: str = "0.1.0"

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------
from aumos_group_permissions.config import ConfigLoader, PermissionsConfig

# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------
from aumos_group_permissions.groups.group import Group
from aumos_group_permissions.groups.registry import GroupRegistry, flatten_inheritance
from aumos_group_permissions.groups.store import GroupConfigError, GroupStore

# ---------------------------------------------------------------------------
# Permissions
# ---------------------------------------------------------------------------
from aumos_group_permissions.permissions.matcher import matches_permission
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
    "__version__",
    # Configuration
    "ConfigLoader",
    "PermissionsConfig",
    # Groups
    "Group",
    "GroupConfigError",
    "GroupRegistry",
    "GroupStore",
    "flatten_inheritance",
    # Permissions
    "GroupExistsError",
    "GroupNotFoundError",
    "InMemoryPrincipalResolver",
    "PermissionNotGrantedError",
    "PermissionService",
    "PermissionsError",
    "Principal",
    "PrincipalResolver",
    "Sender",
    "SenderKind",
    "matches_permission",
]
