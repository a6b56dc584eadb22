"""Group data model, registry snapshots, and the YAML definitions store."""
from __future__ import annotations

from aumos_group_permissions.groups.defaults import DEFAULT_PERMISSIONS_YAML, write_defaults
from aumos_group_permissions.groups.group import Group
from aumos_group_permissions.groups.registry import (
    GroupRegistry,
    InheritanceMode,
    flatten_inheritance,
)
from aumos_group_permissions.groups.store import GroupConfigError, GroupStore

__all__ = [
    "DEFAULT_PERMISSIONS_YAML",
    "Group",
    "GroupConfigError",
    "GroupRegistry",
    "GroupStore",
    "InheritanceMode",
    "flatten_inheritance",
    "write_defaults",
]
