"""Permission service: owns the group registry and answers checks.

The service holds one immutable :class:`GroupRegistry` snapshot.  Reload
parses the definitions file, flattens inheritance, and replaces the
snapshot in a single assignment, so concurrent checks see either the old
registry or the new one in full.  A failed reload leaves the old snapshot
in place.

Editing operations start from the definitions file rather than the
published snapshot, write the result, and reload.

Check order
-----------
1. Empty permission: denied.
2. Privileged sender (console, full permissions): allowed.
3. Unknown or disconnected principal, or empty registry: denied.
4. Dedicated-server principal: allowed.
5. Group key from the current assignment, else the stored group name.
6. Unknown key falls back to the default group; no group at all: denied.
7. ``.*`` in the group's combined permissions: allowed.
8. Segment-wildcard match.

Example
-------
::

    service = PermissionService.from_config(ConfigLoader().defaults())
    service.create()
    service.reload()
    principal = Principal(user_id="u1", group_key="admin")
    service.check_permission(principal, "round.restart")
"""
from __future__ import annotations

import logging
import threading

from aumos_group_permissions.config import PermissionsConfig
from aumos_group_permissions.groups.group import Group
from aumos_group_permissions.groups.registry import GroupRegistry, InheritanceMode
from aumos_group_permissions.groups.store import GroupStore
from aumos_group_permissions.permissions.matcher import ALL_PERMISSIONS, matches_lowered
from aumos_group_permissions.permissions.principal import (
    Principal,
    PrincipalResolver,
    Sender,
    SenderKind,
)

logger = logging.getLogger(__name__)


class PermissionsError(Exception):
    """Base class for registry editing errors."""


class GroupNotFoundError(PermissionsError, KeyError):
    """Raised when an edit names a group that does not exist."""

    def __init__(self, group_name: str) -> None:
        self.group_name = group_name
        super().__init__(f"Group {group_name!r} does not exist.")

    def __str__(self) -> str:
        return str(self.args[0])


class GroupExistsError(PermissionsError, KeyError):
    """Raised when adding a group whose name is already taken."""

    def __init__(self, group_name: str) -> None:
        self.group_name = group_name
        super().__init__(f"Group {group_name!r} already exists.")

    def __str__(self) -> str:
        return str(self.args[0])


class PermissionNotGrantedError(PermissionsError, KeyError):
    """Raised when removing a permission the group does not grant."""

    def __init__(self, group_name: str, permission: str) -> None:
        self.group_name = group_name
        self.permission = permission
        super().__init__(f"Group {group_name!r} does not grant {permission!r}.")

    def __str__(self) -> str:
        return str(self.args[0])


class PermissionService:
    """Group registry owner and permission checker.

    Parameters
    ----------
    store:
        Definitions store used by :meth:`create`, :meth:`reload` and :meth:`save`.
    resolver:
        Resolves player senders to principals.  Only :meth:`check_sender`
        needs it.
    inheritance_mode:
        Flattening mode applied on reload.
    debug:
        Emit DEBUG trace records for each check.
    """

    def __init__(
        self,
        store: GroupStore,
        resolver: PrincipalResolver | None = None,
        inheritance_mode: InheritanceMode = "single_pass",
        debug: bool = False,
    ) -> None:
        self._store = store
        self._resolver = resolver
        self._inheritance_mode: InheritanceMode = inheritance_mode
        self._debug = debug
        self._registry: GroupRegistry = GroupRegistry.empty()
        self._write_lock = threading.Lock()

    @classmethod
    def from_config(
        cls,
        config: PermissionsConfig,
        resolver: PrincipalResolver | None = None,
    ) -> PermissionService:
        """Build a service wired to the definitions file named in ``config``."""
        store = GroupStore(
            config.full_path,
            save_combined_permissions=config.save_combined_permissions,
        )
        return cls(
            store,
            resolver=resolver,
            inheritance_mode=config.inheritance_mode,
            debug=config.debug,
        )

    # ------------------------------------------------------------------
    # Registry access
    # ------------------------------------------------------------------

    @property
    def registry(self) -> GroupRegistry:
        """The currently published registry snapshot."""
        return self._registry

    @property
    def groups(self) -> GroupRegistry:
        """Alias of :attr:`registry`."""
        return self._registry

    @property
    def default_group(self) -> Group | None:
        """The default group of the current snapshot, if any."""
        return self._registry.default_group

    @property
    def store(self) -> GroupStore:
        return self._store

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def create(self) -> bool:
        """Bootstrap the definitions folder and file.  See :meth:`GroupStore.create`."""
        return self._store.create()

    def reload(self) -> GroupRegistry:
        """Re-read definitions, flatten them, and publish a new snapshot.

        Returns
        -------
        GroupRegistry
            The snapshot now in effect.

        Raises
        ------
        FileNotFoundError
            If the definitions file is missing.
        GroupConfigError
            If the definitions file is malformed.  The previous snapshot
            stays published.
        """
        with self._write_lock:
            return self._reload_locked()

    def load_definitions(self, groups: dict[str, Group]) -> GroupRegistry:
        """Flatten and publish ``groups`` without touching the store."""
        registry = GroupRegistry.build(groups, self._inheritance_mode)
        with self._write_lock:
            self._registry = registry
        return registry

    def save(self) -> None:
        """Write the current snapshot to the definitions store."""
        self._store.save(self._registry)

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def add_group(self, name: str) -> Group:
        """Add an empty group, save, and reload.

        Raises
        ------
        GroupExistsError
            If ``name`` is already a group.
        """
        with self._write_lock:
            groups = self._store.load()
            if name in groups:
                raise GroupExistsError(name)
            groups[name] = Group(name=name)
            return self._save_and_reload_locked(groups)[name]

    def remove_group(self, name: str) -> None:
        """Remove a group, save, and reload.

        Groups inheriting from it keep the stale name in their inheritance
        list; it is skipped like any other unknown name.

        Raises
        ------
        GroupNotFoundError
            If ``name`` is not a group.
        """
        with self._write_lock:
            groups = self._store.load()
            if name not in groups:
                raise GroupNotFoundError(name)
            del groups[name]
            self._save_and_reload_locked(groups)

    def add_permission(self, group_name: str, permission: str) -> Group:
        """Grant ``permission`` to ``group_name``, save, and reload.

        Granting a permission the group already holds is a no-op.

        Raises
        ------
        GroupNotFoundError
            If the group does not exist.
        ValueError
            If ``permission`` is empty.
        """
        if not permission:
            raise ValueError("permission must not be empty.")
        with self._write_lock:
            groups = self._store.load()
            group = groups.get(group_name)
            if group is None:
                raise GroupNotFoundError(group_name)
            groups[group_name] = group.model_copy(
                update={"permissions": tuple(dict.fromkeys((*group.permissions, permission)))}
            )
            return self._save_and_reload_locked(groups)[group_name]

    def remove_permission(self, group_name: str, permission: str) -> Group:
        """Revoke ``permission`` from ``group_name``, save, and reload.

        Raises
        ------
        GroupNotFoundError
            If the group does not exist.
        PermissionNotGrantedError
            If the group does not grant ``permission`` directly.
        """
        with self._write_lock:
            groups = self._store.load()
            group = groups.get(group_name)
            if group is None:
                raise GroupNotFoundError(group_name)
            if permission not in group.permissions:
                raise PermissionNotGrantedError(group_name, permission)
            groups[group_name] = group.model_copy(
                update={"permissions": tuple(p for p in group.permissions if p != permission)}
            )
            return self._save_and_reload_locked(groups)[group_name]

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    def check_sender(self, sender: Sender, permission: str) -> bool:
        """Check ``permission`` for a request sender.

        Console senders and senders with full permissions are allowed.
        Player senders are resolved through the configured resolver and
        checked by group.  Any other sender is denied.
        """
        if not permission:
            return False
        if sender.is_privileged:
            return True
        if sender.kind is not SenderKind.PLAYER or self._resolver is None:
            return False
        return self.check_permission(self._resolver.resolve(sender.sender_id), permission)

    def check_permission(self, principal: Principal | None, permission: str) -> bool:
        """Return True if ``principal`` holds ``permission``."""
        if not permission:
            return False

        registry = self._registry
        if principal is None or not principal.connected or not registry:
            return False

        if principal.is_dedicated_server:
            return True

        self._trace("UserID: %s | PlayerId: %s", principal.user_id, principal.player_id)
        self._trace("Permission string: %s", permission)

        group_key = principal.effective_group_key
        if not group_key:
            return False

        self._trace("GroupKey: %s", group_key)

        group = registry.get(group_key)
        if group is None:
            group = registry.default_group
        if group is None:
            return False

        if ALL_PERMISSIONS in group.combined_permissions:
            return True

        return matches_lowered(registry.lookup_set(group.name), permission)

    def check_group(self, group_name: str, permission: str) -> bool:
        """Check ``permission`` for a principal assigned to ``group_name``."""
        return self.check_permission(
            Principal(user_id=f"group:{group_name}", group_key=group_name), permission
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _reload_locked(self) -> GroupRegistry:
        groups = self._store.load()
        registry = GroupRegistry.build(groups, self._inheritance_mode)
        self._registry = registry
        logger.info(
            "Loaded %d permission groups from %s (default=%s, mode=%s)",
            len(registry),
            self._store.path,
            registry.default_group.name if registry.default_group else None,
            self._inheritance_mode,
        )
        return registry

    def _save_and_reload_locked(self, groups: dict[str, Group]) -> GroupRegistry:
        self._store.save(GroupRegistry.build(groups, self._inheritance_mode))
        return self._reload_locked()

    def _trace(self, message: str, *args: object) -> None:
        if self._debug:
            logger.debug(message, *args)
