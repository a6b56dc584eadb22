"""Test that the quickstart API works for aumos-group-permissions."""
from __future__ import annotations

from pathlib import Path


def test_quickstart_import() -> None:
    import aumos_group_permissions as perms

    assert perms.__version__ == "0.1.0"


def test_quickstart_bootstrap_and_check(tmp_path: Path) -> None:
    from aumos_group_permissions import PermissionService, PermissionsConfig, Principal

    service = PermissionService.from_config(PermissionsConfig(folder=tmp_path))
    service.create()
    service.reload()
    assert service.check_permission(Principal(user_id="u1", group_key="owner"), "a.b") is True
    assert service.check_permission(Principal(user_id="u2", group_key="user"), "a.b") is False


def test_quickstart_unknown_group_uses_default(tmp_path: Path) -> None:
    from aumos_group_permissions import PermissionService, PermissionsConfig, Principal

    service = PermissionService.from_config(PermissionsConfig(folder=tmp_path))
    service.create()
    service.reload()
    service.add_permission("user", "chat.send")
    principal = Principal(user_id="u3", group_key="not-a-group")
    assert service.check_permission(principal, "chat.send") is True


def test_quickstart_matches_permission_exported() -> None:
    from aumos_group_permissions import matches_permission

    assert matches_permission(["round.*"], "round.start") is True
