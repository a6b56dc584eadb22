#!/usr/bin/env python3
"""Example: Quickstart — aumos-group-permissions

Minimal working example: bootstrap the default groups, reload them, and
check permissions for a few principals.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install aumos-group-permissions
"""
from __future__ import annotations

import tempfile
from pathlib import Path

import aumos_group_permissions as perms


def main() -> None:
    print(f"aumos-group-permissions version: {perms.__version__}")

    with tempfile.TemporaryDirectory() as tmp:
        # Step 1: Bootstrap the definitions file and load it
        config = perms.PermissionsConfig(folder=Path(tmp) / "config")
        service = perms.PermissionService.from_config(config)
        service.create()
        registry = service.reload()
        print(f"Loaded groups: {', '.join(registry.names())}")
        if service.default_group is not None:
            print(f"Default group: {service.default_group.name}")

        # Step 2: Check permissions for principals in different groups
        principals = [
            perms.Principal(user_id="alice", group_key="owner"),
            perms.Principal(user_id="bob", group_key="admin"),
            perms.Principal(user_id="carol", group_key="moderator"),
            perms.Principal(user_id="dave"),
        ]
        checks = ["round.restart", "player.kick", "chat.send", "server.shutdown"]

        print("\nPermission checks:")
        for principal in principals:
            for permission in checks:
                allowed = service.check_permission(principal, permission)
                icon = "ALLOW" if allowed else "DENY"
                print(f"  [{icon}] {principal.user_id:<6} {permission}")

        # Step 3: Grant a permission and check again
        service.add_permission("moderator", "round.restart")
        allowed = service.check_permission(principals[2], "round.restart")
        print(f"\nAfter grant, carol round.restart: {'ALLOW' if allowed else 'DENY'}")


if __name__ == "__main__":
    main()
