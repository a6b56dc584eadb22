"""Tests for Sender, Principal and InMemoryPrincipalResolver."""
from __future__ import annotations

import threading

from aumos_group_permissions.permissions.principal import (
    InMemoryPrincipalResolver,
    Principal,
    PrincipalResolver,
    Sender,
    SenderKind,
)


class TestSender:
    def test_console_is_privileged(self) -> None:
        assert Sender(kind=SenderKind.CONSOLE).is_privileged is True

    def test_server_console_is_privileged(self) -> None:
        assert Sender(kind=SenderKind.SERVER_CONSOLE).is_privileged is True

    def test_player_is_not_privileged(self) -> None:
        assert Sender(kind=SenderKind.PLAYER, sender_id="p1").is_privileged is False

    def test_full_permissions_is_privileged(self) -> None:
        sender = Sender(kind=SenderKind.REMOTE, full_permissions=True)
        assert sender.is_privileged is True

    def test_kind_from_string(self) -> None:
        assert SenderKind("player") is SenderKind.PLAYER


class TestPrincipal:
    def test_group_key_preferred(self) -> None:
        principal = Principal(user_id="u1", group_key="admin", group_name="user")
        assert principal.effective_group_key == "admin"

    def test_falls_back_to_group_name(self) -> None:
        principal = Principal(user_id="u1", group_name="user")
        assert principal.effective_group_key == "user"

    def test_empty_strings_resolve_to_none(self) -> None:
        principal = Principal(user_id="u1", group_key="", group_name="")
        assert principal.effective_group_key is None

    def test_defaults(self) -> None:
        principal = Principal(user_id="u1")
        assert principal.connected is True
        assert principal.is_dedicated_server is False


class TestInMemoryPrincipalResolver:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(InMemoryPrincipalResolver(), PrincipalResolver)

    def test_register_and_resolve(self) -> None:
        resolver = InMemoryPrincipalResolver()
        principal = Principal(user_id="u1", group_key="admin")
        resolver.register("s1", principal)
        assert resolver.resolve("s1") is principal

    def test_unknown_sender_is_none(self) -> None:
        assert InMemoryPrincipalResolver().resolve("missing") is None

    def test_unregister(self) -> None:
        resolver = InMemoryPrincipalResolver()
        resolver.register("s1", Principal(user_id="u1"))
        resolver.unregister("s1")
        resolver.unregister("never-registered")
        assert resolver.resolve("s1") is None
        assert len(resolver) == 0

    def test_concurrent_registration(self) -> None:
        resolver = InMemoryPrincipalResolver()

        def register(start: int) -> None:
            for i in range(start, start + 100):
                resolver.register(f"s{i}", Principal(user_id=f"u{i}"))

        threads = [threading.Thread(target=register, args=(n * 100,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(resolver) == 400
