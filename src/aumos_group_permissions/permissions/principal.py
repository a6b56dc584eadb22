"""Principal variants and the resolver interface.

The host application decides what a request's sender is and hands the
permission service a :class:`Sender`.  Player senders are resolved to a
:class:`Principal` through a :class:`PrincipalResolver`; console senders
bypass group checks entirely.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable


class SenderKind(str, Enum):
    """Closed set of request origins."""

    CONSOLE = "console"
    SERVER_CONSOLE = "server_console"
    PLAYER = "player"
    REMOTE = "remote"


PRIVILEGED_KINDS: frozenset[SenderKind] = frozenset(
    {SenderKind.CONSOLE, SenderKind.SERVER_CONSOLE}
)


@dataclass(frozen=True)
class Sender:
    """The origin of a permission-checked request.

    Attributes
    ----------
    kind:
        What sort of sender this is.
    sender_id:
        Opaque identifier used to resolve player senders.
    full_permissions:
        Set by the host when the sender already holds every permission.
    """

    kind: SenderKind
    sender_id: str = ""
    full_permissions: bool = False

    @property
    def is_privileged(self) -> bool:
        """True for console senders and senders with full permissions."""
        return self.full_permissions or self.kind in PRIVILEGED_KINDS


@dataclass(frozen=True)
class Principal:
    """A resolved identity whose group permissions are checked.

    Attributes
    ----------
    user_id:
        Stable identifier of the principal.
    player_id:
        Session-scoped numeric id, used only in trace output.
    group_key:
        The group currently assigned to the principal, if any.
    group_name:
        Stored group name used when no current assignment exists.
    is_dedicated_server:
        System actor flag; system actors hold every permission.
    connected:
        False once the principal has left; disconnected principals hold nothing.
    """

    user_id: str
    player_id: int = 0
    group_key: str | None = None
    group_name: str | None = None
    is_dedicated_server: bool = False
    connected: bool = True

    @property
    def effective_group_key(self) -> str | None:
        """The current assignment, falling back to the stored group name."""
        return self.group_key or self.group_name or None


@runtime_checkable
class PrincipalResolver(Protocol):
    """Resolves a sender identifier to a live principal."""

    def resolve(self, sender_id: str) -> Principal | None:
        """Return the principal for ``sender_id``, or ``None`` if unknown."""
        ...


class InMemoryPrincipalResolver:
    """Thread-safe dictionary-backed :class:`PrincipalResolver`.

    Example
    -------
    >>> resolver = InMemoryPrincipalResolver()
    >>> resolver.register("76561198000000000@steam", Principal(user_id="u1", group_key="admin"))
    >>> resolver.resolve("76561198000000000@steam").group_key
    'admin'
    """

    def __init__(self) -> None:
        self._principals: dict[str, Principal] = {}
        self._lock = threading.Lock()

    def register(self, sender_id: str, principal: Principal) -> None:
        """Associate ``principal`` with ``sender_id``, replacing any previous one."""
        with self._lock:
            self._principals[sender_id] = principal

    def unregister(self, sender_id: str) -> None:
        """Forget ``sender_id``.  Unknown ids are ignored."""
        with self._lock:
            self._principals.pop(sender_id, None)

    def resolve(self, sender_id: str) -> Principal | None:
        with self._lock:
            return self._principals.get(sender_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._principals)
