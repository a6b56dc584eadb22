"""Hierarchical permission matching with per-segment wildcards.

Permission strings are dot separated.  A granted ``prefix.*`` covers every
permission below ``prefix``; the final segment must match exactly.  For
``"a.b.c"`` the candidates are tried coarse to fine::

    a.*    a.b.*    a.b.c

The first hit wins.  Comparison is case-insensitive.  The universal
wildcard ``.*`` is handled by the caller before matching.
"""
from __future__ import annotations

from collections.abc import Iterable

PERMISSION_SEPARATOR = "."
ALL_PERMISSIONS = ".*"


def candidate_permissions(permission: str) -> list[str]:
    """Return the grants that would satisfy ``permission``, in test order.

    Example
    -------
    >>> candidate_permissions("round.kick.player")
    ['round.*', 'round.kick.*', 'round.kick.player']
    >>> candidate_permissions("noclip")
    ['noclip']
    """
    if PERMISSION_SEPARATOR not in permission:
        return [permission]

    segments = permission.split(PERMISSION_SEPARATOR)
    candidates: list[str] = []
    prefix = ""
    for index, segment in enumerate(segments):
        prefix = segment if index == 0 else f"{prefix}{PERMISSION_SEPARATOR}{segment}"
        if index == len(segments) - 1:
            candidates.append(prefix)
        else:
            candidates.append(prefix + ALL_PERMISSIONS)
    return candidates


def matches_permission(granted: Iterable[str], permission: str) -> bool:
    """Return True if ``permission`` is covered by ``granted``.

    Parameters
    ----------
    granted:
        Permission strings held by a group, in any case.
    permission:
        The dotted permission being checked.
    """
    return matches_lowered(frozenset(g.lower() for g in granted), permission)


def matches_lowered(lowered: frozenset[str], permission: str) -> bool:
    """Like :func:`matches_permission` for an already lower-cased grant set."""
    return any(c.lower() in lowered for c in candidate_permissions(permission))
