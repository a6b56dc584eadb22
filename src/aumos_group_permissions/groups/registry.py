"""Group registry snapshot and inheritance flattening.

A :class:`GroupRegistry` is an immutable, ordered ``name -> Group`` mapping
whose groups have all been flattened.  The permission service never mutates
a registry; reload builds a new one and swaps the reference, so a reader
always sees one complete snapshot.

Flattening modes
----------------
``single_pass``
    Groups are visited once in reverse declaration order.  Each group unions
    the *current* combined permissions of the groups it inherits from, so a
    parent only contributes its own inherited permissions when it is declared
    after the child.  Unknown names are skipped.  Cycles do not raise; they
    produce whatever partial union existed when each member was visited.

``transitive``
    Each group receives the permissions of every group reachable through its
    inheritance list, independent of declaration order.  Cycle members all
    share the reachable union.

Example
-------
>>> groups = {
...     "admin": Group(name="admin", inheritance=("mod",)),
...     "mod": Group(name="mod", permissions=("kick.*",)),
... }
>>> registry = GroupRegistry.build(groups)
>>> registry["admin"].combined_permissions
('kick.*',)
"""
from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Literal

from aumos_group_permissions.groups.group import Group

logger = logging.getLogger(__name__)

InheritanceMode = Literal["single_pass", "transitive"]


# ---------------------------------------------------------------------------
# Flattening
# ---------------------------------------------------------------------------


def flatten_inheritance(
    groups: Mapping[str, Group],
    mode: InheritanceMode = "single_pass",
) -> dict[str, Group]:
    """Return a copy of ``groups`` with ``combined_permissions`` resolved.

    Parameters
    ----------
    groups:
        Freshly parsed groups in declaration order.  Any
        ``combined_permissions`` already present are ignored.
    mode:
        ``"single_pass"`` (default) or ``"transitive"``.

    Returns
    -------
    dict[str, Group]
        New Group instances, in the same order as ``groups``.

    Raises
    ------
    ValueError
        If ``mode`` is not a known flattening mode.
    """
    if mode == "single_pass":
        return _flatten_single_pass(groups)
    if mode == "transitive":
        return _flatten_transitive(groups)
    raise ValueError(
        f"Unknown inheritance mode {mode!r}. Known modes: ['single_pass', 'transitive']."
    )


def _flatten_single_pass(groups: Mapping[str, Group]) -> dict[str, Group]:
    combined: dict[str, tuple[str, ...]] = {}

    for name, group in reversed(list(groups.items())):
        inherited: list[str] = []
        for parent_name in group.inheritance:
            if parent_name not in groups:
                logger.debug("Group %r inherits unknown group %r; skipped", name, parent_name)
                continue
            # Parents not visited yet contribute nothing.
            inherited.extend(combined.get(parent_name, ()))
        combined[name] = group.permissions + tuple(inherited)

    return {name: group.with_combined(combined[name]) for name, group in groups.items()}


def _flatten_transitive(groups: Mapping[str, Group]) -> dict[str, Group]:
    flattened: dict[str, Group] = {}

    for name, group in groups.items():
        collected: list[str] = list(group.permissions)
        seen: set[str] = {name}
        pending: list[str] = list(group.inheritance)
        while pending:
            parent_name = pending.pop(0)
            if parent_name in seen:
                continue
            seen.add(parent_name)
            parent = groups.get(parent_name)
            if parent is None:
                logger.debug("Group %r inherits unknown group %r; skipped", name, parent_name)
                continue
            collected.extend(parent.permissions)
            pending.extend(parent.inheritance)
        flattened[name] = group.with_combined(tuple(collected))

    return flattened


# ---------------------------------------------------------------------------
# GroupRegistry
# ---------------------------------------------------------------------------


class GroupRegistry(Mapping[str, Group]):
    """Immutable snapshot of flattened groups in declaration order.

    Use :meth:`build` to construct one from parsed groups; the constructor
    expects groups that are already flattened.

    Parameters
    ----------
    groups:
        Flattened groups keyed by name, in declaration order.
    """

    def __init__(self, groups: Mapping[str, Group] | None = None) -> None:
        self._groups: Mapping[str, Group] = MappingProxyType(dict(groups or {}))
        self._lookup: Mapping[str, frozenset[str]] = MappingProxyType(
            {
                name: frozenset(p.lower() for p in group.combined_permissions)
                for name, group in self._groups.items()
            }
        )
        self._default_group = self._find_default()

    @classmethod
    def build(
        cls,
        groups: Mapping[str, Group],
        mode: InheritanceMode = "single_pass",
    ) -> GroupRegistry:
        """Flatten ``groups`` and wrap them in a new registry."""
        return cls(flatten_inheritance(groups, mode))

    @classmethod
    def empty(cls) -> GroupRegistry:
        """Return a registry with no groups."""
        return cls()

    # ------------------------------------------------------------------
    # Mapping protocol
    # ------------------------------------------------------------------

    def __getitem__(self, name: str) -> Group:
        return self._groups[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._groups)

    def __len__(self) -> int:
        return len(self._groups)

    def __repr__(self) -> str:
        return f"GroupRegistry({list(self._groups)!r})"

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def default_group(self) -> Group | None:
        """The first group in declaration order with ``is_default`` set."""
        return self._default_group

    def names(self) -> list[str]:
        """Return group names in declaration order."""
        return list(self._groups)

    def lookup_set(self, name: str) -> frozenset[str]:
        """Return the lower-cased combined permissions of ``name``.

        Raises
        ------
        KeyError
            If the group does not exist.
        """
        return self._lookup[name]

    def to_definitions(self, include_combined: bool = False) -> dict[str, dict[str, object]]:
        """Return the plain definitions mapping, in declaration order."""
        return {
            name: group.to_definition(include_combined=include_combined)
            for name, group in self._groups.items()
        }

    def _find_default(self) -> Group | None:
        defaults = [group for group in self._groups.values() if group.is_default]
        if len(defaults) > 1:
            logger.warning(
                "Multiple default groups configured (%s); using %r",
                ", ".join(g.name for g in defaults),
                defaults[0].name,
            )
        return defaults[0] if defaults else None
