"""Group record for one named role in the permissions file.

A group carries the permissions it grants directly, the names of the groups
it inherits from, and an ``is_default`` marker.  ``combined_permissions`` is
derived during reload and is never trusted from the definitions file.

Example
-------
>>> group = Group.from_definition("moderator", {"permissions": ["kick.*"]})
>>> group.permissions
('kick.*',)
>>> group.combined_permissions
()
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _dedupe(values: list[str] | tuple[str, ...]) -> tuple[str, ...]:
    """Collapse duplicates while keeping the first-seen order."""
    return tuple(dict.fromkeys(values))


class Group(BaseModel):
    """A named role bundling explicit permissions and inheritance.

    Attributes
    ----------
    name:
        The registry key.  Not written back to the definitions file.
    permissions:
        Permission strings granted explicitly to this group.
    inheritance:
        Names of groups whose combined permissions this group receives.
        Unknown names are tolerated and ignored during flattening.
    is_default:
        Marks the fallback group for principals without a resolvable group.
    combined_permissions:
        ``permissions`` plus everything inherited.  Empty until the group
        has been flattened by :func:`flatten_inheritance`.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    permissions: tuple[str, ...] = Field(default_factory=tuple)
    inheritance: tuple[str, ...] = Field(default_factory=tuple)
    is_default: bool = False
    combined_permissions: tuple[str, ...] = Field(default_factory=tuple)

    @field_validator("permissions", "inheritance", mode="before")
    @classmethod
    def _none_as_empty(cls, value: object) -> object:
        # ``permissions:`` with no items parses as None in YAML.
        if value is None:
            return ()
        # Unquoted numeric names such as ``[2]`` load as int.
        if isinstance(value, (list, tuple)):
            return tuple(str(v) if isinstance(v, (int, float)) else v for v in value)
        return value

    @field_validator("permissions", "inheritance")
    @classmethod
    def _collapse_duplicates(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return _dedupe(value)

    @classmethod
    def from_definition(cls, name: str, data: dict[str, object] | None) -> Group:
        """Build a Group from one entry of the definitions mapping.

        Any ``combined_permissions`` present in ``data`` is discarded; it is
        recomputed on every reload.

        Parameters
        ----------
        name:
            The mapping key of the entry.
        data:
            The entry body.  ``None`` is treated as an empty group.

        Raises
        ------
        pydantic.ValidationError
            If a field has the wrong type.
        """
        body = dict(data or {})
        body.pop("combined_permissions", None)
        body["name"] = name
        return cls.model_validate(body)

    def to_definition(self, include_combined: bool = False) -> dict[str, object]:
        """Return the plain mapping written to the definitions file."""
        definition: dict[str, object] = {
            "is_default": self.is_default,
            "inheritance": list(self.inheritance),
            "permissions": list(self.permissions),
        }
        if include_combined:
            definition["combined_permissions"] = list(self.combined_permissions)
        return definition

    def with_combined(self, combined: tuple[str, ...]) -> Group:
        """Return a copy of this group with ``combined_permissions`` set."""
        return self.model_copy(update={"combined_permissions": _dedupe(combined)})
