"""YAML definitions store for permission groups.

GroupStore owns the on-disk ``permissions.yml`` file: it bootstraps the
folder and the built-in defaults, parses the file into ordered Group
records, and writes a registry back.

Schema
------
::

    user:
      is_default: true
      inheritance: []
      permissions: []
    owner:
      inheritance: []
      permissions:
      - .*

Unknown per-group keys are ignored.  ``combined_permissions`` may be present
but is always recomputed.

Example
-------
::

    store = GroupStore(Path("config/permissions.yml"))
    store.create()
    groups = store.load()
"""
from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from aumos_group_permissions.groups.defaults import write_defaults
from aumos_group_permissions.groups.group import Group
from aumos_group_permissions.groups.registry import GroupRegistry

logger = logging.getLogger(__name__)


class GroupConfigError(ValueError):
    """Raised when a permissions definitions file is malformed.

    Attributes
    ----------
    config_path:
        The path to the file that caused the error, if known.
    """

    def __init__(self, message: str, config_path: str | None = None) -> None:
        self.config_path = config_path
        prefix = f"[{config_path}] " if config_path else ""
        super().__init__(f"{prefix}{message}")


class GroupStore:
    """Loads and saves group definitions as YAML.

    Parameters
    ----------
    path:
        Location of the definitions file.
    save_combined_permissions:
        When ``True``, :meth:`save` also writes each group's derived
        ``combined_permissions``.  They are ignored again on load.
    """

    def __init__(self, path: Path, save_combined_permissions: bool = False) -> None:
        self._path = Path(path)
        self._save_combined = save_combined_permissions

    @property
    def path(self) -> Path:
        """The definitions file path."""
        return self._path

    # ------------------------------------------------------------------
    # Bootstrap
    # ------------------------------------------------------------------

    def create(self) -> bool:
        """Ensure the folder and definitions file exist.

        Safe to call on every start.  Memory is not touched; call the
        service's ``reload`` afterwards.

        Returns
        -------
        bool
            ``True`` if the definitions file was written.
        """
        folder = self._path.parent
        if not folder.exists():
            logger.warning("Permissions directory at %s is missing, creating.", folder)
            folder.mkdir(parents=True, exist_ok=True)

        if self._path.exists():
            return False

        logger.warning("Permissions file at %s is missing, creating.", self._path)
        write_defaults(self._path)
        return True

    # ------------------------------------------------------------------
    # Load
    # ------------------------------------------------------------------

    def load(self) -> dict[str, Group]:
        """Parse the definitions file into Group records.

        Returns
        -------
        dict[str, Group]
            Groups in authored order, not yet flattened.

        Raises
        ------
        FileNotFoundError
            If the definitions file does not exist.
        GroupConfigError
            If the file cannot be decoded, parsed, or is structurally invalid.
        """
        if not self._path.exists():
            raise FileNotFoundError(f"Permissions file not found: {self._path}")

        try:
            text = self._path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise GroupConfigError(f"File is not valid UTF-8: {exc}", str(self._path)) from exc

        return self.load_from_yaml_string(text, config_path=str(self._path))

    def load_from_yaml_string(
        self,
        yaml_string: str,
        config_path: str | None = None,
    ) -> dict[str, Group]:
        """Parse definitions from a YAML string.

        Raises
        ------
        GroupConfigError
            If parsing fails or the document is invalid.
        """
        try:
            raw = yaml.safe_load(yaml_string)
        except yaml.YAMLError as exc:
            raise GroupConfigError(f"Failed to parse YAML: {exc}", config_path) from exc
        return self.load_from_dict({} if raw is None else raw, config_path=config_path)

    def load_from_dict(
        self,
        raw: dict[str, object],
        config_path: str | None = None,
    ) -> dict[str, Group]:
        """Build Group records from an already-parsed mapping.

        Raises
        ------
        GroupConfigError
            If the mapping or one of its entries is invalid.
        """
        if not isinstance(raw, dict):
            raise GroupConfigError(
                "Permissions file must be a YAML mapping of group names.", config_path
            )

        groups: dict[str, Group] = {}
        for name, body in raw.items():
            if body is not None and not isinstance(body, dict):
                raise GroupConfigError(
                    f"Group {name!r} must be a mapping; got {type(body).__name__}.",
                    config_path,
                )
            try:
                groups[str(name)] = Group.from_definition(str(name), body)
            except ValidationError as exc:
                raise GroupConfigError(f"Error in group {name!r}: {exc}", config_path) from exc

        return groups

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    def save(self, registry: GroupRegistry) -> None:
        """Write ``registry`` to the definitions file in iteration order."""
        self.save_definitions(registry.to_definitions(include_combined=self._save_combined))

    def save_definitions(self, definitions: dict[str, dict[str, object]]) -> None:
        """Write a plain definitions mapping to the definitions file."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("w", encoding="utf-8") as fh:
            yaml.safe_dump(
                definitions,
                fh,
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
            )
        logger.debug("Saved %d groups to %s", len(definitions), self._path)
