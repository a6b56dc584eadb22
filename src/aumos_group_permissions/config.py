"""Permissions configuration loader with Pydantic v2 validation.

Loads and validates a ``group-perms.yaml`` file into a typed
:class:`PermissionsConfig` object.  Unknown keys are allowed to support
future schema additions without breakage.

Example
-------
>>> loader = ConfigLoader()
>>> config = loader.load_string("folder: /srv/game/config\\n")
>>> config.full_path
PosixPath('/srv/game/config/permissions.yml')
"""
from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from aumos_group_permissions.groups.registry import InheritanceMode


class PermissionsConfig(BaseModel):
    """Top-level permissions configuration schema.

    Attributes
    ----------
    folder:
        Directory holding the definitions file.  Created on bootstrap.
    file_name:
        Name of the definitions file inside ``folder``.
    debug:
        When ``True``, permission checks emit DEBUG trace records.
    inheritance_mode:
        ``single_pass`` (declaration-order dependent) or ``transitive``.
    save_combined_permissions:
        Also write derived ``combined_permissions`` when saving.
    """

    model_config = {"extra": "allow"}

    folder: Path = Field(default=Path("./config"))
    file_name: str = Field(default="permissions.yml")
    debug: bool = Field(default=False)
    inheritance_mode: InheritanceMode = Field(default="single_pass")
    save_combined_permissions: bool = Field(default=False)

    @field_validator("file_name")
    @classmethod
    def validate_file_name(cls, value: str) -> str:
        if not value or Path(value).name != value:
            raise ValueError(f"file_name must be a bare file name, got {value!r}")
        return value

    @property
    def full_path(self) -> Path:
        """Location of the definitions file."""
        return self.folder / self.file_name


class ConfigLoader:
    """Loads and validates permissions YAML configuration.

    Example
    -------
    >>> loader = ConfigLoader()
    >>> config = loader.load(Path("group-perms.yaml"))
    """

    def load(self, config_path: Path) -> PermissionsConfig:
        """Load and validate a configuration YAML file.

        Parameters
        ----------
        config_path:
            Path to the configuration file.

        Returns
        -------
        PermissionsConfig
            Validated configuration object.

        Raises
        ------
        FileNotFoundError:
            When the config file does not exist.
        ValueError:
            When the YAML content fails Pydantic validation.
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Permissions config not found: {config_path}")

        with config_path.open("r", encoding="utf-8") as fh:
            raw: dict[str, object] = yaml.safe_load(fh) or {}

        return PermissionsConfig.model_validate(raw)

    def load_string(self, yaml_content: str) -> PermissionsConfig:
        """Load and validate a YAML string directly."""
        raw: dict[str, object] = yaml.safe_load(yaml_content) or {}
        return PermissionsConfig.model_validate(raw)

    def defaults(self) -> PermissionsConfig:
        """Return a default configuration with all defaults applied."""
        return PermissionsConfig()

    def load_or_defaults(self, config_path: Path) -> PermissionsConfig:
        """Load ``config_path`` if it exists, otherwise return defaults."""
        return self.load(config_path) if config_path.exists() else self.defaults()
