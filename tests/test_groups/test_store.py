"""Tests for GroupStore bootstrap, loading and saving."""
from __future__ import annotations

import logging
import pathlib
import textwrap

import pytest
import yaml

from aumos_group_permissions.groups.defaults import DEFAULT_PERMISSIONS_YAML
from aumos_group_permissions.groups.group import Group
from aumos_group_permissions.groups.registry import GroupRegistry
from aumos_group_permissions.groups.store import GroupConfigError, GroupStore


@pytest.fixture()
def store_path(tmp_path: pathlib.Path) -> pathlib.Path:
    return tmp_path / "config" / "permissions.yml"


@pytest.fixture()
def store(store_path: pathlib.Path) -> GroupStore:
    return GroupStore(store_path)


def _write(path: pathlib.Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(text), encoding="utf-8")


# ---------------------------------------------------------------------------
# create
# ---------------------------------------------------------------------------


class TestGroupStoreCreate:
    def test_creates_folder_and_file(self, store: GroupStore, store_path: pathlib.Path) -> None:
        assert store.create() is True
        assert store_path.exists()
        assert store_path.read_text(encoding="utf-8") == DEFAULT_PERMISSIONS_YAML

    def test_is_idempotent(self, store: GroupStore, store_path: pathlib.Path) -> None:
        store.create()
        store_path.write_text("custom: {}\n", encoding="utf-8")
        assert store.create() is False
        assert store_path.read_text(encoding="utf-8") == "custom: {}\n"

    def test_logs_warnings_when_creating(
        self, store: GroupStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.WARNING)
        store.create()
        assert "directory" in caplog.text
        assert "is missing, creating" in caplog.text

    def test_existing_folder_only_writes_file(self, tmp_path: pathlib.Path) -> None:
        store = GroupStore(tmp_path / "permissions.yml")
        assert store.create() is True
        assert (tmp_path / "permissions.yml").exists()

    def test_defaults_load_and_flatten(self, store: GroupStore) -> None:
        store.create()
        registry = GroupRegistry.build(store.load())
        assert registry.default_group is not None
        assert registry.default_group.name == "user"
        assert ".*" in registry["owner"].combined_permissions
        assert "player.kick" in registry["admin"].combined_permissions


# ---------------------------------------------------------------------------
# load
# ---------------------------------------------------------------------------


class TestGroupStoreLoad:
    def test_missing_file_raises(self, store: GroupStore) -> None:
        with pytest.raises(FileNotFoundError):
            store.load()

    def test_preserves_authored_order(self, store: GroupStore, store_path: pathlib.Path) -> None:
        _write(
            store_path,
            """\
            zeta:
              permissions: [a]
            alpha:
              permissions: [b]
            mid: {}
            """,
        )
        assert list(store.load()) == ["zeta", "alpha", "mid"]

    def test_returns_unflattened_groups(self, store: GroupStore, store_path: pathlib.Path) -> None:
        _write(
            store_path,
            """\
            admin:
              inheritance: [mod]
              combined_permissions: [".*"]
            mod:
              permissions: [kick.*]
            """,
        )
        groups = store.load()
        assert isinstance(groups["admin"], Group)
        assert groups["admin"].combined_permissions == ()
        assert groups["admin"].inheritance == ("mod",)

    def test_empty_file_is_empty_mapping(self, store: GroupStore, store_path: pathlib.Path) -> None:
        _write(store_path, "")
        assert store.load() == {}

    def test_null_group_body_is_empty_group(
        self, store: GroupStore, store_path: pathlib.Path
    ) -> None:
        _write(store_path, "user:\n")
        assert store.load()["user"].permissions == ()

    def test_unknown_fields_tolerated(self, store: GroupStore, store_path: pathlib.Path) -> None:
        _write(
            store_path,
            """\
            user:
              is_default: true
              badge_text: Member
              permissions: [chat.send]
            """,
        )
        group = store.load()["user"]
        assert group.is_default is True
        assert group.permissions == ("chat.send",)

    def test_invalid_yaml_raises(self, store: GroupStore, store_path: pathlib.Path) -> None:
        _write(store_path, "user: [unclosed\n")
        with pytest.raises(GroupConfigError, match="parse YAML"):
            store.load()

    def test_non_mapping_document_raises(
        self, store: GroupStore, store_path: pathlib.Path
    ) -> None:
        _write(store_path, "- user\n- admin\n")
        with pytest.raises(GroupConfigError, match="mapping"):
            store.load()

    @pytest.mark.parametrize("document", ["false\n", "0\n", "[]\n", "''\n"])
    def test_falsy_non_mapping_document_raises(
        self, store: GroupStore, store_path: pathlib.Path, document: str
    ) -> None:
        _write(store_path, document)
        with pytest.raises(GroupConfigError, match="mapping"):
            store.load()

    def test_null_document_is_empty_mapping(self, store: GroupStore) -> None:
        assert store.load_from_yaml_string("~\n") == {}

    def test_numeric_names_in_inheritance_and_permissions(
        self, store: GroupStore, store_path: pathlib.Path
    ) -> None:
        _write(
            store_path,
            """\
            admin:
              inheritance: [2]
              permissions: [7]
            2:
              permissions: [kick.*]
            """,
        )
        groups = store.load()
        assert groups["admin"].inheritance == ("2",)
        assert groups["admin"].permissions == ("7",)
        registry = GroupRegistry.build(groups, "transitive")
        assert "kick.*" in registry["admin"].combined_permissions

    def test_non_mapping_group_body_raises(
        self, store: GroupStore, store_path: pathlib.Path
    ) -> None:
        _write(store_path, "user: [chat.send]\n")
        with pytest.raises(GroupConfigError, match="user"):
            store.load()

    def test_invalid_field_type_raises(
        self, store: GroupStore, store_path: pathlib.Path
    ) -> None:
        _write(store_path, "user:\n  permissions: chat.send\n")
        with pytest.raises(GroupConfigError, match="user"):
            store.load()

    def test_bad_encoding_raises(self, store: GroupStore, store_path: pathlib.Path) -> None:
        store_path.parent.mkdir(parents=True, exist_ok=True)
        store_path.write_bytes(b"user:\n  permissions: [\xff\xfe]\n")
        with pytest.raises(GroupConfigError, match="UTF-8"):
            store.load()

    def test_error_carries_config_path(
        self, store: GroupStore, store_path: pathlib.Path
    ) -> None:
        _write(store_path, "- nope\n")
        with pytest.raises(GroupConfigError) as exc_info:
            store.load()
        assert exc_info.value.config_path == str(store_path)

    def test_load_from_yaml_string(self, store: GroupStore) -> None:
        groups = store.load_from_yaml_string("mod:\n  permissions: [kick.*]\n")
        assert groups["mod"].permissions == ("kick.*",)


# ---------------------------------------------------------------------------
# save
# ---------------------------------------------------------------------------


class TestGroupStoreSave:
    def test_save_writes_iteration_order(
        self, store: GroupStore, store_path: pathlib.Path
    ) -> None:
        registry = GroupRegistry.build(
            {
                "user": Group(name="user", is_default=True),
                "admin": Group(name="admin", inheritance=("mod",)),
                "mod": Group(name="mod", permissions=("kick.*",)),
            }
        )
        store.save(registry)
        raw = yaml.safe_load(store_path.read_text(encoding="utf-8"))
        assert list(raw) == ["user", "admin", "mod"]
        assert raw["admin"] == {"is_default": False, "inheritance": ["mod"], "permissions": []}

    def test_save_then_load_round_trip(self, store: GroupStore) -> None:
        registry = GroupRegistry.build(
            {
                "admin": Group(name="admin", inheritance=("mod",)),
                "mod": Group(name="mod", permissions=("kick.*", ".*")),
            }
        )
        store.save(registry)
        reloaded = GroupRegistry.build(store.load())
        assert reloaded.names() == ["admin", "mod"]
        assert reloaded["mod"].permissions == ("kick.*", ".*")
        assert set(reloaded["admin"].combined_permissions) == {"kick.*", ".*"}

    def test_save_combined_permissions_option(self, store_path: pathlib.Path) -> None:
        store = GroupStore(store_path, save_combined_permissions=True)
        registry = GroupRegistry.build(
            {
                "admin": Group(name="admin", inheritance=("mod",)),
                "mod": Group(name="mod", permissions=("kick.*",)),
            }
        )
        store.save(registry)
        raw = yaml.safe_load(store_path.read_text(encoding="utf-8"))
        assert raw["admin"]["combined_permissions"] == ["kick.*"]

    def test_save_creates_parent_folder(self, store: GroupStore, store_path: pathlib.Path) -> None:
        store.save(GroupRegistry.empty())
        assert store_path.exists()
