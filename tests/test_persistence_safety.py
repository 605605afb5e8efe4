"""Tests for persistence safety features (backups, atomic writes, corruption handling)."""

import json
from pathlib import Path

import pytest

from yeelightctl.exceptions import ConfigurationError
from yeelightctl.model_manager.persistence import PydanticPersistence
from yeelightctl.models import DeviceGroup, GroupRegistry, SyncMode


def _registry(name: str) -> GroupRegistry:
    return GroupRegistry(groups=[DeviceGroup(name=name, device_ids=["sim-1"], sync_mode=SyncMode.WAVE)])


class TestPersistenceSafety:
    """Test safety features of PydanticPersistence."""

    @pytest.mark.unit
    def test_save_creates_backup(self, tmp_path: Path):
        path = tmp_path / "groups.json"
        PydanticPersistence.save_json(_registry("Original"), path, backup=False)
        PydanticPersistence.save_json(_registry("Modified"), path)

        backup = PydanticPersistence.load_json(path.with_suffix(".json.bak"), GroupRegistry)
        assert backup.groups[0].name == "Original"
        assert PydanticPersistence.load_json(path, GroupRegistry).groups[0].name == "Modified"

    @pytest.mark.unit
    def test_save_without_backup(self, tmp_path: Path):
        path = tmp_path / "groups.json"
        PydanticPersistence.save_json(_registry("Original"), path, backup=False)
        PydanticPersistence.save_json(_registry("Modified"), path, backup=False)
        assert not path.with_suffix(".json.bak").exists()

    @pytest.mark.unit
    def test_atomic_write_cleans_up_temp_file(self, tmp_path: Path):
        path = tmp_path / "nested" / "groups.json"
        PydanticPersistence.save_json(_registry("Lounge"), path)

        assert not path.with_suffix(".json.tmp").exists()
        loaded = PydanticPersistence.load_json(path, GroupRegistry)
        assert loaded.groups[0].sync_mode is SyncMode.WAVE

    @pytest.mark.unit
    def test_empty_file_is_invalid(self, tmp_path: Path):
        path = tmp_path / "groups.json"
        path.write_text("   ", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            PydanticPersistence.load_json(path, GroupRegistry)

    @pytest.mark.unit
    def test_load_json_or_default_missing_file(self, tmp_path: Path):
        path = tmp_path / "missing.json"
        result = PydanticPersistence.load_json_or_default(
            path, GroupRegistry, default_factory=lambda: _registry("Default")
        )
        assert result.groups[0].name == "Default"
        assert not path.exists()

    @pytest.mark.unit
    def test_load_json_or_default_corrupted_file_raises(self, tmp_path: Path):
        path = tmp_path / "corrupted.json"
        path.write_text("{ invalid }", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            PydanticPersistence.load_json_or_default(path, GroupRegistry)

    @pytest.mark.unit
    def test_invalid_schema_raises_and_file_is_kept(self, tmp_path: Path):
        path = tmp_path / "invalid_schema.json"
        content = json.dumps({"groups": [{"name": "", "sync_mode": "bounce"}]})
        path.write_text(content, encoding="utf-8")

        with pytest.raises(ConfigurationError):
            PydanticPersistence.load_json_or_default(path, GroupRegistry)

        assert path.read_text() == content
