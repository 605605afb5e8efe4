"""Unit tests for ModelManagerService managing AppConfig, and for ObserverManager."""

import json
from unittest.mock import Mock

import pytest
from pydantic import ValidationError

from yeelightctl.model_manager import ModelManagerService, ObserverManager
from yeelightctl.models import AppConfig, FlowAction, FlowPreset
from yeelightctl.protocols import DeviceObserver


@pytest.fixture
def service(temp_dir):
    """Config service writing to a temp directory."""
    config = AppConfig(data_dir=temp_dir)
    return ModelManagerService[AppConfig](AppConfig, config, temp_dir / "config.json")


class TestModelAccess:
    """Test reading values."""

    @pytest.mark.unit
    def test_get_existing_field(self, service):
        assert service.get("bulb_port") == 55443
        assert service.get("default_flow_action") == FlowAction.RECOVER

    @pytest.mark.unit
    def test_get_nonexistent_field_with_default(self, service):
        assert service.get("nonexistent", "fallback") == "fallback"
        assert service.get("nonexistent") is None


class TestModelMutation:
    """Test set/update/reset."""

    @pytest.mark.unit
    def test_set(self, service):
        service.set("discovery_timeout", 5.0)
        assert service.get("discovery_timeout") == 5.0

    @pytest.mark.unit
    def test_set_coerces_strings(self, service):
        service.set("default_flow_count", "3")
        service.set("last_preset", "Disco")
        assert service.get("default_flow_count") == 3
        assert service.get("last_preset") is FlowPreset.DISCO

    @pytest.mark.unit
    def test_set_nonexistent_field_raises_error(self, service):
        with pytest.raises(AttributeError, match="has no field 'nonexistent'"):
            service.set("nonexistent", "value")

    @pytest.mark.unit
    def test_set_out_of_range_raises_validation_error(self, service):
        with pytest.raises(ValidationError):
            service.set("bulb_port", 70000)
        assert service.get("bulb_port") == 55443

    @pytest.mark.unit
    def test_update_is_all_or_nothing(self, service):
        with pytest.raises(AttributeError):
            service.update({"bulb_port": 1234, "nonexistent": 1})
        assert service.get("bulb_port") == 55443

        with pytest.raises(ValidationError):
            service.update({"group_wave_delay_ms": 50, "group_random_delay_ms": -1})
        assert service.get("group_wave_delay_ms") == 200

    @pytest.mark.unit
    def test_reset_selected_keys(self, service):
        service.update({"bulb_port": 1234, "discovery_timeout": 9.0})

        service.reset(["bulb_port"])

        assert service.get("bulb_port") == 55443
        assert service.get("discovery_timeout") == 9.0

    @pytest.mark.unit
    def test_reset_everything(self, service):
        service.set("default_flow_count", 4)
        service.reset()
        assert service.get("default_flow_count") == 0

    @pytest.mark.unit
    def test_reset_unknown_key(self, service):
        with pytest.raises(AttributeError):
            service.reset(["nonexistent"])


class TestModelPersistence:
    """Test save."""

    @pytest.mark.unit
    def test_save_writes_json(self, service, temp_dir):
        service.set("default_flow_action", FlowAction.OFF)
        service.save()

        loaded = AppConfig.load_or_default(temp_dir / "config.json")
        assert loaded.default_flow_action == FlowAction.OFF
        assert loaded.data_dir == temp_dir

    @pytest.mark.unit
    def test_second_save_keeps_backup(self, service, temp_dir):
        service.save()
        service.set("bulb_port", 1234)
        service.save()

        backup = json.loads((temp_dir / "config.json.bak").read_text())
        assert backup["bulb_port"] == 55443

    @pytest.mark.unit
    def test_save_without_path_raises_error(self):
        service = ModelManagerService[AppConfig](AppConfig, AppConfig())
        with pytest.raises(ValueError, match="No path specified"):
            service.save()


class TestObserverManager:
    """Test observer registration and isolation."""

    @pytest.fixture
    def manager(self):
        return ObserverManager[DeviceObserver](observer_type_name="device")

    @pytest.mark.unit
    def test_register_is_idempotent(self, manager):
        observer = Mock(spec=DeviceObserver)
        manager.register(observer)
        manager.register(observer)

        manager.notify("on_device_event", "event", "sim-1")

        observer.on_device_event.assert_called_once_with("event", "sim-1")

    @pytest.mark.unit
    def test_unregistered_observer_not_notified(self, manager):
        observer = Mock(spec=DeviceObserver)
        manager.register(observer)
        manager.unregister(observer)

        manager.notify("on_device_event", "event", "sim-1")

        observer.on_device_event.assert_not_called()

    @pytest.mark.unit
    def test_observer_exception_does_not_propagate(self, manager):
        failing = Mock(spec=DeviceObserver)
        failing.on_device_event.side_effect = Exception("observer failed")
        working = Mock(spec=DeviceObserver)
        manager.register(failing)
        manager.register(working)

        manager.notify("on_device_event", "event", "sim-1")

        failing.on_device_event.assert_called_once()
        working.on_device_event.assert_called_once()
