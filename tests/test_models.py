"""Tests for the Pydantic models."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from yeelightctl.exceptions import ConfigFileInvalidError
from yeelightctl.models import (
    AppConfig,
    Automation,
    BrightnessMode,
    ColorMode,
    Device,
    DeviceGroup,
    Effect,
    EffectLibrary,
    FlowAction,
    FlowParams,
    FlowPreset,
    FlowTransition,
    GroupPowerAction,
    ManualTrigger,
    PowerAction,
    PresetAction,
    SunEvent,
    SunTrigger,
    SyncMode,
    TemperatureMode,
    TimeTrigger,
)


class TestFlowTransition:
    """Test FlowTransition and its modes."""

    @pytest.mark.unit
    def test_color_factory(self):
        t = FlowTransition.color(1000, 255, 128, 0)
        assert t.duration == 1000
        assert isinstance(t.mode, ColorMode)
        assert t.mode.to_hex() == "#FF8000"
        assert t.describe() == "1000 ms rgb(255, 128, 0)"

    @pytest.mark.unit
    def test_temperature_factory(self):
        t = FlowTransition.temperature(3000, 2700, 80)
        assert isinstance(t.mode, TemperatureMode)
        assert t.mode.describe() == "2700K @ 80%"

    @pytest.mark.unit
    def test_brightness_factory(self):
        t = FlowTransition.brightness(50, 0)
        assert isinstance(t.mode, BrightnessMode)
        assert t.mode.level == 0

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "build",
        [
            lambda: FlowTransition.color(0, 255, 0, 0),
            lambda: FlowTransition.color(100, 256, 0, 0),
            lambda: FlowTransition.color(100, 0, -1, 0),
            lambda: FlowTransition.temperature(100, 1699, 50),
            lambda: FlowTransition.temperature(100, 6501, 50),
            lambda: FlowTransition.temperature(100, 4000, 0),
            lambda: FlowTransition.brightness(100, 101),
        ],
    )
    def test_out_of_range_values_rejected(self, build):
        with pytest.raises(ValidationError):
            build()

    @pytest.mark.unit
    def test_transitions_are_frozen(self):
        t = FlowTransition.color(100, 1, 2, 3)
        with pytest.raises(ValidationError):
            t.duration = 5

    @pytest.mark.unit
    def test_discriminated_mode_from_json(self):
        t = FlowTransition.model_validate(
            {"duration": 200, "mode": {"kind": "temperature", "kelvin": 5000, "brightness": 10}}
        )
        assert isinstance(t.mode, TemperatureMode)
        assert t.mode.kelvin == 5000


class TestFlowParams:
    """Test FlowParams."""

    @pytest.mark.unit
    def test_defaults(self):
        params = FlowParams()
        assert params.count == 0
        assert params.action == FlowAction.RECOVER
        assert params.is_empty
        assert params.is_infinite

    @pytest.mark.unit
    def test_total_duration(self, red_blue_params):
        assert red_blue_params.total_duration == 1000
        assert not red_blue_params.is_empty

    @pytest.mark.unit
    def test_negative_count_rejected(self):
        with pytest.raises(ValidationError):
            FlowParams(count=-1)

    @pytest.mark.unit
    def test_equal_params_compare_equal(self):
        a = FlowParams(count=2, transitions=(FlowTransition.brightness(10, 5),))
        b = FlowParams(count=2, transitions=(FlowTransition.brightness(10, 5),))
        assert a == b


class TestFlowPreset:
    """Test FlowPreset enum helpers."""

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["Pulse", "pulse", "  PULSE ", "PULSE"])
    def test_from_name_is_case_insensitive(self, name):
        assert FlowPreset.from_name(name) is FlowPreset.PULSE

    @pytest.mark.unit
    def test_from_name_unknown(self):
        assert FlowPreset.from_name("Rainbow") is None

    @pytest.mark.unit
    def test_every_preset_has_description(self):
        for preset in FlowPreset:
            assert preset.description

    @pytest.mark.unit
    def test_only_custom_is_custom(self):
        assert [p for p in FlowPreset if p.is_custom] == [FlowPreset.CUSTOM]


class TestDevice:
    """Test Device display helpers."""

    @pytest.mark.unit
    def test_display_name_prefers_name(self):
        assert Device(id="1", ip="10.0.0.2", name="Desk").display_name == "Desk"

    @pytest.mark.unit
    def test_display_name_falls_back_to_address(self):
        assert Device(id="1", ip="10.0.0.2", model="color").display_name == "color @ 10.0.0.2"

    @pytest.mark.unit
    def test_status_text(self):
        assert Device(id="1", ip="x", power=True, flowing=True).status_text == "flowing"
        assert Device(id="1", ip="x", power=True).status_text == "on"
        assert Device(id="1", ip="x").status_text == "off"


class TestAutomationModels:
    """Test triggers, actions and Automation validation."""

    @pytest.mark.unit
    def test_time_trigger_weekdays_sorted_and_unique(self):
        trigger = TimeTrigger(hour=7, minute=5, weekdays=[4, 0, 0, 2])
        assert trigger.weekdays == [0, 2, 4]

    @pytest.mark.unit
    def test_time_trigger_descriptions(self):
        assert TimeTrigger(hour=7, minute=0).describe() == "Every day at 07:00"
        assert TimeTrigger(hour=7, minute=0, weekdays=[0, 1, 2, 3, 4]).describe() == "Weekdays at 07:00"
        assert TimeTrigger(hour=22, minute=30, weekdays=[5, 6]).describe() == "Weekends at 22:30"

    @pytest.mark.unit
    def test_time_trigger_requires_a_weekday(self):
        with pytest.raises(ValidationError):
            TimeTrigger(hour=7, minute=0, weekdays=[])

    @pytest.mark.unit
    def test_time_trigger_rejects_bad_hour(self):
        with pytest.raises(ValidationError):
            TimeTrigger(hour=24, minute=0)

    @pytest.mark.unit
    def test_sun_and_manual_triggers(self):
        assert SunTrigger(event=SunEvent.SUNSET).describe() == "At sunset"
        assert ManualTrigger().describe() == "Manually"

    @pytest.mark.unit
    def test_preset_action_rejects_custom(self):
        with pytest.raises(ValidationError):
            PresetAction(preset=FlowPreset.CUSTOM, device_ids=["a"])

    @pytest.mark.unit
    def test_automation_requires_an_action(self):
        with pytest.raises(ValidationError):
            Automation(name="Empty", actions=[])

    @pytest.mark.unit
    def test_automation_describe(self):
        automation = Automation(
            name="Morning",
            trigger=TimeTrigger(hour=7, minute=0, weekdays=[0, 1, 2, 3, 4]),
            actions=[PresetAction(preset=FlowPreset.SUNRISE, device_ids=["a", "b"])],
        )
        assert automation.describe() == "Weekdays at 07:00: Start Sunrise on 2 device(s)"

    @pytest.mark.unit
    def test_automation_json_round_trip_keeps_action_types(self):
        automation = Automation(
            name="Night",
            trigger=SunTrigger(event=SunEvent.SUNSET),
            actions=[
                PowerAction(device_ids=["a"], on=False),
                GroupPowerAction(group_id="g1", on=True),
            ],
            last_run=datetime(2026, 1, 2, 3, 4),
        )
        restored = Automation.model_validate_json(automation.model_dump_json())
        assert isinstance(restored.actions[0], PowerAction)
        assert isinstance(restored.actions[1], GroupPowerAction)
        assert isinstance(restored.trigger, SunTrigger)
        assert restored.last_run == datetime(2026, 1, 2, 3, 4)


class TestStoredModels:
    """Test Effect, DeviceGroup and AppConfig."""

    @pytest.mark.unit
    def test_effect_requires_name(self, red_blue_params):
        with pytest.raises(ValidationError):
            Effect(name="", params=red_blue_params)

    @pytest.mark.unit
    def test_effect_library_serializes(self, red_blue_params):
        library = EffectLibrary(effects=[Effect(name="Police", params=red_blue_params)])
        restored = EffectLibrary.model_validate_json(library.model_dump_json())
        assert restored.effects[0].params == red_blue_params

    @pytest.mark.unit
    def test_group_defaults(self):
        group = DeviceGroup(name="Lounge")
        assert group.sync_mode == SyncMode.MIRROR
        assert group.is_empty
        assert group.icon == "lightbulb"

    @pytest.mark.unit
    def test_config_paths(self, temp_dir):
        config = AppConfig(data_dir=temp_dir)
        assert config.effects_file == temp_dir / "effects.json"
        assert config.groups_file == temp_dir / "groups.json"
        assert config.automations_file == temp_dir / "automations.json"
        assert config.log_dir == temp_dir / "logs"

    @pytest.mark.unit
    def test_config_save_and_load(self, temp_dir):
        path = temp_dir / "config.json"
        AppConfig(data_dir=temp_dir, discovery_timeout=5.0, last_preset=FlowPreset.DISCO).save(path)
        loaded = AppConfig.load_or_default(path)
        assert loaded.discovery_timeout == 5.0
        assert loaded.last_preset is FlowPreset.DISCO
        assert loaded.data_dir == temp_dir

    @pytest.mark.unit
    def test_config_invalid_json_raises(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_text("{not json")
        with pytest.raises(ConfigFileInvalidError):
            AppConfig.load_or_default(path)
