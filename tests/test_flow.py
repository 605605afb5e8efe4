"""Tests for the preset catalog and transition parsing."""

import pytest

from yeelightctl.exceptions import FlowValidationError
from yeelightctl.flow import (
    format_transition,
    list_presets,
    make_transition,
    parse_transition,
    preset_params,
    resolve_preset,
)
from yeelightctl.models import (
    BrightnessMode,
    ColorMode,
    FlowAction,
    FlowPreset,
    FlowTransition,
    TemperatureMode,
)


class TestResolvePreset:
    """Test resolve_preset."""

    @pytest.mark.unit
    @pytest.mark.parametrize("preset", [p for p in FlowPreset if not p.is_custom])
    def test_non_custom_presets_are_non_empty(self, preset):
        assert len(resolve_preset(preset)) > 0

    @pytest.mark.unit
    def test_custom_resolves_to_empty(self):
        assert resolve_preset(FlowPreset.CUSTOM) == ()

    @pytest.mark.unit
    @pytest.mark.parametrize("preset", list(FlowPreset))
    def test_resolution_is_deterministic(self, preset):
        assert resolve_preset(preset) == resolve_preset(preset)

    @pytest.mark.unit
    def test_pulse_transitions(self):
        assert resolve_preset(FlowPreset.PULSE) == (
            FlowTransition.brightness(1000, 100),
            FlowTransition.brightness(1000, 1),
        )

    @pytest.mark.unit
    def test_disco_cycles_red_green_blue(self):
        modes = [t.mode for t in resolve_preset(FlowPreset.DISCO)]
        assert all(isinstance(m, ColorMode) for m in modes)
        assert [(m.red, m.green, m.blue) for m in modes] == [(255, 0, 0), (0, 255, 0), (0, 0, 255)]

    @pytest.mark.unit
    def test_sunrise_uses_temperature(self):
        assert all(isinstance(t.mode, TemperatureMode) for t in resolve_preset(FlowPreset.SUNRISE))

    @pytest.mark.unit
    def test_name_lookup(self):
        assert resolve_preset("strobe") == resolve_preset(FlowPreset.STROBE)

    @pytest.mark.unit
    def test_unknown_name_is_empty(self):
        assert resolve_preset("Rainbow") == ()


class TestPresetParams:
    """Test preset_params and list_presets."""

    @pytest.mark.unit
    def test_pulse_defaults(self):
        params = preset_params(FlowPreset.PULSE)
        assert params.count == 0
        assert params.action == FlowAction.RECOVER
        assert params.transitions == resolve_preset(FlowPreset.PULSE)

    @pytest.mark.unit
    def test_count_and_action(self):
        params = preset_params(FlowPreset.DISCO, count=3, action=FlowAction.OFF)
        assert params.count == 3
        assert params.action == FlowAction.OFF

    @pytest.mark.unit
    def test_negative_count_raises_flow_error(self):
        with pytest.raises(FlowValidationError) as exc_info:
            preset_params(FlowPreset.DISCO, count=-2)
        assert exc_info.value.field == "count"

    @pytest.mark.unit
    def test_list_presets(self):
        assert list_presets()[-1] is FlowPreset.CUSTOM
        assert FlowPreset.CUSTOM not in list_presets(include_custom=False)
        assert len(list_presets(include_custom=False)) == 5


class TestTransitionText:
    """Test make_transition, parse_transition and format_transition."""

    @pytest.mark.unit
    @pytest.mark.parametrize("kind", ["rgb", "color", "colour", "RGB"])
    def test_color_aliases(self, kind):
        t = make_transition(kind, 100, 1, 2, 3)
        assert t.mode == ColorMode(red=1, green=2, blue=3)

    @pytest.mark.unit
    def test_parse_each_kind(self):
        assert isinstance(parse_transition("1000:rgb:255,0,0").mode, ColorMode)
        assert isinstance(parse_transition("3000:ct:2700,80").mode, TemperatureMode)
        assert isinstance(parse_transition("500:bright:40").mode, BrightnessMode)

    @pytest.mark.unit
    def test_parse_tolerates_spaces(self):
        t = parse_transition(" 500 : bright : 40 ")
        assert t == FlowTransition.brightness(500, 40)

    @pytest.mark.unit
    def test_format_is_parseable(self):
        for t in resolve_preset(FlowPreset.SUNRISE) + resolve_preset(FlowPreset.PULSE):
            assert parse_transition(format_transition(t)) == t

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "text",
        ["1000:rgb", "abc:rgb:1,2,3", "1000:rgb:1,2", "1000:laser:1", "1000:rgb:300,0,0", "0:bright:5"],
    )
    def test_bad_text_raises(self, text):
        with pytest.raises(FlowValidationError):
            parse_transition(text)

    @pytest.mark.unit
    def test_range_error_has_hint(self):
        with pytest.raises(FlowValidationError) as exc_info:
            make_transition("ct", 100, 1000, 50)
        assert "1700K" in exc_info.value.recovery_hint
