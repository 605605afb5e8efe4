"""Tests for FlowActivationService."""

import pytest

from yeelightctl.exceptions import DeviceNotFoundError, DispatchError, EmptyFlowError, FlowValidationError
from yeelightctl.flow import resolve_preset
from yeelightctl.models import AppConfig, FlowAction, FlowParams, FlowPreset, FlowTransition
from yeelightctl.protocols import DeviceEvent, FlowCommand
from yeelightctl.services import FlowActivationService


class TestResolve:
    """Test building FlowParams."""

    @pytest.mark.unit
    def test_preset_uses_catalog(self, activation):
        params = activation.resolve(FlowPreset.PULSE)
        assert params.transitions == resolve_preset(FlowPreset.PULSE)
        assert params.count == 0
        assert params.action == FlowAction.RECOVER

    @pytest.mark.unit
    def test_preset_ignores_given_transitions(self, activation):
        params = activation.resolve(FlowPreset.DISCO, transitions=[FlowTransition.brightness(5, 5)])
        assert params.transitions == resolve_preset(FlowPreset.DISCO)

    @pytest.mark.unit
    def test_custom_uses_given_transitions(self, activation):
        t = FlowTransition.brightness(5, 5)
        assert activation.resolve(FlowPreset.CUSTOM, transitions=[t]).transitions == (t,)
        assert activation.resolve(None, transitions=[t]).transitions == (t,)

    @pytest.mark.unit
    def test_preset_by_name(self, activation):
        assert activation.resolve("candlelight").transitions == resolve_preset(FlowPreset.CANDLELIGHT)

    @pytest.mark.unit
    def test_config_defaults(self, devices, temp_dir):
        config = AppConfig(data_dir=temp_dir, default_flow_count=3, default_flow_action=FlowAction.OFF)
        params = FlowActivationService(devices, config).resolve(FlowPreset.PULSE)
        assert params.count == 3
        assert params.action == FlowAction.OFF

    @pytest.mark.unit
    def test_negative_count(self, activation):
        with pytest.raises(FlowValidationError):
            activation.resolve(FlowPreset.PULSE, count=-1)

    @pytest.mark.unit
    def test_validate_rejects_empty(self, activation):
        with pytest.raises(EmptyFlowError):
            activation.validate(FlowParams())


class TestDecide:
    """Test toggle decisions."""

    @pytest.mark.unit
    def test_idle_device_starts(self, activation, red_blue_params):
        assert activation.decide("sim-1", red_blue_params) is FlowCommand.START

    @pytest.mark.asyncio
    async def test_flowing_device_stops(self, activation, devices, red_blue_params):
        await devices.start_color_flow("sim-1", red_blue_params)
        assert activation.decide("sim-1", FlowParams()) is FlowCommand.STOP

    @pytest.mark.unit
    def test_idle_device_with_empty_params(self, activation):
        with pytest.raises(EmptyFlowError):
            activation.decide("sim-1", FlowParams())

    @pytest.mark.unit
    def test_unknown_device(self, activation, red_blue_params):
        with pytest.raises(DeviceNotFoundError):
            activation.decide("nope", red_blue_params)


class TestAwaitableRequests:
    """Test start/stop/toggle."""

    @pytest.mark.asyncio
    async def test_pulse_on_idle_device_sends_exactly_once(self, activation, devices):
        params = activation.resolve(FlowPreset.PULSE, count=0, action=FlowAction.RECOVER)

        command = await activation.toggle("sim-2", params)

        assert command is FlowCommand.START
        calls = devices.calls_for("start_color_flow")
        assert len(calls) == 1
        assert calls[0].device_id == "sim-2"
        assert calls[0].args["params"] == FlowParams(
            count=0,
            action=FlowAction.RECOVER,
            transitions=(FlowTransition.brightness(1000, 100), FlowTransition.brightness(1000, 1)),
        )
        assert devices.get_device("sim-2").flowing

    @pytest.mark.asyncio
    async def test_toggle_twice_stops(self, activation, devices, red_blue_params):
        await activation.toggle("sim-1", red_blue_params)
        command = await activation.toggle("sim-1", red_blue_params)

        assert command is FlowCommand.STOP
        assert len(devices.calls_for("stop_color_flow")) == 1
        assert not devices.get_device("sim-1").flowing

    @pytest.mark.asyncio
    async def test_start_empty_sends_nothing(self, activation, devices):
        with pytest.raises(EmptyFlowError):
            await activation.start(["sim-1"], FlowParams())
        assert devices.calls == []

    @pytest.mark.asyncio
    async def test_start_many_tries_every_device(self, activation, devices, red_blue_params):
        devices.fail_device("sim-2")

        with pytest.raises(DispatchError) as exc_info:
            await activation.start(["sim-1", "sim-2", "sim-3"], red_blue_params)

        assert len(devices.calls_for("start_color_flow")) == 3
        assert devices.get_device("sim-1").flowing
        assert devices.get_device("sim-3").flowing
        assert "1 device(s)" in exc_info.value.user_message

    @pytest.mark.asyncio
    async def test_single_failure_propagates(self, activation, devices, red_blue_params):
        devices.fail_device("sim-1", TimeoutError("timed out"))
        with pytest.raises(DispatchError, match="not reachable"):
            await activation.start(["sim-1"], red_blue_params)

    @pytest.mark.asyncio
    async def test_stop_many(self, activation, devices, red_blue_params):
        await activation.start(["sim-1", "sim-2"], red_blue_params)
        await activation.stop(["sim-1", "sim-2"])
        assert not any(d.flowing for d in devices.devices)


class TestFireAndForget:
    """Test request_start/request_toggle."""

    @pytest.mark.asyncio
    async def test_request_toggle_returns_before_sending(self, activation, devices, red_blue_params, observer):
        devices.register_observer(observer)

        command = activation.request_toggle("sim-1", red_blue_params)

        assert command is FlowCommand.START
        assert activation.pending == 1
        await activation.wait_idle()
        assert activation.pending == 0
        assert DeviceEvent.FLOW_STARTED in observer.kinds

    @pytest.mark.asyncio
    async def test_request_start_validates_synchronously(self, activation, devices):
        with pytest.raises(EmptyFlowError):
            activation.request_start(["sim-1"], FlowParams())
        assert activation.pending == 0
        assert devices.calls == []

    @pytest.mark.asyncio
    async def test_failure_goes_to_on_error(self, activation, devices, red_blue_params):
        errors = []
        activation.on_error = errors.append
        devices.fail_device("sim-1")

        activation.request_start(["sim-1"], red_blue_params)
        await activation.wait_idle()

        assert len(errors) == 1
        assert isinstance(errors[0], DispatchError)
        assert devices.get_device("sim-1").last_error
