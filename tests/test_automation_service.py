"""Tests for AutomationService."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from yeelightctl.exceptions import DispatchError, EntityNotFoundError
from yeelightctl.flow import resolve_preset
from yeelightctl.models import (
    EffectAction,
    FlowPreset,
    GroupPowerAction,
    PowerAction,
    PresetAction,
    SunEvent,
    SunTrigger,
    TimeTrigger,
)
from yeelightctl.protocols import AutomationEvent
from yeelightctl.services import AutomationService, EffectLibraryService, GroupService

NOW = datetime(2026, 3, 14, 7, 0)


@pytest.fixture
def effects(config, activation):
    service = EffectLibraryService(config, activation)
    service.load()
    return service


@pytest.fixture
def groups(config, devices, activation):
    service = GroupService(config, devices, activation)
    service.load()
    return service


@pytest.fixture
def automations(config, devices, activation, effects, groups):
    service = AutomationService(config, devices, activation, effects, groups, clock=lambda: NOW)
    service.load()
    return service


class TestAutomationEditing:
    """Test automation CRUD."""

    @pytest.mark.unit
    def test_create_and_reload(self, automations, config, devices, activation, effects, groups):
        automation = automations.create_automation(
            "Wake up",
            TimeTrigger(hour=7, minute=0, weekdays=[0, 1, 2, 3, 4]),
            [PresetAction(preset=FlowPreset.SUNRISE, device_ids=["sim-1"])],
        )

        reloaded = AutomationService(config, devices, activation, effects, groups)
        reloaded.load()
        restored = reloaded.get_automation(automation.id)
        assert restored.describe() == automation.describe()
        assert isinstance(restored.actions[0], PresetAction)

    @pytest.mark.unit
    def test_update(self, automations):
        automation = automations.create_automation(
            "Evening", SunTrigger(event=SunEvent.SUNSET), [PowerAction(device_ids=["sim-1"], on=True)]
        )
        updated = automations.update_automation(automation.id, name="Dusk", enabled=False)
        assert updated.name == "Dusk"
        assert not updated.enabled

    @pytest.mark.unit
    def test_update_validates(self, automations):
        automation = automations.create_automation(
            "Evening", SunTrigger(event=SunEvent.SUNSET), [PowerAction(device_ids=["sim-1"], on=True)]
        )
        with pytest.raises(ValidationError):
            automations.update_automation(automation.id, actions=[])
        with pytest.raises(AttributeError):
            automations.update_automation(automation.id, last_run=NOW)
        assert automations.get_automation(automation.id).name == "Evening"

    @pytest.mark.unit
    def test_enable_disable_events(self, automations, observer):
        automation = automations.create_automation(
            "Evening", SunTrigger(event=SunEvent.SUNSET), [PowerAction(device_ids=["sim-1"], on=True)]
        )
        automations.register_observer(observer)

        automations.disable(automation.id)
        automations.enable(automation.id)
        automations.delete_automation(automation.id)

        assert observer.kinds == [AutomationEvent.DISABLED, AutomationEvent.ENABLED, AutomationEvent.DELETED]
        with pytest.raises(EntityNotFoundError):
            automations.get_automation(automation.id)


class TestAutomationRun:
    """Test running automations."""

    @pytest.mark.asyncio
    async def test_runs_every_action_kind(self, automations, groups, devices):
        group = groups.create_group("Pair", ["sim-2", "sim-3"])
        automation = automations.create_automation(
            "Everything",
            TimeTrigger(hour=7),
            [
                PowerAction(device_ids=["sim-1"], on=False),
                GroupPowerAction(group_id=group.id, on=True),
                PresetAction(preset=FlowPreset.PULSE, device_ids=["sim-2"]),
                EffectAction(effect_id="builtin-disco", device_ids=["sim-3"]),
            ],
        )

        ran = await automations.run(automation.id)

        assert ran.last_run == NOW
        assert not devices.get_device("sim-1").power
        starts = devices.calls_for("start_color_flow")
        assert [c.device_id for c in starts] == ["sim-2", "sim-3"]
        assert starts[0].args["params"].transitions == resolve_preset(FlowPreset.PULSE)
        assert starts[1].args["params"].transitions == resolve_preset(FlowPreset.DISCO)

    @pytest.mark.asyncio
    async def test_disabled_automation_still_runs_manually(self, automations, devices):
        automation = automations.create_automation(
            "Off", TimeTrigger(hour=23), [PowerAction(device_ids=["sim-1"], on=False)], enabled=False
        )
        await automations.run(automation.id)
        assert not devices.get_device("sim-1").power

    @pytest.mark.asyncio
    async def test_failed_action_does_not_stop_the_rest(self, automations, devices, observer):
        automation = automations.create_automation(
            "Partial",
            TimeTrigger(hour=7),
            [
                PowerAction(device_ids=["sim-1"], on=False),
                EffectAction(effect_id="missing", device_ids=["sim-2"]),
                PowerAction(device_ids=["sim-3"], on=False),
            ],
        )
        automations.register_observer(observer)

        with pytest.raises(DispatchError, match="1 of 3"):
            await automations.run(automation.id)

        assert not devices.get_device("sim-3").power
        assert automations.get_automation(automation.id).last_run == NOW
        assert observer.kinds == [AutomationEvent.RAN]
