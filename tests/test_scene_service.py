"""Tests for SceneService."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from yeelightctl.exceptions import DispatchError, EntityNotFoundError
from yeelightctl.flow import resolve_preset
from yeelightctl.models import FlowPreset
from yeelightctl.protocols import SceneEvent
from yeelightctl.services import EffectLibraryService, SceneService

NOW = datetime(2026, 3, 14, 19, 30)


@pytest.fixture
def effects(config, activation):
    service = EffectLibraryService(config, activation)
    service.load()
    return service


@pytest.fixture
def scenes(config, activation, effects):
    service = SceneService(config, activation, effects, clock=lambda: NOW)
    service.load()
    return service


class TestSceneEditing:
    """Test scene CRUD."""

    @pytest.mark.unit
    def test_create_and_reload(self, scenes, config, activation, effects):
        scene = scenes.create_scene("Evening", ["sim-1", "sim-2", "sim-1"], "builtin-disco")

        reloaded = SceneService(config, activation, effects)
        reloaded.load()
        restored = reloaded.get_scene(scene.id)
        assert restored.name == "Evening"
        assert restored.device_ids == ["sim-1", "sim-2"]
        assert restored.effect_id == "builtin-disco"
        assert restored.created_at == NOW
        assert not restored.is_active

    @pytest.mark.unit
    def test_find_by_name_ignores_case(self, scenes):
        scene = scenes.create_scene("Evening", ["sim-1"], "builtin-disco")
        assert scenes.find_scene("  evening ") is scene
        assert scenes.find_scene(scene.id) is scene
        with pytest.raises(EntityNotFoundError):
            scenes.find_scene("Morning")

    @pytest.mark.unit
    def test_duplicate_name_rejected(self, scenes):
        scenes.create_scene("Evening", ["sim-1"], "builtin-disco")
        with pytest.raises(ValueError, match="already exists"):
            scenes.create_scene("EVENING", ["sim-2"], "builtin-disco")
        assert len(scenes.scenes) == 1

    @pytest.mark.unit
    def test_unknown_effect_rejected(self, scenes):
        with pytest.raises(EntityNotFoundError):
            scenes.create_scene("Evening", ["sim-1"], "missing")
        assert scenes.scenes == []

    @pytest.mark.unit
    def test_blank_name_and_no_devices_rejected(self, scenes):
        with pytest.raises(ValidationError):
            scenes.create_scene("   ", ["sim-1"], "builtin-disco")
        with pytest.raises(ValidationError):
            scenes.create_scene("Evening", [], "builtin-disco")

    @pytest.mark.unit
    def test_update(self, scenes):
        scene = scenes.create_scene("Evening", ["sim-1"], "builtin-disco")

        updated = scenes.update_scene(scene.id, name="Dusk", device_ids=["sim-3"])

        assert updated.name == "Dusk"
        assert updated.device_ids == ["sim-3"]
        assert scenes.get_scene(scene.id).name == "Dusk"

    @pytest.mark.unit
    def test_update_validates(self, scenes):
        scene = scenes.create_scene("Evening", ["sim-1"], "builtin-disco")
        with pytest.raises(AttributeError):
            scenes.update_scene(scene.id, is_active=True)
        with pytest.raises(EntityNotFoundError):
            scenes.update_scene(scene.id, effect_id="missing")
        with pytest.raises(ValidationError):
            scenes.update_scene(scene.id, device_ids=[])
        assert scenes.get_scene(scene.id).device_ids == ["sim-1"]

    @pytest.mark.unit
    def test_delete_leaves_bulbs_alone(self, scenes, devices, observer):
        scene = scenes.create_scene("Evening", ["sim-1"], "builtin-disco")
        scenes.register_observer(observer)

        scenes.delete_scene(scene.id)

        assert observer.kinds == [SceneEvent.DELETED]
        assert devices.calls == []
        with pytest.raises(EntityNotFoundError):
            scenes.get_scene(scene.id)


class TestSceneActivation:
    """Test switching scenes on and off."""

    @pytest.mark.asyncio
    async def test_activate_starts_effect_on_devices(self, scenes, devices, observer):
        scene = scenes.create_scene("Evening", ["sim-1", "sim-2"], "builtin-disco")
        scenes.register_observer(observer)

        await scenes.activate(scene.id)

        starts = devices.calls_for("start_color_flow")
        assert [c.device_id for c in starts] == ["sim-1", "sim-2"]
        assert starts[0].args["params"].transitions == resolve_preset(FlowPreset.DISCO)
        assert scenes.get_scene(scene.id).is_active
        assert scenes.active_scenes == [scene]
        assert observer.kinds == [SceneEvent.ACTIVATED]

    @pytest.mark.asyncio
    async def test_activation_replaces_overlapping_scene(self, scenes, observer):
        evening = scenes.create_scene("Evening", ["sim-1", "sim-2"], "builtin-disco")
        reading = scenes.create_scene("Reading", ["sim-2"], "builtin-disco")
        other = scenes.create_scene("Porch", ["sim-3"], "builtin-disco")
        await scenes.activate(evening.id)
        await scenes.activate(other.id)
        scenes.register_observer(observer)

        await scenes.activate(reading.id)

        assert [s.name for s in scenes.active_scenes] == ["Reading", "Porch"]
        assert observer.events == [(SceneEvent.DEACTIVATED, evening), (SceneEvent.ACTIVATED, reading)]

    @pytest.mark.asyncio
    async def test_failed_activation_keeps_scene_inactive(self, scenes, devices, observer):
        scene = scenes.create_scene("Evening", ["sim-1", "sim-2"], "builtin-disco")
        devices.fail_device("sim-2")
        scenes.register_observer(observer)

        with pytest.raises(DispatchError):
            await scenes.activate(scene.id)

        assert not scenes.get_scene(scene.id).is_active
        assert observer.kinds == []

    @pytest.mark.asyncio
    async def test_activate_with_deleted_effect(self, scenes, effects, devices):
        copy = effects.duplicate_effect("builtin-disco")
        scene = scenes.create_scene("Evening", ["sim-1"], copy.id)
        effects.delete_effect(copy.id)

        with pytest.raises(EntityNotFoundError):
            await scenes.activate(scene.id)
        assert devices.calls == []

    @pytest.mark.asyncio
    async def test_deactivate_stops_flows(self, scenes, devices, config, activation, effects):
        scene = scenes.create_scene("Evening", ["sim-1", "sim-3"], "builtin-disco")
        await scenes.activate(scene.id)

        await scenes.deactivate(scene.id)

        stops = devices.calls_for("stop_color_flow")
        assert [c.device_id for c in stops] == ["sim-1", "sim-3"]
        reloaded = SceneService(config, activation, effects)
        reloaded.load()
        assert not reloaded.get_scene(scene.id).is_active

    @pytest.mark.asyncio
    async def test_deactivate_marks_inactive_even_when_a_bulb_fails(self, scenes, devices, observer):
        scene = scenes.create_scene("Evening", ["sim-1", "sim-2"], "builtin-disco")
        await scenes.activate(scene.id)
        devices.fail_device("sim-1")
        scenes.register_observer(observer)

        with pytest.raises(DispatchError):
            await scenes.deactivate(scene.id)

        assert not scenes.get_scene(scene.id).is_active
        assert observer.kinds == [SceneEvent.DEACTIVATED]
        assert [c.device_id for c in devices.calls_for("stop_color_flow")] == ["sim-1", "sim-2"]
