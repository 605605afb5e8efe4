"""Smoke tests for the TUI using Textual's test framework.

The app runs against simulated bulbs, so every request completes in
memory. These tests check that the main screen renders, that a toggle
reaches the device manager, and that the secondary screens open and close.
"""

import pytest
from textual.widgets import Button, Input

from yeelightctl.app import YeelightController
from yeelightctl.flow import preset_params
from yeelightctl.models import AppConfig, FlowPreset
from yeelightctl.tui import YeelightControlApp
from yeelightctl.tui.screens import (
    AutomationsScreen,
    EffectsScreen,
    FlowEditorScreen,
    GroupsScreen,
    ScenesScreen,
)
from yeelightctl.tui.widgets import DeviceList, FlowPanel, StatusBar


@pytest.fixture
def controller(temp_dir):
    return YeelightController(AppConfig(data_dir=temp_dir), simulate=True)


@pytest.mark.integration
@pytest.mark.asyncio
class TestTUILaunch:
    """Test that the TUI starts and shows the bulbs."""

    async def test_mounts_widgets(self, controller):
        app = YeelightControlApp(controller)
        async with app.run_test() as pilot:
            await pilot.pause()

            assert app.query_one(DeviceList).row_count == 3
            assert app.query_one(FlowPanel).preset is FlowPreset.CANDLELIGHT
            assert app.query_one("Header") is not None
            assert app.query_one("Footer") is not None
            assert app.startup_error is None

    async def test_status_bar_shows_simulated(self, controller):
        app = YeelightControlApp(controller)
        async with app.run_test() as pilot:
            await pilot.pause()
            status = app.query_one(StatusBar)
            assert status.has_class("simulated")
            assert status.message == "Ready"

    async def test_first_bulb_is_selected(self, controller):
        app = YeelightControlApp(controller)
        async with app.run_test() as pilot:
            await pilot.pause()
            assert app.selected_device_id == "sim-1"

            await pilot.press("down")
            await pilot.pause()
            assert app.selected_device_id == "sim-2"


@pytest.mark.integration
@pytest.mark.asyncio
class TestTUIRequests:
    """Test requests sent from the main screen."""

    async def test_space_starts_then_stops_flow(self, controller):
        app = YeelightControlApp(controller)
        async with app.run_test() as pilot:
            await pilot.pause()

            await pilot.press("space")
            await controller.activation.wait_idle()
            await pilot.pause()

            assert controller.devices.get_device("sim-1").flowing
            assert controller.config_service.get("last_preset") is FlowPreset.CANDLELIGHT

            await pilot.press("space")
            await controller.activation.wait_idle()
            await pilot.pause()

            assert not controller.devices.get_device("sim-1").flowing
            assert len(controller.devices.calls_for("start_color_flow")) == 1
            assert len(controller.devices.calls_for("stop_color_flow")) == 1

    async def test_failed_toggle_keeps_app_running(self, controller):
        controller.devices.fail_device("sim-1")
        app = YeelightControlApp(controller)
        async with app.run_test() as pilot:
            await pilot.pause()

            await pilot.press("space")
            await controller.activation.wait_idle()
            await pilot.pause()

            assert app.is_running
            assert controller.devices.get_device("sim-1").last_error

    async def test_empty_custom_flow_sends_nothing(self, controller):
        app = YeelightControlApp(controller)
        async with app.run_test() as pilot:
            await pilot.pause()
            app.query_one(FlowPanel).preset = FlowPreset.CUSTOM
            await pilot.pause()

            await pilot.press("space")
            await pilot.pause()

            assert controller.devices.calls == []

    async def test_power_toggle(self, controller):
        app = YeelightControlApp(controller)
        async with app.run_test() as pilot:
            await pilot.pause()

            await pilot.press("o")
            await app.workers.wait_for_complete()
            await pilot.pause()

            assert not controller.devices.get_device("sim-1").power


@pytest.mark.integration
@pytest.mark.asyncio
class TestTUIScreens:
    """Test opening and closing the secondary screens."""

    @pytest.mark.parametrize(
        ("key", "screen_type"),
        [("f", EffectsScreen), ("g", GroupsScreen), ("a", AutomationsScreen), ("s", ScenesScreen)],
    )
    async def test_open_and_close(self, controller, key, screen_type):
        app = YeelightControlApp(controller)
        async with app.run_test() as pilot:
            await pilot.pause()

            await pilot.press(key)
            await pilot.pause()
            assert isinstance(app.screen, screen_type)

            await pilot.press("escape")
            await pilot.pause()
            assert not isinstance(app.screen, screen_type)

    async def test_editor_cancel_drops_edits(self, controller):
        app = YeelightControlApp(controller)
        async with app.run_test() as pilot:
            await pilot.pause()

            await pilot.press("e")
            await pilot.pause()
            assert isinstance(app.screen, FlowEditorScreen)
            assert len(controller.editor.transitions) == 2

            await pilot.press("escape")
            await pilot.pause()

            assert not isinstance(app.screen, FlowEditorScreen)
            assert controller.editor.transitions == ()
            assert controller.devices.calls == []


@pytest.mark.integration
@pytest.mark.asyncio
class TestTUIBackgroundUpdates:
    """Test device state that changes while a secondary screen is open."""

    @pytest.mark.parametrize("key", ["f", "g", "a", "s", "e"])
    async def test_flow_started_under_secondary_screen_is_shown_after_close(self, controller, key):
        app = YeelightControlApp(controller)
        async with app.run_test() as pilot:
            await pilot.pause()

            await pilot.press(key)
            await pilot.pause()
            assert app.screen is not app.main_screen

            await controller.devices.start_color_flow("sim-1", preset_params(FlowPreset.PULSE))
            await pilot.pause()

            await pilot.press("escape")
            await pilot.pause()
            assert app.screen is app.main_screen

            device_list = app.query_one(DeviceList)
            assert device_list.selected_device.flowing
            assert "flowing" in str(device_list.get_cell("sim-1", "state"))
            assert str(app.query_one("#toggle-btn", Button).label) == "Stop"
            assert app.query_one(StatusBar).message == "Living Room: flow started"

    async def test_bad_repeat_count_does_not_crash(self, controller):
        app = YeelightControlApp(controller)
        async with app.run_test() as pilot:
            await pilot.pause()

            count_input = app.query_one("#count-input", Input)
            count_input.value = "-"
            await pilot.pause()

            await pilot.press("down")
            await pilot.pause()
            assert app.is_running
            assert app.selected_device_id == "sim-2"

            await pilot.press("g")
            await pilot.pause()
            assert isinstance(app.screen, GroupsScreen)
            await pilot.press("escape")
            await pilot.pause()

            await pilot.press("space")
            await pilot.pause()
            assert app.is_running
            assert controller.devices.calls == []


@pytest.mark.integration
@pytest.mark.asyncio
class TestTUIScenes:
    """Test saving and switching scenes."""

    async def test_save_scene_from_effects_screen(self, controller):
        app = YeelightControlApp(controller)
        async with app.run_test() as pilot:
            await pilot.pause()

            await pilot.press("f")
            await pilot.pause()
            await pilot.press("s")
            await pilot.pause()

            [scene] = controller.scenes.scenes
            assert scene.device_ids == ["sim-1"]
            assert scene.name.endswith(" on Living Room")
            assert controller.devices.calls == []

    async def test_enter_switches_scene_on_and_off(self, controller):
        controller.scenes.create_scene("Evening", ["sim-1", "sim-2"], "builtin-disco")
        app = YeelightControlApp(controller)
        async with app.run_test() as pilot:
            await pilot.pause()

            await pilot.press("s")
            await pilot.pause()
            assert isinstance(app.screen, ScenesScreen)

            await pilot.press("enter")
            await app.workers.wait_for_complete()
            await pilot.pause()

            assert controller.scenes.find_scene("Evening").is_active
            assert controller.devices.get_device("sim-2").flowing

            await pilot.press("enter")
            await app.workers.wait_for_complete()
            await pilot.pause()

            assert not controller.scenes.find_scene("Evening").is_active
            assert not controller.devices.get_device("sim-2").flowing
            assert app.main_screen.query_one(StatusBar).message == "Scene 'Evening' deactivated"
