"""Pytest fixtures for tests."""

from pathlib import Path
from tempfile import TemporaryDirectory

import pytest

from yeelightctl.devices import SimulatedDeviceManager, demo_devices
from yeelightctl.models import AppConfig, FlowParams, FlowTransition
from yeelightctl.services import FlowActivationService, FlowEditorService


class RecordingObserver:
    """Observer double that records every callback it receives."""

    def __init__(self):
        self.events = []

    def on_device_event(self, event, device_id, device=None):
        self.events.append((event, device_id, device))

    def on_flow_edit_event(self, event, transitions):
        self.events.append((event, transitions))

    def on_effect_event(self, event, effect=None):
        self.events.append((event, effect))

    def on_group_event(self, event, group=None):
        self.events.append((event, group))

    def on_automation_event(self, event, automation=None):
        self.events.append((event, automation))

    def on_scene_event(self, event, scene=None):
        self.events.append((event, scene))

    @property
    def kinds(self):
        return [entry[0] for entry in self.events]


@pytest.fixture
def temp_dir():
    """Create a temporary directory that gets cleaned up."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config(temp_dir):
    """Config whose data files live in the temporary directory."""
    return AppConfig(data_dir=temp_dir)


@pytest.fixture
def devices():
    """Three simulated bulbs: sim-1 (on), sim-2 (off), sim-3 (on)."""
    return SimulatedDeviceManager(demo_devices(3))


@pytest.fixture
def activation(devices, config):
    return FlowActivationService(devices, config)


@pytest.fixture
def editor(config, activation):
    return FlowEditorService(config, activation)


@pytest.fixture
def observer():
    return RecordingObserver()


@pytest.fixture
def red_blue_params():
    """A small two-step custom flow."""
    return FlowParams(
        transitions=(
            FlowTransition.color(500, 255, 0, 0),
            FlowTransition.color(500, 0, 0, 255),
        )
    )
