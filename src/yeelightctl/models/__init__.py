"""Data models for Yeelight control."""

from .automation import (
    Automation,
    AutomationAction,
    AutomationRegistry,
    EffectAction,
    GroupPowerAction,
    ManualTrigger,
    PowerAction,
    PresetAction,
    SunTrigger,
    TimeTrigger,
    Trigger,
)
from .config import AppConfig
from .device import Device
from .effect import Effect, EffectLibrary
from .enums import FlowAction, FlowPreset, SunEvent, SyncMode, TransitionEffect
from .flow import BrightnessMode, ColorMode, FlowParams, FlowTransition, TemperatureMode
from .group import DeviceGroup, GroupRegistry
from .scene import Scene, SceneRegistry

__all__ = [
    "AppConfig",
    # Models
    "Automation",
    "AutomationAction",
    "AutomationRegistry",
    "BrightnessMode",
    "ColorMode",
    "Device",
    "DeviceGroup",
    "Effect",
    "EffectAction",
    "EffectLibrary",
    # Enums
    "FlowAction",
    "FlowParams",
    "FlowPreset",
    "FlowTransition",
    "GroupPowerAction",
    "GroupRegistry",
    "ManualTrigger",
    "PowerAction",
    "PresetAction",
    "Scene",
    "SceneRegistry",
    "SunEvent",
    "SunTrigger",
    "SyncMode",
    "TemperatureMode",
    "TimeTrigger",
    "TransitionEffect",
    "Trigger",
]
