"""Automation model: a trigger plus the actions it runs."""

from datetime import datetime
from typing import Annotated, Literal
from uuid import uuid4

from pydantic import BaseModel, Field, field_serializer, field_validator

from .enums import FlowPreset, SunEvent

WEEKDAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


class TimeTrigger(BaseModel):
    """Fire at a wall-clock time on selected weekdays (0 = Monday)."""

    kind: Literal["time"] = "time"
    hour: int = Field(ge=0, le=23, description="Hour (0-23)")
    minute: int = Field(default=0, ge=0, le=59, description="Minute (0-59)")
    weekdays: list[int] = Field(
        default_factory=lambda: list(range(7)),
        min_length=1,
        description="Weekdays (0 = Monday ... 6 = Sunday)",
    )

    @field_validator("weekdays")
    @classmethod
    def validate_weekdays(cls, v: list[int]) -> list[int]:
        """Ensure weekdays are 0-6 and keep them sorted and unique."""
        if any(not 0 <= day <= 6 for day in v):
            raise ValueError("Weekdays must be between 0 (Monday) and 6 (Sunday)")
        return sorted(set(v))

    def describe(self) -> str:
        time_text = f"{self.hour:02d}:{self.minute:02d}"
        if len(self.weekdays) == 7:
            return f"Every day at {time_text}"
        if self.weekdays == [0, 1, 2, 3, 4]:
            return f"Weekdays at {time_text}"
        if self.weekdays == [5, 6]:
            return f"Weekends at {time_text}"
        days = ", ".join(WEEKDAY_NAMES[d] for d in self.weekdays)
        return f"{days} at {time_text}"


class SunTrigger(BaseModel):
    """Fire at sunrise or sunset."""

    kind: Literal["sun"] = "sun"
    event: SunEvent = Field(description="Sunrise or sunset")

    def describe(self) -> str:
        return f"At {self.event.value}"


class ManualTrigger(BaseModel):
    """Only runs when started by hand."""

    kind: Literal["manual"] = "manual"

    def describe(self) -> str:
        return "Manually"


Trigger = Annotated[TimeTrigger | SunTrigger | ManualTrigger, Field(discriminator="kind")]


class PowerAction(BaseModel):
    """Turn devices on or off."""

    kind: Literal["power"] = "power"
    device_ids: list[str] = Field(min_length=1, description="Target devices")
    on: bool = Field(description="Power state to set")

    def describe(self) -> str:
        return f"Turn {'on' if self.on else 'off'} {len(self.device_ids)} device(s)"


class EffectAction(BaseModel):
    """Start a saved effect on devices."""

    kind: Literal["effect"] = "effect"
    effect_id: str = Field(description="Effect to start")
    device_ids: list[str] = Field(min_length=1, description="Target devices")

    def describe(self) -> str:
        return f"Start effect {self.effect_id} on {len(self.device_ids)} device(s)"


class GroupPowerAction(BaseModel):
    """Turn a whole group on or off."""

    kind: Literal["group_power"] = "group_power"
    group_id: str = Field(description="Target group")
    on: bool = Field(description="Power state to set")

    def describe(self) -> str:
        return f"Turn {'on' if self.on else 'off'} group {self.group_id}"


class PresetAction(BaseModel):
    """Start a preset flow on devices."""

    kind: Literal["preset"] = "preset"
    preset: FlowPreset = Field(description="Preset to start (Custom is not allowed)")
    device_ids: list[str] = Field(min_length=1, description="Target devices")

    @field_validator("preset")
    @classmethod
    def validate_preset(cls, v: FlowPreset) -> FlowPreset:
        if v is FlowPreset.CUSTOM:
            raise ValueError("Custom preset has no transitions; save it as an effect instead")
        return v

    def describe(self) -> str:
        return f"Start {self.preset.value} on {len(self.device_ids)} device(s)"


AutomationAction = Annotated[
    PowerAction | EffectAction | GroupPowerAction | PresetAction,
    Field(discriminator="kind"),
]


class Automation(BaseModel):
    """A trigger and the actions it runs."""

    id: str = Field(default_factory=lambda: uuid4().hex, description="Automation identifier")
    name: str = Field(min_length=1, description="Automation name")
    enabled: bool = Field(default=True, description="Disabled automations never fire")
    trigger: Trigger = Field(default_factory=ManualTrigger, description="When to run")
    actions: list[AutomationAction] = Field(min_length=1, description="What to do, in order")
    last_run: datetime | None = Field(default=None, description="When the actions last ran")

    @field_serializer("last_run")
    def serialize_datetime(self, dt: datetime | None) -> str | None:
        """Serialize datetime to ISO format."""
        return dt.isoformat() if dt else None

    def describe(self) -> str:
        """Human summary, e.g. 'Weekdays at 07:00: Start Sunrise on 2 device(s)'."""
        actions = "; ".join(action.describe() for action in self.actions)
        return f"{self.trigger.describe()}: {actions}"


class AutomationRegistry(BaseModel):
    """Persisted collection of automations (automations.json)."""

    automations: list[Automation] = Field(default_factory=list, description="Automations")
