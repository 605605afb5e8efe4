"""Flow effect value objects: transitions and the parameters of a flow."""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from .enums import FlowAction


class ColorMode(BaseModel):
    """Fade to an RGB colour."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["color"] = "color"
    red: int = Field(ge=0, le=255, description="Red (0-255)")
    green: int = Field(ge=0, le=255, description="Green (0-255)")
    blue: int = Field(ge=0, le=255, description="Blue (0-255)")

    def to_hex(self) -> str:
        """Convert to CSS hex color string (e.g., '#FF0000')."""
        return f"#{self.red:02X}{self.green:02X}{self.blue:02X}"

    def describe(self) -> str:
        return f"rgb({self.red}, {self.green}, {self.blue})"


class TemperatureMode(BaseModel):
    """Fade to a white colour temperature at a given brightness."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["temperature"] = "temperature"
    kelvin: int = Field(ge=1700, le=6500, description="Colour temperature in Kelvin (1700-6500)")
    brightness: int = Field(ge=1, le=100, description="Brightness percent (1-100)")

    def describe(self) -> str:
        return f"{self.kelvin}K @ {self.brightness}%"


class BrightnessMode(BaseModel):
    """Change brightness only."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["brightness"] = "brightness"
    level: int = Field(ge=0, le=100, description="Brightness percent (0-100)")

    def describe(self) -> str:
        return f"brightness {self.level}%"


TransitionMode = Annotated[
    ColorMode | TemperatureMode | BrightnessMode,
    Field(discriminator="kind"),
]


class FlowTransition(BaseModel):
    """One timed step of a flow."""

    model_config = ConfigDict(frozen=True)

    duration: int = Field(ge=1, description="Transition duration in milliseconds (>= 1)")
    mode: TransitionMode = Field(description="Target colour, temperature or brightness")

    @classmethod
    def color(cls, duration: int, red: int, green: int, blue: int) -> "FlowTransition":
        """Create an RGB transition."""
        return cls(duration=duration, mode=ColorMode(red=red, green=green, blue=blue))

    @classmethod
    def temperature(cls, duration: int, kelvin: int, brightness: int) -> "FlowTransition":
        """Create a colour temperature transition."""
        return cls(duration=duration, mode=TemperatureMode(kelvin=kelvin, brightness=brightness))

    @classmethod
    def brightness(cls, duration: int, level: int) -> "FlowTransition":
        """Create a brightness-only transition."""
        return cls(duration=duration, mode=BrightnessMode(level=level))

    def describe(self) -> str:
        """Short summary, e.g. '1000 ms rgb(255, 0, 0)'."""
        return f"{self.duration} ms {self.mode.describe()}"


class FlowParams(BaseModel):
    """
    Everything a device needs to run a flow.

    A fresh instance is built for every start request. An empty transition
    tuple is representable (an unedited custom flow) but must never be sent
    to a device; check `is_empty` first.

    Example:
        >>> params = FlowParams(
        ...     count=0,
        ...     action=FlowAction.RECOVER,
        ...     transitions=(FlowTransition.brightness(1000, 100),),
        ... )
        >>> params.total_duration
        1000
    """

    model_config = ConfigDict(frozen=True)

    count: int = Field(default=0, ge=0, description="Number of repetitions (0 = repeat forever)")
    action: FlowAction = Field(default=FlowAction.RECOVER, description="Action after the flow ends")
    transitions: tuple[FlowTransition, ...] = Field(
        default=(), description="Ordered transitions of one cycle"
    )

    @property
    def is_empty(self) -> bool:
        """Check if there are no transitions to run."""
        return len(self.transitions) == 0

    @property
    def total_duration(self) -> int:
        """Duration of a single cycle in milliseconds."""
        return sum(t.duration for t in self.transitions)

    @property
    def is_infinite(self) -> bool:
        return self.count == 0
