"""Device model representing a discovered Yeelight bulb."""

from pydantic import BaseModel, Field


class Device(BaseModel):
    """
    Last known state of a bulb.

    Devices are owned and mutated by a device manager. Views and services
    only hold device ids and read the state back through the manager.
    """

    id: str = Field(description="Stable device identifier (bulb id, or ip when unknown)")
    ip: str = Field(description="IP address on the local network")
    port: int = Field(default=55443, ge=1, le=65535, description="Control port")
    name: str = Field(default="", description="User-assigned bulb name")
    model: str = Field(default="", description="Bulb model reported during discovery")
    power: bool = Field(default=False, description="Whether the bulb is on")
    brightness: int = Field(default=100, ge=0, le=100, description="Brightness percent")
    flowing: bool = Field(default=False, description="Whether a flow effect is running")
    last_error: str | None = Field(default=None, description="Last dispatch error, if any")

    @property
    def display_name(self) -> str:
        """Name to show in lists: the bulb name if set, otherwise its address."""
        return self.name or f"{self.model or 'bulb'} @ {self.ip}"

    @property
    def status_text(self) -> str:
        if self.flowing:
            return "flowing"
        return "on" if self.power else "off"
