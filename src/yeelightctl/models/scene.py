"""Scenes: a saved effect bound to a set of devices."""

from datetime import datetime
from uuid import uuid4

from pydantic import BaseModel, Field, field_serializer, field_validator


class Scene(BaseModel):
    """Named pairing of devices and an effect from the library."""

    id: str = Field(default_factory=lambda: uuid4().hex, description="Scene identifier")
    name: str = Field(min_length=1, description="Scene name")
    device_ids: list[str] = Field(min_length=1, description="Devices the effect runs on")
    effect_id: str = Field(min_length=1, description="Effect started on activation")
    is_active: bool = Field(default=False, description="Set by activate, cleared by deactivate")
    created_at: datetime = Field(default_factory=datetime.now, description="When the scene was created")
    updated_at: datetime = Field(default_factory=datetime.now, description="Last change to the scene")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Scene name cannot be blank")
        return v

    @field_validator("device_ids")
    @classmethod
    def unique_devices(cls, v: list[str]) -> list[str]:
        """Drop repeated device ids, keeping the first occurrence."""
        return list(dict.fromkeys(v))

    @field_serializer("created_at", "updated_at")
    def serialize_datetime(self, dt: datetime) -> str:
        return dt.isoformat()

    def shares_devices(self, other: "Scene") -> bool:
        return bool(set(self.device_ids) & set(other.device_ids))


class SceneRegistry(BaseModel):
    """Persisted collection of scenes (scenes.json)."""

    scenes: list[Scene] = Field(default_factory=list, description="Scenes")
