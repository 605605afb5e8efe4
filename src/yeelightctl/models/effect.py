"""Saved flow effects and the effect library document."""

from datetime import datetime
from uuid import uuid4

from pydantic import BaseModel, Field, field_serializer

from .enums import FlowPreset
from .flow import FlowParams


class Effect(BaseModel):
    """A named, reusable flow."""

    id: str = Field(default_factory=lambda: uuid4().hex, description="Effect identifier")
    name: str = Field(min_length=1, description="Effect name")
    params: FlowParams = Field(description="Flow parameters to run")
    preset: FlowPreset | None = Field(
        default=None, description="Preset this effect was created from, if any"
    )
    built_in: bool = Field(default=False, description="Shipped effects cannot be edited or deleted")
    created_at: datetime = Field(default_factory=datetime.now, description="Creation timestamp")

    @field_serializer("created_at")
    def serialize_datetime(self, dt: datetime) -> str:
        """Serialize datetime to ISO format."""
        return dt.isoformat()


class EffectLibrary(BaseModel):
    """Persisted collection of effects (effects.json)."""

    effects: list[Effect] = Field(default_factory=list, description="Saved effects")
