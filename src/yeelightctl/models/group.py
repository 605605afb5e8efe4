"""Device groups."""

from uuid import uuid4

from pydantic import BaseModel, Field

from .enums import SyncMode


class DeviceGroup(BaseModel):
    """A named set of devices controlled together."""

    id: str = Field(default_factory=lambda: uuid4().hex, description="Group identifier")
    name: str = Field(min_length=1, description="Group name")
    icon: str = Field(default="lightbulb", description="Icon name shown next to the group")
    device_ids: list[str] = Field(default_factory=list, description="Member device ids, in order")
    sync_mode: SyncMode = Field(default=SyncMode.MIRROR, description="How commands fan out")

    @property
    def is_empty(self) -> bool:
        return not self.device_ids


class GroupRegistry(BaseModel):
    """Persisted collection of groups (groups.json)."""

    groups: list[DeviceGroup] = Field(default_factory=list, description="Device groups")
