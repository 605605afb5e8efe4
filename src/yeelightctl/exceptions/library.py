"""Exceptions for stored effects, groups, automations and scenes."""

from .base import YeelightCtlError


class EntityNotFoundError(YeelightCtlError):
    """A stored effect, group, automation or scene does not exist."""

    def __init__(self, kind: str, entity_id: str):
        """
        Initialize entity-not-found error.

        Args:
            kind: Entity kind ("effect", "group", "automation", "scene")
            entity_id: The id that was looked up
        """
        super().__init__(
            user_message=f"No {kind} with id '{entity_id}'.",
            recovery_hint=f"Run 'yeelightctl {kind}s list' to see stored {kind}s.",
        )
        self.kind = kind
        self.entity_id = entity_id


class BuiltInEffectError(YeelightCtlError):
    """Built-in effects are read-only."""

    def __init__(self, name: str):
        super().__init__(
            user_message=f"'{name}' is a built-in effect and cannot be changed or deleted.",
            recovery_hint="Create a copy of the effect and edit the copy instead.",
        )
        self.name = name
