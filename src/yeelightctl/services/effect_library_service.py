"""Service for saved flow effects."""

import logging
from collections.abc import Iterable

from yeelightctl.exceptions import BuiltInEffectError, EmptyFlowError, EntityNotFoundError
from yeelightctl.flow import list_presets, preset_params
from yeelightctl.model_manager import ObserverManager, PydanticPersistence
from yeelightctl.models import AppConfig, Effect, EffectLibrary, FlowParams, FlowPreset
from yeelightctl.protocols import EffectEvent, EffectObserver

from .activation_service import FlowActivationService

logger = logging.getLogger(__name__)


def builtin_effects() -> list[Effect]:
    """One read-only effect per non-custom preset, with stable ids."""
    return [
        Effect(
            id=f"builtin-{preset.value.lower()}",
            name=preset.value,
            params=preset_params(preset),
            preset=preset,
            built_in=True,
        )
        for preset in list_presets(include_custom=False)
    ]


class EffectLibraryService:
    """
    Stores named effects and starts them on devices.

    The library lives in `config.effects_file`. A missing file yields the
    built-in effects; built-ins missing from an existing file are added back
    on load. Mutations are saved immediately when `auto_save` is set.
    """

    def __init__(
        self,
        config: AppConfig,
        activation: FlowActivationService,
        auto_save: bool = True,
    ):
        self.config = config
        self._activation = activation
        self.auto_save = auto_save
        self._effects: list[Effect] = builtin_effects()
        self._observers = ObserverManager[EffectObserver](observer_type_name="effect")

    # =================================================================
    # Event System
    # =================================================================

    def register_observer(self, observer: EffectObserver) -> None:
        self._observers.register(observer)

    def unregister_observer(self, observer: EffectObserver) -> None:
        self._observers.unregister(observer)

    def _notify_observers(self, event: EffectEvent, effect: Effect | None = None) -> None:
        self._observers.notify("on_effect_event", event, effect)

    # =================================================================
    # Persistence
    # =================================================================

    def load(self) -> list[Effect]:
        """
        Load the library from disk.

        Raises:
            ConfigFileInvalidError: If the file is not valid JSON
            ConfigValidationError: If an effect in the file is invalid
        """
        library = PydanticPersistence.load_json_or_default(
            self.config.effects_file,
            EffectLibrary,
            default_factory=lambda: EffectLibrary(effects=builtin_effects()),
        )
        known = {effect.id for effect in library.effects}
        missing = [effect for effect in builtin_effects() if effect.id not in known]
        self._effects = missing + library.effects
        logger.info(f"Loaded {len(self._effects)} effects from {self.config.effects_file}")
        self._notify_observers(EffectEvent.LOADED)
        return self.effects

    def save(self) -> None:
        PydanticPersistence.save_json(EffectLibrary(effects=self._effects), self.config.effects_file)

    def _changed(self, event: EffectEvent, effect: Effect) -> None:
        if self.auto_save:
            self.save()
        self._notify_observers(event, effect)

    # =================================================================
    # Queries
    # =================================================================

    @property
    def effects(self) -> list[Effect]:
        return list(self._effects)

    def get_effect(self, effect_id: str) -> Effect:
        """
        Raises:
            EntityNotFoundError: If no effect has this id
        """
        for effect in self._effects:
            if effect.id == effect_id:
                return effect
        raise EntityNotFoundError("effect", effect_id)

    def find_effect(self, id_or_name: str) -> Effect:
        """Look up an effect by id, then by case-insensitive name."""
        for effect in self._effects:
            if effect.id == id_or_name:
                return effect
        lowered = id_or_name.strip().lower()
        for effect in self._effects:
            if effect.name.lower() == lowered:
                return effect
        raise EntityNotFoundError("effect", id_or_name)

    # =================================================================
    # Mutations
    # =================================================================

    def create_effect(
        self, name: str, params: FlowParams, preset: FlowPreset | None = None
    ) -> Effect:
        """
        Save a new effect.

        Raises:
            EmptyFlowError: If params has no transitions
        """
        if params.is_empty:
            raise EmptyFlowError(f"effect '{name}'")
        effect = Effect(name=name, params=params, preset=preset)
        self._effects.append(effect)
        logger.info(f"Created effect '{name}' ({effect.id})")
        self._changed(EffectEvent.CREATED, effect)
        return effect

    def update_effect(
        self, effect_id: str, name: str | None = None, params: FlowParams | None = None
    ) -> Effect:
        """
        Rename an effect and/or replace its flow.

        Raises:
            EntityNotFoundError: If no effect has this id
            BuiltInEffectError: If the effect is built in
            EmptyFlowError: If the new params have no transitions
        """
        current = self.get_effect(effect_id)
        if current.built_in:
            raise BuiltInEffectError(current.name)
        if params is not None and params.is_empty:
            raise EmptyFlowError(f"effect '{current.name}'")

        changes = {}
        if name is not None:
            if not name.strip():
                raise ValueError("Effect name cannot be empty")
            changes["name"] = name.strip()
        if params is not None:
            changes["params"] = params
            changes["preset"] = None
        updated = current.model_copy(update=changes)

        self._effects[self._effects.index(current)] = updated
        self._changed(EffectEvent.UPDATED, updated)
        return updated

    def duplicate_effect(self, effect_id: str, name: str | None = None) -> Effect:
        """Copy any effect (built-ins included) into a new, editable one."""
        source = self.get_effect(effect_id)
        return self.create_effect(name or f"{source.name} copy", source.params, source.preset)

    def delete_effect(self, effect: Effect | str) -> Effect:
        """
        Delete an effect.

        Raises:
            EntityNotFoundError: If the effect doesn't exist
            BuiltInEffectError: If the effect is built in
        """
        effect_id = effect if isinstance(effect, str) else effect.id
        current = self.get_effect(effect_id)
        if current.built_in:
            raise BuiltInEffectError(current.name)
        self._effects.remove(current)
        logger.info(f"Deleted effect '{current.name}' ({current.id})")
        self._changed(EffectEvent.DELETED, current)
        return current

    # =================================================================
    # Activation
    # =================================================================

    async def start_effect(self, effect: Effect | str, on: Iterable[str]) -> None:
        """
        Start an effect on devices.

        Raises:
            EntityNotFoundError: If the effect doesn't exist
            DispatchError: If any device failed
        """
        current = self.get_effect(effect if isinstance(effect, str) else effect.id)
        await self._activation.start(list(on), current.params)
        self._notify_observers(EffectEvent.STARTED, current)
