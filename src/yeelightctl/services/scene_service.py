"""Service for scenes."""

import logging
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any

from yeelightctl.exceptions import EntityNotFoundError
from yeelightctl.model_manager import ObserverManager, PydanticPersistence
from yeelightctl.models import AppConfig, Scene, SceneRegistry
from yeelightctl.protocols import SceneEvent, SceneObserver

from .activation_service import FlowActivationService
from .effect_library_service import EffectLibraryService

logger = logging.getLogger(__name__)


class SceneService:
    """
    Stores scenes and switches them on and off.

    A scene names an effect from the library and the devices it runs on.
    Activating it starts the effect on those devices; deactivating it stops
    their flows. A bulb runs one flow at a time, so activating a scene marks
    every other active scene that shares a device as inactive.
    """

    def __init__(
        self,
        config: AppConfig,
        activation: FlowActivationService,
        effects: EffectLibraryService,
        auto_save: bool = True,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.config = config
        self._activation = activation
        self._effects = effects
        self.auto_save = auto_save
        self._clock = clock
        self._scenes: list[Scene] = []
        self._observers = ObserverManager[SceneObserver](observer_type_name="scene")

    # =================================================================
    # Event System
    # =================================================================

    def register_observer(self, observer: SceneObserver) -> None:
        self._observers.register(observer)

    def unregister_observer(self, observer: SceneObserver) -> None:
        self._observers.unregister(observer)

    def _notify_observers(self, event: SceneEvent, scene: Scene | None = None) -> None:
        self._observers.notify("on_scene_event", event, scene)

    # =================================================================
    # Persistence
    # =================================================================

    def load(self) -> list[Scene]:
        registry = PydanticPersistence.load_json_or_default(self.config.scenes_file, SceneRegistry)
        self._scenes = registry.scenes
        logger.info(f"Loaded {len(self._scenes)} scenes from {self.config.scenes_file}")
        self._notify_observers(SceneEvent.LOADED)
        return self.scenes

    def save(self) -> None:
        PydanticPersistence.save_json(SceneRegistry(scenes=self._scenes), self.config.scenes_file)

    def _changed(self, event: SceneEvent, scene: Scene) -> None:
        if self.auto_save:
            self.save()
        self._notify_observers(event, scene)

    # =================================================================
    # Queries
    # =================================================================

    @property
    def scenes(self) -> list[Scene]:
        return list(self._scenes)

    @property
    def active_scenes(self) -> list[Scene]:
        return [scene for scene in self._scenes if scene.is_active]

    def get_scene(self, scene_id: str) -> Scene:
        """
        Raises:
            EntityNotFoundError: If no scene has this id
        """
        for scene in self._scenes:
            if scene.id == scene_id:
                return scene
        raise EntityNotFoundError("scene", scene_id)

    def find_scene(self, id_or_name: str) -> Scene:
        lowered = id_or_name.strip().lower()
        for scene in self._scenes:
            if scene.id == id_or_name or scene.name.lower() == lowered:
                return scene
        raise EntityNotFoundError("scene", id_or_name)

    # =================================================================
    # Mutations
    # =================================================================

    def _check_name(self, name: str, scene_id: str | None = None) -> None:
        lowered = name.strip().lower()
        for scene in self._scenes:
            if scene.id != scene_id and scene.name.lower() == lowered:
                raise ValueError(f"A scene named '{scene.name}' already exists")

    def create_scene(self, name: str, device_ids: Iterable[str], effect_id: str) -> Scene:
        """
        Store a new scene.

        Raises:
            EntityNotFoundError: If the effect doesn't exist
            ValueError: If another scene has the same name
            pydantic.ValidationError: If the name is blank or there are no devices
        """
        self._effects.get_effect(effect_id)
        self._check_name(name)
        now = self._clock()
        scene = Scene(
            name=name, device_ids=list(device_ids), effect_id=effect_id, created_at=now, updated_at=now
        )
        self._scenes.append(scene)
        logger.info(f"Created scene '{scene.name}' ({len(scene.device_ids)} devices)")
        self._changed(SceneEvent.CREATED, scene)
        return scene

    def update_scene(self, scene_id: str, **changes: Any) -> Scene:
        """
        Change the name, devices or effect of a scene.

        An active scene stays marked active; the change reaches the bulbs
        the next time it is activated.

        Raises:
            EntityNotFoundError: If the scene or the new effect doesn't exist
            AttributeError: If a field other than name/device_ids/effect_id is given
            ValueError: If the new name is taken
            pydantic.ValidationError: If the new values are invalid
        """
        current = self.get_scene(scene_id)
        unknown = set(changes) - {"name", "device_ids", "effect_id"}
        if unknown:
            raise AttributeError(f"Cannot update scene field(s): {', '.join(sorted(unknown))}")
        if "effect_id" in changes:
            self._effects.get_effect(changes["effect_id"])
        if "name" in changes:
            self._check_name(changes["name"], scene_id)

        changes["updated_at"] = self._clock()
        updated = Scene.model_validate(current.model_copy(update=changes).model_dump())

        self._scenes[self._scenes.index(current)] = updated
        self._changed(SceneEvent.UPDATED, updated)
        return updated

    def delete_scene(self, scene_id: str) -> Scene:
        """Forget a scene. Bulbs keep running whatever they are running."""
        current = self.get_scene(scene_id)
        self._scenes.remove(current)
        logger.info(f"Deleted scene '{current.name}'")
        self._changed(SceneEvent.DELETED, current)
        return current

    # =================================================================
    # Activation
    # =================================================================

    async def activate(self, scene_id: str) -> Scene:
        """
        Start the scene's effect on its devices.

        The scene is marked active only if every device accepted the flow.

        Raises:
            EntityNotFoundError: If the scene or its effect doesn't exist
            DispatchError: If any device failed
        """
        scene = self.get_scene(scene_id)
        logger.info(f"Activating scene '{scene.name}'")
        await self._effects.start_effect(scene.effect_id, on=scene.device_ids)

        for other in self._scenes:
            if other is not scene and other.is_active and other.shares_devices(scene):
                other.is_active = False
                logger.debug(f"Scene '{other.name}' replaced by '{scene.name}'")
                self._notify_observers(SceneEvent.DEACTIVATED, other)

        scene.is_active = True
        self._changed(SceneEvent.ACTIVATED, scene)
        return scene

    async def deactivate(self, scene_id: str) -> Scene:
        """
        Stop the flows on the scene's devices.

        The scene is marked inactive even if some devices could not be
        reached.

        Raises:
            EntityNotFoundError: If the scene doesn't exist
            DispatchError: If any device failed
        """
        scene = self.get_scene(scene_id)
        logger.info(f"Deactivating scene '{scene.name}'")
        try:
            await self._activation.stop(scene.device_ids)
        finally:
            scene.is_active = False
            self._changed(SceneEvent.DEACTIVATED, scene)
        return scene
