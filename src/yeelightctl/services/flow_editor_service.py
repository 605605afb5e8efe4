"""Editor service for building custom flows."""

import logging
from collections.abc import Iterable

from yeelightctl.exceptions import DispatchError, EmptyFlowError, FlowValidationError
from yeelightctl.flow import resolve_preset
from yeelightctl.model_manager import ObserverManager
from yeelightctl.models import AppConfig, FlowAction, FlowParams, FlowPreset, FlowTransition
from yeelightctl.protocols import FlowEditEvent, FlowEditObserver

from .activation_service import FlowActivationService

logger = logging.getLogger(__name__)


class FlowEditorService:
    """
    Manages an ordered, editable list of flow transitions.

    The sequence is working state only. Nothing reaches a device until
    `commit`, which freezes the sequence into FlowParams and hands it to the
    activation service. A later dispatch failure does not touch the edits.

    Event-Driven Architecture:
        Every mutation emits a FlowEditEvent carrying the full sequence, so
        the editor screen redraws from a single callback.

    Threading:
        Single writer. All methods are called from the UI thread (Textual's
        main loop); observers are notified on that thread too.
    """

    def __init__(self, config: AppConfig, activation: FlowActivationService):
        """
        Initialize the editor service.

        Args:
            config: Application configuration (defaults for new transitions and flows)
            activation: Service that dispatches committed flows
        """
        self.config = config
        self._activation = activation
        self._transitions: list[FlowTransition] = []
        self._count = config.default_flow_count
        self._action = config.default_flow_action
        self._preset = FlowPreset.CUSTOM

        self._observers = ObserverManager[FlowEditObserver](observer_type_name="flow edit")
        logger.info("FlowEditorService initialized")

    # =================================================================
    # State
    # =================================================================

    @property
    def transitions(self) -> tuple[FlowTransition, ...]:
        """The current sequence (read-only)."""
        return tuple(self._transitions)

    @property
    def count(self) -> int:
        return self._count

    @property
    def action(self) -> FlowAction:
        return self._action

    @property
    def preset(self) -> FlowPreset:
        """Preset the sequence was last loaded from (Custom once edited)."""
        return self._preset

    @property
    def is_empty(self) -> bool:
        return not self._transitions

    def __len__(self) -> int:
        return len(self._transitions)

    # =================================================================
    # Event System
    # =================================================================

    def register_observer(self, observer: FlowEditObserver) -> None:
        """Register an observer to receive flow edit events."""
        self._observers.register(observer)

    def unregister_observer(self, observer: FlowEditObserver) -> None:
        """Unregister an observer."""
        self._observers.unregister(observer)

    def _notify_observers(self, event: FlowEditEvent) -> None:
        self._observers.notify("on_flow_edit_event", event, self.transitions)

    # =================================================================
    # Validation
    # =================================================================

    def _validate_index(self, index: int, label: str = "Transition index", allow_end: bool = False) -> None:
        """
        Raises:
            IndexError: If index is out of range
        """
        upper = len(self._transitions) + (1 if allow_end else 0)
        if not 0 <= index < upper:
            raise IndexError(f"{label} {index} out of range (0-{upper - 1})")

    def _edited(self, event: FlowEditEvent) -> None:
        self._preset = FlowPreset.CUSTOM
        self._notify_observers(event)

    # =================================================================
    # Editing
    # =================================================================

    def default_transition(self) -> FlowTransition:
        """The transition `append` adds when given none: red at the default duration."""
        return FlowTransition.color(self.config.default_transition_duration, 255, 0, 0)

    def append(self, transition: FlowTransition | None = None) -> FlowTransition:
        """
        Add a transition at the end.

        Args:
            transition: Transition to add (default: `default_transition()`)

        Returns:
            The added transition
        """
        transition = transition or self.default_transition()
        self._transitions.append(transition)
        logger.debug(f"Appended transition {transition.describe()}")
        self._edited(FlowEditEvent.TRANSITION_ADDED)
        return transition

    def insert(self, index: int, transition: FlowTransition) -> FlowTransition:
        """Insert a transition before `index` (len() appends)."""
        self._validate_index(index, allow_end=True)
        self._transitions.insert(index, transition)
        self._edited(FlowEditEvent.TRANSITION_ADDED)
        return transition

    def update(self, index: int, transition: FlowTransition) -> FlowTransition:
        """Replace the transition at `index`."""
        self._validate_index(index)
        self._transitions[index] = transition
        self._edited(FlowEditEvent.TRANSITION_UPDATED)
        return transition

    def remove_at(self, indices: Iterable[int]) -> list[FlowTransition]:
        """
        Remove the transitions at the given positions.

        Every index is checked before anything is removed, so an invalid
        index leaves the sequence untouched.

        Args:
            indices: Positions to remove (duplicates are ignored)

        Returns:
            The removed transitions, in sequence order

        Raises:
            IndexError: If any index is out of range
        """
        positions = sorted(set(indices))
        for index in positions:
            self._validate_index(index)

        if not positions:
            return []

        removed = [self._transitions[i] for i in positions]
        for index in reversed(positions):
            del self._transitions[index]

        logger.debug(f"Removed transitions at {positions}")
        self._edited(FlowEditEvent.TRANSITION_REMOVED)
        return removed

    def move(self, source_index: int, target_index: int) -> None:
        """Move a transition so it ends up at `target_index`."""
        self._validate_index(source_index, "Source index")
        self._validate_index(target_index, "Target index")
        if source_index == target_index:
            return
        transition = self._transitions.pop(source_index)
        self._transitions.insert(target_index, transition)
        self._edited(FlowEditEvent.TRANSITION_MOVED)

    def clear(self) -> int:
        """
        Remove all transitions.

        Returns:
            Number of transitions removed
        """
        removed = len(self._transitions)
        self._transitions.clear()
        self._edited(FlowEditEvent.CLEARED)
        return removed

    def load_preset(self, preset: FlowPreset) -> tuple[FlowTransition, ...]:
        """
        Replace the sequence with a preset's transitions.

        Custom has no transitions of its own, so loading it keeps the
        current edits.

        Returns:
            The sequence after loading
        """
        if preset is not FlowPreset.CUSTOM:
            self._transitions = list(resolve_preset(preset))
            logger.info(f"Loaded preset {preset.value} into editor")
        self._preset = preset
        self._notify_observers(FlowEditEvent.PRESET_LOADED)
        return self.transitions

    def load_params(self, params: FlowParams) -> None:
        """Load a saved flow (e.g. an effect) for editing."""
        self._transitions = list(params.transitions)
        self._count = params.count
        self._action = params.action
        self._edited(FlowEditEvent.PRESET_LOADED)

    def set_count(self, count: int) -> None:
        """
        Set the repeat count (0 = forever).

        Raises:
            FlowValidationError: If count is negative
        """
        if count < 0:
            raise FlowValidationError(
                user_message=f"Repeat count cannot be negative (got {count}).",
                field="count",
                value=count,
            )
        self._count = count
        self._notify_observers(FlowEditEvent.SETTINGS_CHANGED)

    def set_action(self, action: FlowAction) -> None:
        """Set what the bulb does after the last repetition."""
        self._action = FlowAction(action)
        self._notify_observers(FlowEditEvent.SETTINGS_CHANGED)

    # =================================================================
    # Output
    # =================================================================

    def snapshot(self) -> FlowParams:
        """Freeze the current state into FlowParams (possibly empty)."""
        return FlowParams(count=self._count, action=self._action, transitions=self.transitions)

    def commit(self, device_ids: Iterable[str]) -> FlowParams:
        """
        Start the edited flow on devices.

        The request is dispatched in the background; its outcome shows up
        through device observers.

        Returns:
            The params that were dispatched

        Raises:
            EmptyFlowError: If there are no transitions (nothing is dispatched)
            DispatchError: If no device was given (nothing is dispatched)
        """
        if self.is_empty:
            raise EmptyFlowError("custom flow")
        device_ids = list(device_ids)
        if not device_ids:
            raise DispatchError(
                "Cannot start custom flow: no bulb selected.",
                operation="start_color_flow",
                recovery_hint="Select at least one bulb.",
            )

        params = self.snapshot()
        self._activation.request_start(device_ids, params)
        self._notify_observers(FlowEditEvent.COMMITTED)
        logger.info(f"Committed custom flow ({len(params.transitions)} transitions)")
        return params
