"""Model manager service for the application config."""

import logging
from pathlib import Path
from threading import Lock
from typing import Any

from pydantic import BaseModel, ValidationError

from yeelightctl.model_manager.persistence import PydanticPersistence

logger = logging.getLogger(__name__)


class ModelManagerService[ModelType: BaseModel]:
    """
    Validated field access and saving for one Pydantic model.

    The `config` CLI commands edit AppConfig through it, and the controller
    uses it to remember the last started preset. Every change rebuilds the
    model, so a rejected value leaves the previous model in place.

    Threading:
        Reads and writes are guarded by a lock; saving works on a copy.

    Usage Example:
        ```python
        service = ModelManagerService[AppConfig](AppConfig, config, default_path=path)
        service.set("discovery_timeout", "5")
        service.save()
        ```
    """

    def __init__(
        self,
        model_type: type[ModelType],
        initial_model: ModelType,
        default_path: Path | None = None,
    ):
        """
        Args:
            model_type: The Pydantic model class (e.g., AppConfig)
            initial_model: The model to start from
            default_path: Where `save()` writes when no path is given
        """
        self._model_type = model_type
        self._model = initial_model
        self._default_path = default_path
        self._lock = Lock()
        logger.info(f"ModelManagerService initialized with {model_type.__name__}")

    def _check_fields(self, keys) -> None:
        for key in keys:
            if key not in self._model_type.model_fields:
                raise AttributeError(f"'{self._model_type.__name__}' has no field '{key}'")

    def get(self, key: str, default: Any = None) -> Any:
        """Value of a field, or `default` for an unknown name."""
        with self._lock:
            return getattr(self._model, key, default)

    def set(self, key: str, value: Any) -> None:
        """
        Set one field. Strings are coerced by Pydantic ("2.5", "Disco").

        Raises:
            AttributeError: If the model has no such field
            ValidationError: If the value is rejected
        """
        self.update({key: value})

    def update(self, values: dict[str, Any]) -> None:
        """
        Set several fields at once; either all of them apply or none.

        Raises:
            AttributeError: If any field is unknown
            ValidationError: If any value is rejected
        """
        with self._lock:
            self._check_fields(values)
            data = self._model.model_dump()
            data.update(values)
            try:
                self._model = self._model_type.model_validate(data)
            except ValidationError as e:
                logger.error(f"Rejected update of {list(values)}: {e}")
                raise
        logger.debug(f"Model updated: {values}")

    def reset(self, keys: list[str] | None = None) -> None:
        """
        Restore defaults for the given fields, or for the whole model.

        Raises:
            AttributeError: If any field is unknown
        """
        with self._lock:
            defaults = self._model_type()
            if not keys:
                self._model = defaults
            else:
                self._check_fields(keys)
                data = self._model.model_dump()
                data.update({key: getattr(defaults, key) for key in keys})
                self._model = self._model_type.model_validate(data)
        logger.info(f"Reset {', '.join(keys) if keys else 'all fields'} of {self._model_type.__name__}")

    def save(self, path: Path | None = None) -> None:
        """
        Write the model as JSON (atomic, with a .bak of the previous file).

        Raises:
            ValueError: If no path is given and there is no default path
        """
        file_path = path or self._default_path
        if file_path is None:
            raise ValueError("No path specified and no default_path set")

        with self._lock:
            snapshot = self._model.model_copy(deep=True)
        PydanticPersistence.save_json(snapshot, Path(file_path))
        logger.info(f"Model saved to {file_path}")
