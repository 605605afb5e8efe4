"""Generic model management framework for Pydantic models.

- **ModelManagerService**: Validated get/set/reset/save for one Pydantic model
- **PydanticPersistence**: Load/save Pydantic models to JSON with backups
- **ObserverManager**: Generic observer pattern implementation

Example:
    ```python
    from yeelightctl.model_manager import ModelManagerService
    from yeelightctl.models import AppConfig

    service = ModelManagerService[AppConfig](AppConfig, AppConfig(), default_path=path)
    service.set("discovery_timeout", 5.0)
    service.save()
    ```
"""

from yeelightctl.model_manager.observer import ObserverManager
from yeelightctl.model_manager.persistence import PydanticPersistence
from yeelightctl.model_manager.service import ModelManagerService

__all__ = [
    "ModelManagerService",
    "ObserverManager",
    "PydanticPersistence",
]
