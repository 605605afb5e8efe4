"""
Custom exception hierarchy for yeelightctl.

## Exception Hierarchy

```
YeelightCtlError (base)
├── FlowValidationError
│   └── EmptyFlowError
├── DispatchError
│   └── DeviceNotFoundError
├── EntityNotFoundError
├── BuiltInEffectError
└── ConfigurationError
    ├── ConfigFileInvalidError
    └── ConfigValidationError
```

All custom exceptions inherit from `YeelightCtlError`, which provides
`user_message`, `technical_message`, `recoverable` and `recovery_hint`.

### Example: Empty custom flow

```python
from yeelightctl.exceptions import EmptyFlowError

raise EmptyFlowError("custom flow")

# User sees: "Cannot start custom flow: it has no transitions."
# Recovery hint: "Add at least one transition or pick a preset."
```

See `yeelightctl.exceptions.handlers` for utilities to handle these exceptions systematically.
"""

from .base import YeelightCtlError
from .config import ConfigFileInvalidError, ConfigurationError, ConfigValidationError
from .dispatch import DeviceNotFoundError, DispatchError
from .flow import EmptyFlowError, FlowValidationError
from .handlers import (
    ErrorCollector,
    collect_errors,
    format_error_for_display,
    handle_errors,
    wrap_dispatch_error,
    wrap_flow_error,
    wrap_pydantic_error,
)
from .library import BuiltInEffectError, EntityNotFoundError

__all__ = [
    # Base
    "YeelightCtlError",
    # Flow
    "EmptyFlowError",
    "FlowValidationError",
    # Dispatch
    "DeviceNotFoundError",
    "DispatchError",
    # Library
    "BuiltInEffectError",
    "EntityNotFoundError",
    # Config
    "ConfigFileInvalidError",
    "ConfigValidationError",
    "ConfigurationError",
    # Handlers
    "ErrorCollector",
    "collect_errors",
    "format_error_for_display",
    "handle_errors",
    "wrap_dispatch_error",
    "wrap_flow_error",
    "wrap_pydantic_error",
]
