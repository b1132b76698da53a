"""
core — 框架核心

統一匯出所有核心元件，方便外部 import。

用法：
    from core import with_environment, with_system_property, OverrideMode
    from core import EnvironmentTestListener, SystemPropertyProjectListener
    from core import system_properties
    from core import StateAccessDenied, RestoreFailure
"""

from core.assertions import Outcome, expect_function, expect_outcome
from core.exceptions import (
    ConfigError,
    DataFileNotFoundError,
    InvalidConfigError,
    InvalidOverrideError,
    OverrideFrameworkError,
    RestoreFailure,
    StateAccessDenied,
    StateAccessError,
    TestDataError,
)
from core.listeners import (
    EnvironmentProjectListener,
    EnvironmentTestListener,
    OverrideListener,
    SystemPropertyProjectListener,
    SystemPropertyTestListener,
    register_listeners,
)
from core.merge_policy import OverrideMode, compute_effective
from core.scoped_override import (
    ScopedOverride,
    normalize_overrides,
    with_environment,
    with_system_properties,
    with_system_property,
)
from core.state_accessor import (
    EnvironmentAccessor,
    InMemoryAccessor,
    StateAccessor,
    SystemPropertiesAccessor,
)
from core.system_properties import SystemProperties, system_properties

__all__ = [
    # Scoped override
    "ScopedOverride",
    "OverrideMode",
    "compute_effective",
    "normalize_overrides",
    "with_environment",
    "with_system_properties",
    "with_system_property",
    # Accessors
    "StateAccessor",
    "EnvironmentAccessor",
    "SystemPropertiesAccessor",
    "InMemoryAccessor",
    "SystemProperties",
    "system_properties",
    # Listeners
    "OverrideListener",
    "EnvironmentTestListener",
    "EnvironmentProjectListener",
    "SystemPropertyTestListener",
    "SystemPropertyProjectListener",
    "register_listeners",
    # Matchers
    "Outcome",
    "expect_function",
    "expect_outcome",
    # Exceptions
    "OverrideFrameworkError",
    "StateAccessError",
    "StateAccessDenied",
    "RestoreFailure",
    "ConfigError",
    "InvalidConfigError",
    "InvalidOverrideError",
    "TestDataError",
    "DataFileNotFoundError",
]
