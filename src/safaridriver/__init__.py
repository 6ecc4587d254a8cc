"""Install the SafariDriver extension into Safari and clean up Safari session data."""

from .core.config_loader import ConfigLoader
from .core.safari import (
    Environment,
    ExtensionInstaller,
    ExtensionSource,
    PathResolver,
    Platform,
    SafariManager,
    SessionDataManager,
)
from .exceptions import (
    ConfigurationError,
    DriverNotInstalledError,
    IOFailure,
    SafariDriverError,
    SafariDriverNotInstalledError,
    UnsupportedPlatformError,
)

__version__ = "0.1.0"

__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "DriverNotInstalledError",
    "Environment",
    "ExtensionInstaller",
    "ExtensionSource",
    "IOFailure",
    "PathResolver",
    "Platform",
    "SafariDriverError",
    "SafariDriverNotInstalledError",
    "SafariManager",
    "SessionDataManager",
    "UnsupportedPlatformError",
]
