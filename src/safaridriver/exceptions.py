"""
Error taxonomy for SafariDriver extension and session-data management.

All errors derive from selenium's WebDriverException so callers that already
guard driver startup with `except WebDriverException` keep working.
"""

from pathlib import Path
from typing import Optional, Union

from selenium.common.exceptions import WebDriverException

PathLike = Union[str, Path]


class SafariDriverError(WebDriverException):
    """Base class for every failure raised by this package."""


class UnsupportedPlatformError(SafariDriverError):
    def __init__(self, platform: object):
        self.platform = platform
        super().__init__(f"The current platform is not supported: {platform}")


class ConfigurationError(SafariDriverError):
    """A user-supplied setting is invalid, missing, or points at nothing usable."""

    def __init__(self, message: str, setting: Optional[str] = None, path: Optional[PathLike] = None):
        self.setting = setting
        self.path = Path(path) if path is not None else None
        super().__init__(message)


class SafariDriverNotInstalledError(SafariDriverError):
    def __init__(self, path: PathLike):
        self.path = Path(path)
        super().__init__(f"Failed to locate WebDriver Safari Extension in {self.path.absolute()}")


DriverNotInstalledError = SafariDriverNotInstalledError


class ExtensionResourceError(SafariDriverError):
    """The extension bundled with this package is missing: the installation is broken."""

    def __init__(self, resource: PathLike):
        self.resource = Path(resource)
        super().__init__(f"Unable to locate extension resource, {self.resource}")


class IOFailure(SafariDriverError):
    """A filesystem operation failed. The original OSError is chained as __cause__."""

    def __init__(self, message: str, path: PathLike):
        self.path = Path(path)
        super().__init__(f"{message}: {self.path}")


class ExtensionInstallError(IOFailure):
    pass


class SessionDataError(IOFailure):
    pass


__all__ = [
    "SafariDriverError",
    "UnsupportedPlatformError",
    "ConfigurationError",
    "SafariDriverNotInstalledError",
    "DriverNotInstalledError",
    "ExtensionResourceError",
    "IOFailure",
    "ExtensionInstallError",
    "SessionDataError",
]
