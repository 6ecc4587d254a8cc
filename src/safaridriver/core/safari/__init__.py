"""
Safari extension and session-data management.

Public API:
- SafariManager: prepares a Safari profile for a driver session and restores it afterwards.
- ExtensionInstaller, ExtensionSource, PathResolver, SessionDataManager: the individual steps.
"""

from .installer import ExtensionInstaller
from .paths import PathResolver
from .platform import Environment, Platform
from .service import SafariManager
from .session_data import SessionDataManager
from .source import ExtensionSource

__all__ = [
    "Environment",
    "ExtensionInstaller",
    "ExtensionSource",
    "PathResolver",
    "Platform",
    "SafariManager",
    "SessionDataManager",
]
