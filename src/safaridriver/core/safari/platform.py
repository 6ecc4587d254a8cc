"""
Host platform detection and the environment accessor.

Everything that reads global process state (OS name, user, home directory,
environment variables) goes through `Environment`, so tests can describe an
arbitrary host without touching the real one.
"""

import getpass
import os
import platform as _platform
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional


class Platform(Enum):
    MAC = "mac"
    WINDOWS = "windows"
    LINUX = "linux"
    UNIX = "unix"
    UNKNOWN = "unknown"

    @classmethod
    def current(cls, system_name: Optional[str] = None) -> "Platform":
        name = (system_name if system_name is not None else _platform.system()).lower()
        if name == "darwin" or name.startswith("mac"):
            return cls.MAC
        if name.startswith("win") or name.startswith("cygwin"):
            return cls.WINDOWS
        if name == "linux":
            return cls.LINUX
        if name in ("freebsd", "openbsd", "netbsd", "sunos", "aix"):
            return cls.UNIX
        return cls.UNKNOWN

    def is_mac(self) -> bool:
        return self is Platform.MAC

    def __str__(self) -> str:
        return self.name


def _current_user() -> str:
    user = os.environ.get("USER") or os.environ.get("LOGNAME")
    if user:
        return user
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return ""


@dataclass(frozen=True)
class Environment:
    platform: Platform
    user_name: str
    home_dir: Path
    variables: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def system(cls) -> "Environment":
        """Snapshot of the running process."""
        return cls(
            platform=Platform.current(),
            user_name=_current_user(),
            home_dir=Path.home(),
            variables=dict(os.environ),
        )

    def getenv(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.variables.get(key, default)
