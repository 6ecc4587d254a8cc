import logging
from pathlib import Path
from typing import List, Optional

from ...exceptions import ConfigurationError, IOFailure, UnsupportedPlatformError
from .constants import (
    DATA_DIR_SETTING,
    EXTENSIONS_DIR_NAME,
    LIBRARY_DIR,
    SAFARI_DATA_DIR,
    SESSION_ARTIFACTS,
)
from .platform import Environment, Platform

logger = logging.getLogger(__name__)


class PathResolver:
    """Maps the host environment to Safari's on-disk locations."""

    def __init__(self, environment: Optional[Environment] = None):
        self.environment = environment if environment else Environment.system()

    def _check_supported(self, platform: Optional[Platform]) -> Platform:
        current = platform if platform is not None else self.environment.platform
        if not current.is_mac():
            raise UnsupportedPlatformError(current)
        return current

    def resolve_data_directory(self, platform: Optional[Platform] = None) -> Path:
        """Safari's per-user data directory, `~/Library/Safari`. Pure path math, no I/O."""
        self._check_supported(platform)
        data_dir = self.environment.home_dir / SAFARI_DATA_DIR
        logger.debug(f"Safari data directory for user '{self.environment.user_name}': {data_dir}")
        return data_dir

    def resolve_extensions_directory(self, data_dir: Path) -> Path:
        """
        Returns `<data_dir>/Extensions`, creating that one directory if needed.

        The data directory itself belongs to Safari and is never created here:
        its absence means Safari is not installed where we expect it.
        """
        data_dir = Path(data_dir)
        if not data_dir.is_dir():
            raise ConfigurationError(
                f"The expected Safari data directory does not exist: {data_dir.absolute()}",
                setting=DATA_DIR_SETTING,
                path=data_dir,
            )

        extensions_dir = data_dir / EXTENSIONS_DIR_NAME
        if not extensions_dir.is_dir():
            try:
                extensions_dir.mkdir()
            except OSError as e:
                raise IOFailure("Could not create Safari extensions directory", extensions_dir) from e
            logger.info(f"Created Safari extensions directory: {extensions_dir}")
        return extensions_dir

    def resolve_install_directory(self, custom_data_dir: Optional[Path] = None) -> Path:
        """Extensions directory under `custom_data_dir` if given, else under the default data directory."""
        data_dir = Path(custom_data_dir) if custom_data_dir else self.resolve_data_directory()
        return self.resolve_extensions_directory(data_dir)

    def resolve_session_artifacts(self, platform: Optional[Platform] = None) -> List[Path]:
        current = self._check_supported(platform)
        library_dir = self.environment.home_dir / LIBRARY_DIR
        return [library_dir / rel for rel in SESSION_ARTIFACTS[current]]
