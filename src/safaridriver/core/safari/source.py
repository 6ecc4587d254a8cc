"""
Selects the extension package(s) to install.

Driver extension priority:
1. A configured override path, from the WEBDRIVER_SAFARI_DRIVER environment
   variable or `safari_settings.driver_extension_path`, is validated first. It
   must exist and be readable; a bad override is an error, never a silent
   fallback.
2. Nothing, when installation is disabled or a custom (already installed)
   driver extension is in use. This holds even for a valid override.
3. The validated override.
4. The SafariDriver.safariextz bundled with this package.
"""

import logging
import os
from pathlib import Path
from typing import List, Optional, Tuple

from ...data_models import ExtensionPackage, SafariOptions
from ...exceptions import ConfigurationError, ExtensionResourceError
from .constants import (
    EXTENSION_FILES_SETTING,
    EXTENSION_LOCATION_ENV,
    EXTENSION_LOCATION_SETTING,
    EXTENSION_RESOURCE_NAME,
    EXTENSION_SUFFIX,
    NO_INSTALL_EXTENSION_ENV,
    RESOURCES_DIR,
    TRUTHY_VALUES,
)
from .platform import Environment

logger = logging.getLogger(__name__)


def _check_readable_file(path: Path, setting: str, description: str) -> None:
    if not path.is_file():
        raise ConfigurationError(
            f"The {description} specified through the {setting} setting does not exist: {path}",
            setting=setting,
            path=path,
        )
    if not os.access(path, os.R_OK):
        raise ConfigurationError(
            f"The {description} specified through the {setting} setting is not readable: {path}",
            setting=setting,
            path=path,
        )


class ExtensionSource:
    def __init__(
        self,
        options: Optional[SafariOptions] = None,
        environment: Optional[Environment] = None,
        resources_dir: Path = RESOURCES_DIR,
    ):
        self.options = options if options else SafariOptions()
        self.environment = environment if environment else Environment.system()
        self.resources_dir = Path(resources_dir)

    def override_location(self) -> Optional[Tuple[str, str]]:
        """(setting name, path) of the configured override, if any. Environment wins over settings."""
        env_value = self.environment.getenv(EXTENSION_LOCATION_ENV)
        if env_value:
            return EXTENSION_LOCATION_ENV, env_value
        if self.options.driver_extension_path:
            return EXTENSION_LOCATION_SETTING, self.options.driver_extension_path
        return None

    def install_disabled(self) -> bool:
        toggle = (self.environment.getenv(NO_INSTALL_EXTENSION_ENV) or "").strip().lower()
        return toggle in TRUTHY_VALUES or self.options.skip_extension_installation

    def resolve_extension(self) -> Optional[ExtensionPackage]:
        """The driver extension to install, or None when the driver install is skipped."""
        override_path: Optional[Path] = None
        override = self.override_location()
        if override:
            setting, raw_path = override
            override_path = Path(raw_path).expanduser()
            _check_readable_file(override_path, setting, "SafariDriver extension")

        if self.install_disabled():
            logger.info("SafariDriver extension installation is disabled; skipping.")
            return None
        if self.options.use_custom_driver_extension:
            logger.info("Using a custom SafariDriver extension that is already installed; skipping.")
            return None

        if override_path is not None:
            logger.info(f"Using extension {override_path.absolute()}")
            return ExtensionPackage(name=override_path.name, path=override_path)
        return self.bundled_extension()

    def bundled_extension(self) -> ExtensionPackage:
        resource = self.resources_dir / EXTENSION_RESOURCE_NAME
        if not resource.is_file():
            raise ExtensionResourceError(resource)
        logger.debug(f"Using bundled extension {resource}")
        return ExtensionPackage(name=EXTENSION_RESOURCE_NAME, path=resource, bundled=True)

    def resolve_extension_files(self) -> List[ExtensionPackage]:
        """User-supplied extensions, in configured order. Empty when installation is disabled."""
        if not self.options.extension_files:
            return []
        if self.install_disabled():
            logger.info(f"Installation disabled; ignoring {len(self.options.extension_files)} additional extension(s).")
            return []

        packages: List[ExtensionPackage] = []
        for raw_path in self.options.extension_files:
            path = Path(raw_path).expanduser()
            _check_readable_file(path, EXTENSION_FILES_SETTING, "Safari extension")
            if path.suffix != EXTENSION_SUFFIX:
                logger.warning(f"Extension file does not end in {EXTENSION_SUFFIX}, Safari may ignore it: {path}")
            packages.append(ExtensionPackage(name=path.name, path=path))
        return packages
