import logging
from typing import Optional

from ...data_models import InstallResult, SafariOptions
from ...utils.file_handler import FileHandler
from ..config_loader import ConfigLoader
from .constants import SAFARI_SETTINGS_KEY
from .installer import ExtensionInstaller
from .paths import PathResolver
from .platform import Environment
from .session_data import SessionDataManager
from .source import ExtensionSource

logger = logging.getLogger(__name__)


class SafariManager:
    """
    Prepares the user's Safari profile for a SafariDriver session and puts it
    back afterwards.

        with SafariManager(config_loader) as manager:
            ...  # launch Safari and drive it
    """

    def __init__(
        self,
        config_loader: Optional[ConfigLoader] = None,
        environment: Optional[Environment] = None,
        options: Optional[SafariOptions] = None,
        file_handler: Optional[FileHandler] = None,
    ):
        self.config_loader = config_loader if config_loader else ConfigLoader()
        self.environment = environment if environment else Environment.system()
        if options is None:
            options = SafariOptions.from_settings(self.config_loader.get_setting(SAFARI_SETTINGS_KEY, {}))
        self.options = options
        self.file_handler = file_handler if file_handler else FileHandler()

        self.resolver = PathResolver(self.environment)
        self.source = ExtensionSource(self.options, self.environment)
        self.installer = ExtensionInstaller(
            self.options,
            self.environment,
            source=self.source,
            resolver=self.resolver,
            file_handler=self.file_handler,
        )
        self.last_install: Optional[InstallResult] = None

    def session_data(self) -> SessionDataManager:
        return SessionDataManager(self.resolver.resolve_session_artifacts(), file_handler=self.file_handler)

    def prepare_session(self, clean_session: Optional[bool] = None) -> Optional[InstallResult]:
        clean = self.options.clean_session if clean_session is None else clean_session
        if clean:
            self.session_data().clear()

        self.last_install = self.installer.install()
        if self.last_install is None:
            logger.info("No Safari extensions installed for this session.")
        elif self.options.verify_after_install:
            self.installer.verify_installed()
        return self.last_install

    def end_session(self) -> None:
        if self.last_install is None:
            return
        if not self.options.restore_on_exit:
            logger.info(f"Leaving installed Safari extensions in place; backup kept at {self.last_install.backup_dir}")
            self.last_install = None
            return
        try:
            self.installer.restore(self.last_install.backup_dir)
        finally:
            self.last_install = None

    def __enter__(self):
        self.prepare_session()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.end_session()
