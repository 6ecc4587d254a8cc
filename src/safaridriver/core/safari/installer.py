"""
Installs the SafariDriver extension into the current user's Safari profile.

Safari belongs to the user, so nothing already in the Extensions directory is
ever deleted. An install runs in two phases:

1. stage: every file currently in the Extensions directory is moved into a new
   backup set, `Extensions/.webdriver-backup/<timestamp>/`. A manifest beside
   it, `<timestamp>.json`, names the files this install is about to write;
2. write: the packages and a fresh Extensions.plist are written, each one
   atomically.

If the write phase fails the profile is left in the staged state, which
`restore()` undoes. `restore()` is also the explicit uninstall: it removes what
the install wrote and moves the backed-up files back. It refuses to overwrite a
file that appeared in the Extensions directory after the install. Backup sets
are only deleted by `purge_backups()`.
"""

import io
import json
import logging
import os
import plistlib
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from ...data_models import ExtensionPackage, InstallResult, SafariOptions
from ...exceptions import (
    ConfigurationError,
    ExtensionInstallError,
    SafariDriverNotInstalledError,
)
from ...utils.file_handler import FileHandler
from .constants import (
    BACKUP_DIR_NAME,
    BACKUP_TIMESTAMP_FORMAT,
    EXTENSION_FILENAME,
    EXTENSION_FILES_SETTING,
    EXTENSION_SUFFIX,
    EXTENSIONS_PLIST_NAME,
)
from .paths import PathResolver
from .platform import Environment
from .source import ExtensionSource

logger = logging.getLogger(__name__)

BACKUP_MANIFEST_SUFFIX = ".json"
# Safari rewrites this on its next update check
LAST_UPDATE_CHECK_TIME = 370125644.75941497


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def backup_manifest_path(backup_dir: Path) -> Path:
    """`.webdriver-backup/<stamp>.json`, kept outside the set so no backed-up file can collide with it."""
    return backup_dir.with_name(backup_dir.name + BACKUP_MANIFEST_SUFFIX)


def build_extensions_plist(archive_names: List[str]) -> bytes:
    """Serializes Safari's Extensions.plist with every archive enabled."""
    installed = []
    for archive_name in archive_names:
        bundle_name = archive_name[:-len(EXTENSION_SUFFIX)] if archive_name.endswith(EXTENSION_SUFFIX) else archive_name
        installed.append({
            "Added Non-Default Toolbar Items": [],
            "Archive File Name": archive_name,
            "Bundle Directory Name": f"{bundle_name}.safariextension",
            "Enabled": True,
            "Hidden Bars": [],
            "Removed Default Toolbar Items": [],
        })
    document = {
        "Available Updates": {
            "Last Update Check Time": LAST_UPDATE_CHECK_TIME,
            "Updates List": [],
        },
        "Installed Extensions": installed,
        "Version": 1,
    }
    return plistlib.dumps(document, fmt=plistlib.FMT_XML)


class ExtensionInstaller:
    def __init__(
        self,
        options: Optional[SafariOptions] = None,
        environment: Optional[Environment] = None,
        source: Optional[ExtensionSource] = None,
        resolver: Optional[PathResolver] = None,
        file_handler: Optional[FileHandler] = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.options = options if options else SafariOptions()
        self.environment = environment if environment else Environment.system()
        self.source = source if source else ExtensionSource(self.options, self.environment)
        self.resolver = resolver if resolver else PathResolver(self.environment)
        self.file_handler = file_handler if file_handler else FileHandler()
        self.clock = clock

    def install_directory(self) -> Path:
        return self.resolver.resolve_install_directory(self.options.data_dir)

    def installed_extensions(self, install_dir: Path) -> List[Path]:
        """Files currently in the Extensions directory (backup sets excluded)."""
        try:
            return self.file_handler.list_files(install_dir)
        except OSError as e:
            raise ExtensionInstallError("Could not list installed Safari extensions", install_dir) from e

    def install(self) -> Optional[InstallResult]:
        """
        Backs up the current extensions and installs the driver extension plus
        any configured extension files.

        Returns None, without touching the filesystem, when there is nothing to
        install. Each call makes a new backup set, so a second call backs up the
        extension written by the first.
        """
        driver = self.source.resolve_extension()
        extras = self.source.resolve_extension_files()
        if driver is None and not extras:
            return None

        planned = self._plan(driver, extras)
        install_dir = self.install_directory()

        present = self.installed_extensions(install_dir)
        backup_dir = self._new_backup_dir(install_dir)
        backed_up = self._stage(present, backup_dir, [name for name, _ in planned])

        installed: List[Path] = []
        for filename, package in planned:
            installed.append(self._write_package(package, install_dir / filename))
        self._write_plist(install_dir, [name for name, _ in planned])

        logger.info(
            f"Installed {len(installed)} Safari extension(s) for user '{self.environment.user_name}' "
            f"into {install_dir}; "
            f"{len(backed_up)} previous file(s) backed up to {backup_dir}"
        )
        return InstallResult(
            install_dir=install_dir,
            backup_dir=backup_dir,
            backed_up=backed_up,
            installed=installed,
        )

    def verify_installed(self) -> Path:
        """
        Checks that Safari has the driver extension where it loads it from.

        That is `~/Library/Safari/WebDriver.safariextz`, which Safari manages
        itself, not the Extensions staging directory `install()` writes to.
        """
        extension_path = self.resolver.resolve_data_directory() / EXTENSION_FILENAME
        if not extension_path.exists():
            raise SafariDriverNotInstalledError(extension_path)
        return extension_path

    def list_backups(self, install_dir: Optional[Path] = None) -> List[Path]:
        """Backup sets, oldest first."""
        install_dir = install_dir if install_dir else self.install_directory()
        backup_root = install_dir / BACKUP_DIR_NAME
        if not backup_root.is_dir():
            return []
        return sorted(p for p in backup_root.iterdir() if p.is_dir())

    def restore(self, backup_dir: Optional[Path] = None) -> List[Path]:
        """
        Undoes an install: removes the files it wrote and moves the backed-up
        files back. Uses the most recent backup set unless one is given.

        Nothing is touched if a file added since the install has the same name
        as a backed-up one; that raises ExtensionInstallError naming the file.
        """
        install_dir = self.install_directory()
        if backup_dir is None:
            backups = self.list_backups(install_dir)
            if not backups:
                logger.info(f"No Safari extension backup found in {install_dir}; nothing to restore.")
                return []
            backup_dir = backups[-1]
        backup_dir = Path(backup_dir)
        if not backup_dir.is_dir():
            raise ConfigurationError(f"Safari extension backup does not exist: {backup_dir}", setting="backup", path=backup_dir)

        manifest_path = backup_manifest_path(backup_dir)
        installed_names = self._read_manifest(manifest_path)
        restored: List[Path] = []
        try:
            backed_up_files = self.file_handler.list_files(backup_dir)
            for backed_up in backed_up_files:
                target = install_dir / backed_up.name
                if backed_up.name not in installed_names and os.path.lexists(target):
                    raise ExtensionInstallError(
                        "A file added after the install is in the way of the backup; move it aside before restoring",
                        target,
                    )
            for name in installed_names:
                if self.file_handler.delete_path(install_dir / name):
                    logger.debug(f"Removed installed extension file {install_dir / name}")
            for backed_up in backed_up_files:
                restored.append(self.file_handler.move_file(backed_up, install_dir / backed_up.name))
            self.file_handler.delete_path(manifest_path)
            backup_dir.rmdir()
            backup_root = backup_dir.parent
            if backup_root.name == BACKUP_DIR_NAME and not any(backup_root.iterdir()):
                backup_root.rmdir()
        except OSError as e:
            raise ExtensionInstallError("Could not restore Safari extensions from backup", backup_dir) from e

        logger.info(f"Restored {len(restored)} Safari extension file(s) from {backup_dir}")
        return restored

    def purge_backups(self) -> int:
        """Permanently deletes every backup set. Returns how many were removed."""
        install_dir = self.install_directory()
        backups = self.list_backups(install_dir)
        backup_root = install_dir / BACKUP_DIR_NAME
        try:
            self.file_handler.delete_path(backup_root)
        except OSError as e:
            raise ExtensionInstallError("Could not delete Safari extension backups", backup_root) from e
        if backups:
            logger.info(f"Purged {len(backups)} Safari extension backup set(s) from {backup_root}")
        return len(backups)

    def _plan(self, driver: Optional[ExtensionPackage], extras: List[ExtensionPackage]) -> List[Tuple[str, ExtensionPackage]]:
        planned: List[Tuple[str, ExtensionPackage]] = []
        if driver is not None:
            planned.append((EXTENSION_FILENAME, driver))
        taken = {name for name, _ in planned}
        for package in extras:
            if package.name in taken or package.name == EXTENSIONS_PLIST_NAME:
                raise ConfigurationError(
                    f"Extension file name clashes with another installed extension: {package.path}",
                    setting=EXTENSION_FILES_SETTING,
                    path=package.path,
                )
            taken.add(package.name)
            planned.append((package.name, package))
        return planned

    def _new_backup_dir(self, install_dir: Path) -> Path:
        stamp = self.clock().strftime(BACKUP_TIMESTAMP_FORMAT)
        candidate = install_dir / BACKUP_DIR_NAME / stamp
        suffix = 1
        while candidate.exists() or backup_manifest_path(candidate).exists():
            candidate = install_dir / BACKUP_DIR_NAME / f"{stamp}-{suffix}"
            suffix += 1
        return candidate

    def _stage(self, present: List[Path], backup_dir: Path, planned_names: List[str]) -> List[Path]:
        backed_up: List[Path] = []
        try:
            self.file_handler.ensure_directory_exists(backup_dir)
            manifest = json.dumps({"installed": planned_names + [EXTENSIONS_PLIST_NAME]}, indent=2)
            self.file_handler.write_atomic(io.BytesIO(manifest.encode('utf-8')), backup_manifest_path(backup_dir))
            for path in present:
                backed_up.append(self.file_handler.move_file(path, backup_dir / path.name))
                logger.debug(f"Backed up {path.name} to {backup_dir}")
        except OSError as e:
            raise ExtensionInstallError("Could not back up installed Safari extensions", backup_dir) from e
        return backed_up

    def _write_package(self, package: ExtensionPackage, destination: Path) -> Path:
        try:
            with package.open() as src:
                self.file_handler.write_atomic(src, destination)
        except OSError as e:
            raise ExtensionInstallError(f"Could not install Safari extension {package.name}", destination) from e
        logger.info(f"Installed Safari extension {package.name} as {destination}")
        return destination

    def _write_plist(self, install_dir: Path, archive_names: List[str]) -> Path:
        plist_path = install_dir / EXTENSIONS_PLIST_NAME
        try:
            self.file_handler.write_atomic(io.BytesIO(build_extensions_plist(archive_names)), plist_path)
        except OSError as e:
            raise ExtensionInstallError("Could not write Safari extensions list", plist_path) from e
        return plist_path

    def _read_manifest(self, manifest_path: Path) -> List[str]:
        if not manifest_path.is_file():
            return []
        try:
            with manifest_path.open('r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring unreadable backup manifest {manifest_path}: {e}")
            return []
        names = data.get('installed', []) if isinstance(data, dict) else []
        return [name for name in names if isinstance(name, str) and "/" not in name]
