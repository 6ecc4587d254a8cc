"""
SafariDriver profile tool.

Usage:
    python -m safaridriver.main install
    python -m safaridriver.main verify
    python -m safaridriver.main clear
    python -m safaridriver.main restore [--backup DIR]
    python -m safaridriver.main purge-backups
    python -m safaridriver.main paths
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .core.config_loader import ConfigLoader
from .core.safari import SafariManager
from .core.safari.constants import EXTENSIONS_DIR_NAME, SAFARI_SETTINGS_KEY
from .data_models import SafariOptions
from .exceptions import SafariDriverError
from .utils.logger import setup_logger

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="safaridriver",
        description="Install the SafariDriver extension and clean Safari session data.",
    )
    parser.add_argument("--config", help="Settings JSON file or packaged resource name (default: config/settings.json)")
    parser.add_argument("--data-dir", type=Path, help="Custom Safari data directory for installs")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("install", help="Back up current extensions and install the SafariDriver extension")
    subparsers.add_parser("verify", help="Check that Safari has the SafariDriver extension")
    subparsers.add_parser("clear", help="Delete Safari caches, cookies, history and web storage")
    restore = subparsers.add_parser("restore", help="Undo an install from its backup")
    restore.add_argument("--backup", type=Path, help="Backup set to restore (default: most recent)")
    subparsers.add_parser("purge-backups", help="Permanently delete extension backups")
    subparsers.add_parser("paths", help="Print the Safari locations this tool uses")
    return parser.parse_args(argv)


def run(args: argparse.Namespace) -> int:
    config_loader = ConfigLoader.from_resource(args.config) if args.config else ConfigLoader()
    setup_logger(config_loader, level="DEBUG" if args.verbose else None)

    options = SafariOptions.from_settings(config_loader.get_setting(SAFARI_SETTINGS_KEY, {}))
    if args.data_dir:
        options = options.model_copy(update={"data_dir": args.data_dir})
    manager = SafariManager(config_loader, options=options)
    installer = manager.installer

    if args.command == "install":
        result = installer.install()
        if result is None:
            print("Nothing to install.")
        else:
            for path in result.installed:
                print(f"installed {path}")
            print(f"backup {result.backup_dir}")
    elif args.command == "verify":
        print(f"found {installer.verify_installed()}")
    elif args.command == "clear":
        for path in manager.session_data().clear():
            print(f"deleted {path}")
    elif args.command == "restore":
        for path in installer.restore(args.backup):
            print(f"restored {path}")
    elif args.command == "purge-backups":
        print(f"purged {installer.purge_backups()} backup set(s)")
    elif args.command == "paths":
        print(f"data directory: {manager.resolver.resolve_data_directory()}")
        print(f"install directory: {(options.data_dir or manager.resolver.resolve_data_directory()) / EXTENSIONS_DIR_NAME}")
        for artifact in manager.resolver.resolve_session_artifacts():
            print(f"session data: {artifact}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    try:
        return run(args)
    except SafariDriverError as e:
        logger.error(e.msg)
        logger.debug("Details:", exc_info=True)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
