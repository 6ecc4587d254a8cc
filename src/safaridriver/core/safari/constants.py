from pathlib import Path
from typing import Dict, Tuple

from .platform import Platform

# Bundled extension shipped inside this package (see pyproject package-data)
RESOURCES_DIR: Path = Path(__file__).resolve().parent / "resources"
EXTENSION_RESOURCE_NAME = "SafariDriver.safariextz"

# Name the driver extension is installed under, and looked up by at verify time
EXTENSION_NAME = "WebDriver"
EXTENSION_SUFFIX = ".safariextz"
EXTENSION_FILENAME = EXTENSION_NAME + EXTENSION_SUFFIX

# Out-of-band toggles, read from the process environment
EXTENSION_LOCATION_ENV = "WEBDRIVER_SAFARI_DRIVER"
NO_INSTALL_EXTENSION_ENV = "WEBDRIVER_SAFARI_NOINSTALL"
TRUTHY_VALUES = ("1", "true", "yes", "on")

# Settings keys (settings.json, 'safari_settings' block)
SAFARI_SETTINGS_KEY = "safari_settings"
EXTENSION_LOCATION_SETTING = f"{SAFARI_SETTINGS_KEY}.driver_extension_path"
EXTENSION_FILES_SETTING = f"{SAFARI_SETTINGS_KEY}.extension_files"
DATA_DIR_SETTING = f"{SAFARI_SETTINGS_KEY}.data_dir"

# Layout of Safari's per-user storage, relative to the home directory
LIBRARY_DIR = "Library"
SAFARI_DATA_DIR = "Library/Safari"
EXTENSIONS_DIR_NAME = "Extensions"
EXTENSIONS_PLIST_NAME = "Extensions.plist"
BACKUP_DIR_NAME = ".webdriver-backup"
BACKUP_TIMESTAMP_FORMAT = "%Y%m%dT%H%M%S%f"

# Session state written by Safari, relative to ~/Library. Tied to the storage
# layout of specific Safari releases; update here when that layout moves.
SESSION_ARTIFACTS: Dict[Platform, Tuple[str, ...]] = {
    Platform.MAC: (
        "Caches/com.apple.Safari/Cache.db",
        "Cookies/Cookies.binarycookies",
        "Cookies/Cookies.plist",
        "Safari/History.plist",
        "Safari/LastSession.plist",
        "Safari/LocalStorage",
        "Safari/Databases",
    ),
}
