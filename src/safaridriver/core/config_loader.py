import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..exceptions import ConfigurationError

# JSON resources shipped inside the package (safaridriver/config/)
PACKAGE_DIR = Path(__file__).resolve().parent.parent
PACKAGE_CONFIG_DIR = PACKAGE_DIR / 'config'
# Per-project settings, relative to the working directory
CONFIG_DIR = Path('config')
DEFAULT_SETTINGS_FILE = CONFIG_DIR / 'settings.json'

logger = logging.getLogger(__name__)


def load_json_resource(resource: Union[str, Path]) -> Dict[str, Any]:
    """
    Loads a JSON object from a packaged resource or from the file system.

    The name is first looked up in the package's config directory, then used as
    a plain path. Unlike ConfigLoader, every failure is raised.

    Raises:
        ConfigurationError: if the resource is missing, unreadable, not JSON,
            or not a JSON object.
    """
    packaged = PACKAGE_CONFIG_DIR / str(resource)
    candidate = packaged if packaged.is_file() else Path(resource)
    if not candidate.is_file():
        raise ConfigurationError(f"{resource} is not a valid resource.", setting="config", path=candidate)

    try:
        with candidate.open('r', encoding='utf-8') as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Cannot read file {resource} , {e}", setting="config", path=candidate) from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Wrong format for the JSON input : {e}", setting="config", path=candidate) from e
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Wrong format for the JSON input : expected an object, got {type(data).__name__}",
            setting="config",
            path=candidate,
        )
    logger.debug(f"Loaded JSON configuration from {candidate}")
    return data


class ConfigLoader:
    def __init__(self, settings_file: Union[str, Path] = DEFAULT_SETTINGS_FILE, settings: Optional[Dict[str, Any]] = None):
        """
        Initializes the ConfigLoader.

        Args:
            settings_file (Union[str, Path], optional): Path to the settings JSON file.
                                                        Defaults to 'config/settings.json'.
            settings (Dict[str, Any], optional): Already-loaded settings. When given,
                                                 settings_file is not read.
        """
        self.settings_file: Path = Path(settings_file)

        if settings is not None:
            self.settings: Dict[str, Any] = settings
        else:
            self.settings = self._load_json(self.settings_file, default_value={})
            if not self.settings:
                logger.warning(f"Settings file '{self.settings_file}' was not found or is empty/invalid. Using empty settings.")

    @classmethod
    def from_resource(cls, resource: Union[str, Path]) -> "ConfigLoader":
        """Strict variant: raises ConfigurationError instead of falling back to empty settings."""
        return cls(settings_file=Path(resource), settings=load_json_resource(resource))

    def _load_json(self, file_path: Path, default_value: Dict[str, Any]) -> Dict[str, Any]:
        """
        Loads a JSON file.

        Args:
            file_path (Path): The path to the JSON file.
            default_value (Dict): The default value to return if loading fails.

        Returns:
            Dict: The loaded JSON data or the default value.
        """
        if not file_path.exists():
            logger.debug(f"Configuration file not found: {file_path}")
            return default_value
        if not file_path.is_file():
            logger.error(f"Configuration path is not a file: {file_path}")
            return default_value

        try:
            with file_path.open('r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Could not decode JSON from {file_path}: {e}")
            return default_value
        except OSError as e:
            logger.error(f"Could not read {file_path}: {e}")
            return default_value

        if not isinstance(data, dict):
            logger.error(f"Expected a JSON object in {file_path}, found {type(data).__name__}.")
            return default_value
        logger.debug(f"Successfully loaded JSON from {file_path}")
        return data

    def get_settings(self) -> Dict[str, Any]:
        """Returns all loaded settings."""
        return self.settings

    def get_setting(self, path_str: str, default: Any = None) -> Any:
        """
        Retrieves a setting value using a dot-separated path.

        Args:
            path_str (str): Dot-separated path to the setting (e.g., "logging.level").
            default (Any, optional): Default value if the setting is not found. Defaults to None.

        Returns:
            Any: The setting value or the default.
        """
        current_level: Any = self.settings
        for key in path_str.split('.'):
            if not isinstance(current_level, dict):
                logger.warning(f"Invalid path '{path_str}' at key '{key}'. Expected a dictionary, found {type(current_level)}.")
                return default
            if key not in current_level:
                logger.debug(f"Setting '{path_str}' not found. Returning default: {default}")
                return default
            current_level = current_level[key]
        return current_level

    def get_safari_setting(self, setting_name: str, default: Any = None) -> Any:
        """Retrieves a specific setting from the 'safari_settings' block."""
        return self.get_setting(f'safari_settings.{setting_name}', default)

    def get_logging_setting(self, setting_name: str, default: Any = None) -> Any:
        """Retrieves a specific setting from the 'logging' block."""
        return self.get_setting(f'logging.{setting_name}', default)
