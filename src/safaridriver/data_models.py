from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError

from .exceptions import ConfigurationError


class SafariOptions(BaseModel):
    """The 'safari_settings' block of settings.json."""
    data_dir: Optional[Path] = Field(None, description="Custom Safari data directory. Overrides ~/Library/Safari for installs.")
    driver_extension_path: Optional[str] = Field(None, description="Pre-packaged .safariextz to install instead of the bundled one.")
    skip_extension_installation: bool = Field(False, description="Do not install or remove any extension.")
    use_custom_driver_extension: bool = Field(False, description="Trust a driver extension that is already installed; still installs extension_files.")
    extension_files: List[Path] = Field(default_factory=list, description="Additional .safariextz files to install alongside the driver.")

    # Session lifecycle
    clean_session: bool = Field(False, description="Delete Safari session data (cache, cookies, history, storage) before installing.")
    restore_on_exit: bool = Field(True, description="Put the user's previous extensions back when the session ends.")
    verify_after_install: bool = Field(False, description="Check that the driver extension is visible to Safari after installing.")

    @classmethod
    def from_settings(cls, settings: Optional[Dict[str, Any]]) -> "SafariOptions":
        try:
            return cls.model_validate(settings or {})
        except ValidationError as e:
            raise ConfigurationError(f"Invalid 'safari_settings' configuration: {e}", setting="safari_settings") from e


class ExtensionPackage(BaseModel):
    """An extension archive to copy into Safari. Never modified, only read."""
    name: str
    path: Path
    bundled: bool = False

    def open(self) -> BinaryIO:
        return self.path.open('rb')

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()


class InstallResult(BaseModel):
    install_dir: Path
    backup_dir: Path = Field(..., description="Backup set made by the install; empty when nothing was there before.")
    backed_up: List[Path] = Field(default_factory=list)
    installed: List[Path] = Field(default_factory=list)


if __name__ == '__main__':
    options = SafariOptions(
        data_dir=Path("/Users/example/Library/Safari"),
        extension_files=[Path("extras/AdBlock.safariextz")],
        clean_session=True,
    )
    print(options.model_dump_json(indent=2, exclude_none=True))
