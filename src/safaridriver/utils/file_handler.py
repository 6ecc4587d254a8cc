import logging
import os
import shutil
import uuid
from pathlib import Path
from typing import BinaryIO, List

logger = logging.getLogger(__name__)


class FileHandler:
    """
    Filesystem primitives used by the installer and the session-data manager.

    Methods raise OSError untouched; callers decide how to report it. File
    handles live only for the duration of a single call.
    """

    def ensure_directory_exists(self, dir_path: Path) -> None:
        """Ensures that the specified directory exists, creating it if necessary."""
        if not dir_path.exists():
            dir_path.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Created directory: {dir_path}")
        elif not dir_path.is_dir():
            logger.error(f"Path exists but is not a directory: {dir_path}")
            raise NotADirectoryError(f"{dir_path} exists but is not a directory.")

    def list_files(self, dir_path: Path) -> List[Path]:
        """Regular files directly under dir_path, sorted by name. Subdirectories are not descended."""
        return sorted(p for p in dir_path.iterdir() if p.is_file())

    def write_atomic(self, source: BinaryIO, destination: Path) -> Path:
        """
        Streams source into destination via a temporary sibling file.

        The final name only appears once all bytes are on disk, so a failed
        copy never leaves a truncated file under it.
        """
        tmp_path = destination.with_name(f".{destination.name}.{uuid.uuid4().hex}.tmp")
        try:
            with tmp_path.open('wb') as out:
                shutil.copyfileobj(source, out)
            os.replace(tmp_path, destination)
        except BaseException:
            try:
                tmp_path.unlink()
            except FileNotFoundError:
                pass
            raise
        return destination

    def move_file(self, source: Path, destination: Path) -> Path:
        self.ensure_directory_exists(destination.parent)
        shutil.move(str(source), str(destination))
        logger.debug(f"Moved {source} -> {destination}")
        return destination

    def delete_path(self, path: Path) -> bool:
        """
        Deletes a file, symlink, or directory tree.

        Returns False when nothing exists at path, True once it is gone.
        """
        if not os.path.lexists(path):
            return False
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
        return True
