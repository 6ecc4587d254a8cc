import logging
from pathlib import Path
from typing import Iterable, List, Optional

from ...exceptions import SessionDataError
from ...utils.file_handler import FileHandler
from .paths import PathResolver
from .platform import Environment

logger = logging.getLogger(__name__)


class SessionDataManager:
    """
    Safari's session data files: cache, cookies, history, last session and
    web storage.

    `clear()` is destructive and cannot be undone.
    """

    def __init__(self, artifacts: Iterable[Path], file_handler: Optional[FileHandler] = None):
        self.artifacts: List[Path] = [Path(p) for p in artifacts]
        self.file_handler = file_handler if file_handler else FileHandler()

    @classmethod
    def for_current_platform(
        cls,
        environment: Optional[Environment] = None,
        file_handler: Optional[FileHandler] = None,
    ) -> "SessionDataManager":
        resolver = PathResolver(environment)
        return cls(resolver.resolve_session_artifacts(), file_handler=file_handler)

    def existing(self) -> List[Path]:
        return [p for p in self.artifacts if p.exists() or p.is_symlink()]

    def clear(self) -> List[Path]:
        """
        Deletes every session artifact, in order. Missing artifacts are skipped.

        Stops at the first artifact that cannot be deleted; artifacts deleted
        before it stay deleted.
        """
        deleted: List[Path] = []
        for artifact in self.artifacts:
            try:
                removed = self.file_handler.delete_path(artifact)
            except OSError as e:
                logger.error(f"Failed to delete Safari session data {artifact}: {e}")
                raise SessionDataError("Could not delete Safari session data", artifact) from e
            if removed:
                deleted.append(artifact)
                logger.debug(f"Deleted Safari session data: {artifact}")
            else:
                logger.debug(f"Safari session data not present: {artifact}")
        logger.info(f"Cleared {len(deleted)} Safari session artifact(s).")
        return deleted
