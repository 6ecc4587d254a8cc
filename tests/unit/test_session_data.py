from pathlib import Path

import pytest

from safaridriver.core.safari.platform import Platform
from safaridriver.core.safari.session_data import SessionDataManager
from safaridriver.exceptions import IOFailure, SessionDataError, UnsupportedPlatformError
from safaridriver.utils.file_handler import FileHandler

from ..helpers import make_environment


def _populate(home: Path) -> dict:
    """Creates a realistic subset of Safari's session data. Returns name -> path."""
    library = home / "Library"
    created = {
        "cache": library / "Caches/com.apple.Safari/Cache.db",
        "cookies": library / "Cookies/Cookies.binarycookies",
        "history": library / "Safari/History.plist",
        "local_storage": library / "Safari/LocalStorage",
    }
    for name, path in created.items():
        if name == "local_storage":
            (path / "https_example.com_0.localstorage").parent.mkdir(parents=True)
            (path / "https_example.com_0.localstorage").write_bytes(b"sqlite")
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(b"data")
    return created


class BlockingFileHandler(FileHandler):
    """Simulates a file held open by a running Safari."""

    def __init__(self, blocked: Path):
        self.blocked = blocked

    def delete_path(self, path):
        if path == self.blocked:
            raise PermissionError(1, "Operation not permitted", str(path))
        return super().delete_path(path)


class TestClear:
    def test_deletes_existing_and_tolerates_missing(self, mac_env, home):
        created = _populate(home)
        manager = SessionDataManager.for_current_platform(mac_env)

        deleted = manager.clear()

        assert deleted == [created["cache"], created["cookies"], created["history"], created["local_storage"]]
        assert not any(p.exists() for p in created.values())
        assert manager.existing() == []

    def test_nothing_present_is_not_an_error(self, mac_env, home):
        assert SessionDataManager.for_current_platform(mac_env).clear() == []

    def test_directories_are_removed_recursively(self, tmp_path):
        storage = tmp_path / "Databases"
        (storage / "nested" / "deeper").mkdir(parents=True)
        (storage / "nested" / "deeper" / "db.sqlite").write_bytes(b"x")

        SessionDataManager([storage]).clear()

        assert not storage.exists()

    def test_keeps_unrelated_files(self, mac_env, home):
        _populate(home)
        bookmarks = home / "Library/Safari/Bookmarks.plist"
        bookmarks.write_bytes(b"bookmarks")

        SessionDataManager.for_current_platform(mac_env).clear()

        assert bookmarks.read_bytes() == b"bookmarks"

    def test_blocked_deletion_aborts_and_names_path(self, mac_env, home):
        created = _populate(home)
        manager = SessionDataManager.for_current_platform(mac_env, file_handler=BlockingFileHandler(created["cookies"]))

        with pytest.raises(SessionDataError) as exc_info:
            manager.clear()

        error = exc_info.value
        assert isinstance(error, IOFailure)
        assert error.path == created["cookies"]
        assert str(created["cookies"]) in str(error)
        assert isinstance(error.__cause__, PermissionError)
        # No rollback for what was already deleted, nothing attempted afterwards
        assert not created["cache"].exists()
        assert created["cookies"].exists()
        assert created["history"].exists()
        assert created["local_storage"].exists()

    def test_existing_has_no_side_effects(self, mac_env, home):
        created = _populate(home)

        existing = SessionDataManager.for_current_platform(mac_env).existing()

        assert existing == [created["cache"], created["cookies"], created["history"], created["local_storage"]]
        assert all(p.exists() for p in created.values())


def test_unsupported_platform_is_rejected(home):
    with pytest.raises(UnsupportedPlatformError):
        SessionDataManager.for_current_platform(make_environment(home, platform=Platform.WINDOWS))
