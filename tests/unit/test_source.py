from pathlib import Path

import pytest

from safaridriver.core.safari.constants import EXTENSION_RESOURCE_NAME, RESOURCES_DIR
from safaridriver.core.safari.source import ExtensionSource
from safaridriver.data_models import SafariOptions
from safaridriver.exceptions import ConfigurationError, ExtensionResourceError

from ..helpers import make_environment


@pytest.fixture
def bundled_dir(tmp_path: Path) -> Path:
    path = tmp_path / "resources"
    path.mkdir()
    (path / EXTENSION_RESOURCE_NAME).write_bytes(b"xar!bundled")
    return path


def _source(home, options=None, variables=None, resources_dir=None):
    kwargs = {}
    if resources_dir is not None:
        kwargs["resources_dir"] = resources_dir
    return ExtensionSource(options or SafariOptions(), make_environment(home, variables=variables), **kwargs)


class TestResolveExtension:
    def test_packaged_resource_ships_with_the_package(self):
        assert (RESOURCES_DIR / EXTENSION_RESOURCE_NAME).is_file()

    def test_defaults_to_bundled_resource(self, home, bundled_dir):
        package = _source(home, resources_dir=bundled_dir).resolve_extension()

        assert package.bundled is True
        assert package.name == EXTENSION_RESOURCE_NAME
        assert package.read_bytes() == b"xar!bundled"

    def test_override_from_environment_wins_over_bundled(self, home, bundled_dir, override_package):
        source = _source(home, variables={"WEBDRIVER_SAFARI_DRIVER": str(override_package)}, resources_dir=bundled_dir)

        package = source.resolve_extension()

        assert package.bundled is False
        assert package.path == override_package
        assert package.read_bytes() == b"xar!override-extension-bytes"

    def test_override_from_settings(self, home, bundled_dir, override_package):
        options = SafariOptions(driver_extension_path=str(override_package))

        package = _source(home, options=options, resources_dir=bundled_dir).resolve_extension()

        assert package.path == override_package

    def test_environment_override_beats_settings_override(self, home, tmp_path, override_package):
        options = SafariOptions(driver_extension_path=str(tmp_path / "from-settings.safariextz"))
        source = _source(home, options=options, variables={"WEBDRIVER_SAFARI_DRIVER": str(override_package)})

        assert source.override_location() == ("WEBDRIVER_SAFARI_DRIVER", str(override_package))
        assert source.resolve_extension().path == override_package

    def test_invalid_override_does_not_fall_back_to_bundled(self, home, tmp_path, bundled_dir):
        missing = tmp_path / "nope.safariextz"
        source = _source(home, variables={"WEBDRIVER_SAFARI_DRIVER": str(missing)}, resources_dir=bundled_dir)

        with pytest.raises(ConfigurationError) as exc_info:
            source.resolve_extension()

        assert exc_info.value.setting == "WEBDRIVER_SAFARI_DRIVER"
        assert exc_info.value.path == missing
        assert "WEBDRIVER_SAFARI_DRIVER" in str(exc_info.value)
        assert str(missing) in str(exc_info.value)

    def test_override_that_is_a_directory_is_rejected(self, home, tmp_path):
        options = SafariOptions(driver_extension_path=str(tmp_path))

        with pytest.raises(ConfigurationError) as exc_info:
            _source(home, options=options).resolve_extension()

        assert exc_info.value.setting == "safari_settings.driver_extension_path"

    @pytest.mark.parametrize("value", ["1", "true", "TRUE", "yes", "on"])
    def test_install_disabled_by_environment(self, home, bundled_dir, value):
        source = _source(home, variables={"WEBDRIVER_SAFARI_NOINSTALL": value}, resources_dir=bundled_dir)

        assert source.install_disabled()
        assert source.resolve_extension() is None

    @pytest.mark.parametrize("value", ["", "0", "false", "no"])
    def test_falsy_toggle_keeps_install_enabled(self, home, bundled_dir, value):
        source = _source(home, variables={"WEBDRIVER_SAFARI_NOINSTALL": value}, resources_dir=bundled_dir)

        assert not source.install_disabled()
        assert source.resolve_extension() is not None

    def test_install_disabled_by_settings(self, home, bundled_dir):
        options = SafariOptions(skip_extension_installation=True)

        assert _source(home, options=options, resources_dir=bundled_dir).resolve_extension() is None

    def test_custom_driver_extension_skips_driver(self, home, bundled_dir):
        options = SafariOptions(use_custom_driver_extension=True)
        source = _source(home, options=options, resources_dir=bundled_dir)

        assert not source.install_disabled()
        assert source.resolve_extension() is None

    def test_override_is_checked_before_opt_out_flags(self, home, tmp_path, bundled_dir):
        options = SafariOptions(skip_extension_installation=True, driver_extension_path=str(tmp_path / "missing.safariextz"))

        with pytest.raises(ConfigurationError):
            _source(home, options=options, resources_dir=bundled_dir).resolve_extension()

    def test_valid_override_is_skipped_when_install_disabled(self, home, bundled_dir, override_package):
        options = SafariOptions(skip_extension_installation=True, driver_extension_path=str(override_package))

        assert _source(home, options=options, resources_dir=bundled_dir).resolve_extension() is None

    def test_valid_override_is_skipped_for_custom_driver_extension(self, home, bundled_dir, override_package):
        options = SafariOptions(use_custom_driver_extension=True)
        source = _source(home, options=options, variables={"WEBDRIVER_SAFARI_DRIVER": str(override_package)}, resources_dir=bundled_dir)

        assert source.resolve_extension() is None

    def test_missing_bundled_resource_is_an_internal_error(self, home, tmp_path):
        empty = tmp_path / "empty-resources"
        empty.mkdir()

        with pytest.raises(ExtensionResourceError) as exc_info:
            _source(home, resources_dir=empty).resolve_extension()

        assert not isinstance(exc_info.value, ConfigurationError)
        assert exc_info.value.resource == empty / EXTENSION_RESOURCE_NAME


class TestResolveExtensionFiles:
    def test_returns_packages_in_configured_order(self, home, tmp_path):
        first = tmp_path / "B.safariextz"
        second = tmp_path / "A.safariextz"
        first.write_bytes(b"b")
        second.write_bytes(b"a")
        options = SafariOptions(extension_files=[first, second])

        packages = _source(home, options=options).resolve_extension_files()

        assert [p.name for p in packages] == ["B.safariextz", "A.safariextz"]

    def test_missing_extension_file_names_the_setting(self, home, tmp_path):
        missing = tmp_path / "Gone.safariextz"
        options = SafariOptions(extension_files=[missing])

        with pytest.raises(ConfigurationError) as exc_info:
            _source(home, options=options).resolve_extension_files()

        assert exc_info.value.setting == "safari_settings.extension_files"
        assert exc_info.value.path == missing

    def test_disabled_install_ignores_extension_files(self, home, tmp_path):
        extra = tmp_path / "Extra.safariextz"
        extra.write_bytes(b"extra")
        options = SafariOptions(extension_files=[extra], skip_extension_installation=True)

        assert _source(home, options=options).resolve_extension_files() == []

    def test_custom_driver_extension_still_installs_extension_files(self, home, tmp_path):
        extra = tmp_path / "Extra.safariextz"
        extra.write_bytes(b"extra")
        options = SafariOptions(extension_files=[extra], use_custom_driver_extension=True)

        assert [p.path for p in _source(home, options=options).resolve_extension_files()] == [extra]
