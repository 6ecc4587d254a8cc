import pytest

from safaridriver.core.safari.platform import Environment, Platform


class TestPlatform:
    @pytest.mark.parametrize(
        "system_name, expected",
        [
            ("Darwin", Platform.MAC),
            ("Windows", Platform.WINDOWS),
            ("Linux", Platform.LINUX),
            ("FreeBSD", Platform.UNIX),
            ("Plan9", Platform.UNKNOWN),
            ("", Platform.UNKNOWN),
        ],
    )
    def test_current_maps_system_names(self, system_name, expected):
        assert Platform.current(system_name) is expected

    def test_only_mac_is_mac(self):
        assert Platform.MAC.is_mac()
        assert not any(p.is_mac() for p in Platform if p is not Platform.MAC)

    def test_str_is_enum_name(self):
        assert str(Platform.LINUX) == "LINUX"


class TestEnvironment:
    def test_getenv_reads_injected_variables_only(self, tmp_path):
        env = Environment(Platform.MAC, "tester", tmp_path, {"WEBDRIVER_SAFARI_NOINSTALL": "1"})

        assert env.getenv("WEBDRIVER_SAFARI_NOINSTALL") == "1"
        assert env.getenv("PATH") is None
        assert env.getenv("MISSING", "fallback") == "fallback"

    def test_system_snapshot_describes_running_process(self, monkeypatch):
        monkeypatch.setenv("USER", "someone")

        env = Environment.system()

        assert env.user_name == "someone"
        assert env.home_dir.is_absolute()
        assert env.getenv("USER") == "someone"
        assert isinstance(env.platform, Platform)
