"""Tests for settings/profile configuration and their CLI commands."""

import json

import pytest
import yaml
from click.testing import CliRunner

from staffcalc.cli.__main__ import cli
from staffcalc.sdk.config import (
    ConfigNotFoundError,
    get_agency_profile,
    get_config_dir,
    get_data_path,
    get_notification_settings,
    get_profile_value,
    set_profile_value,
)


@pytest.fixture
def runner():
    return CliRunner()


class TestConfigPaths:

    def test_env_var_sets_config_dir(self, isolated_env):
        assert get_config_dir() == isolated_env["config_dir"]

    def test_data_dir_from_settings(self, isolated_env):
        assert get_data_path() == isolated_env["data_dir"]

    def test_xdg_data_default(self, tmp_path, monkeypatch):
        monkeypatch.setenv("STAFF_CALC_CONFIG_PATH", str(tmp_path / "empty-config"))
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))
        assert get_data_path() == tmp_path / "xdg" / "staff-calc"


class TestProfile:

    def test_defaults_without_profile(self, isolated_env):
        agency = get_agency_profile()
        assert agency.name == "Adelphi Healthcare Staffing"
        assert get_notification_settings().email.backend == "outbox"

    def test_profile_overrides(self, isolated_env):
        (isolated_env["config_dir"] / "profile.yaml").write_text(yaml.safe_dump({
            "agency": {"name": "Northwind Staffing"},
            "notifications": {"email": {"backend": "smtp", "host": "smtp.example.com", "port": 2525}},
        }))
        assert get_agency_profile().name == "Northwind Staffing"
        assert get_agency_profile().phone == "(800) 555-1234"
        email = get_notification_settings().email
        assert (email.backend, email.host, email.port) == ("smtp", "smtp.example.com", 2525)

    def test_invalid_section_raises_config_error(self, isolated_env):
        (isolated_env["config_dir"] / "profile.yaml").write_text(
            "notifications:\n  email:\n    backend: smtp\n"
        )
        with pytest.raises(ConfigNotFoundError):
            get_notification_settings()

    def test_dot_notation_values(self, isolated_env):
        set_profile_value("agency.email", "jobs@northwind.example")
        assert get_profile_value("agency.email") == "jobs@northwind.example"
        assert get_profile_value("agency.missing", "fallback") == "fallback"


class TestSettingsCli:

    def test_show(self, runner, isolated_env):
        result = runner.invoke(cli, ["settings", "show"])
        assert result.exit_code == 0, result.output
        assert f"data_dir: {isolated_env['data_dir']}" in result.output

    def test_set_and_clear_data_dir(self, runner, isolated_env, tmp_path):
        new_dir = tmp_path / "elsewhere"
        result = runner.invoke(cli, ["settings", "data-dir", str(new_dir)])
        assert result.exit_code == 0, result.output
        assert new_dir.is_dir()
        settings = json.loads((isolated_env["config_dir"] / "settings.json").read_text())
        assert settings["data_dir"] == str(new_dir.resolve())

        cleared = runner.invoke(cli, ["settings", "data-dir", "--clear"])
        assert "Cleared data_dir setting." in cleared.output

    def test_data_dir_must_be_directory(self, runner, isolated_env, tmp_path):
        target = tmp_path / "file.txt"
        target.write_text("x")
        result = runner.invoke(cli, ["settings", "data-dir", str(target)])
        assert result.exit_code != 0
        assert "not a directory" in result.output


class TestProfileCli:

    def test_show_defaults(self, runner, isolated_env):
        result = runner.invoke(cli, ["profile", "show"])
        assert result.exit_code == 0, result.output
        assert "Exists: False" in result.output
        assert "name: Adelphi Healthcare Staffing" in result.output
        assert "email: outbox" in result.output
        assert "sms: none" in result.output

    def test_show_masks_password(self, runner, isolated_env):
        (isolated_env["config_dir"] / "profile.yaml").write_text(yaml.safe_dump({
            "notifications": {"email": {"backend": "smtp", "host": "smtp.example.com", "password": "hunter2"}},
        }))
        result = runner.invoke(cli, ["profile", "show"])
        assert result.exit_code == 0, result.output
        assert "hunter2" not in result.output
        assert "smtp smtp.example.com:587" in result.output

    def test_set_agency(self, runner, isolated_env):
        result = runner.invoke(cli, ["profile", "agency", "--name", "Northwind Staffing"])
        assert result.exit_code == 0, result.output
        assert "Set agency.name = Northwind Staffing" in result.output
        assert "name: Northwind Staffing" in result.output
        assert get_agency_profile().name == "Northwind Staffing"


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "staff-calc" in result.output
