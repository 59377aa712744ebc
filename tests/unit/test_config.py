"""
Unit tests for rvmkit.config
"""

import textwrap

import pytest

import rvmkit.config
import rvmkit.defaults.exitcodes
from rvmkit.exceptions import RvmKitConfigurationError


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "rvmkit"
    path.write_text(
        textwrap.dedent(
            """\
            log_level: debug
            rvm.runas: deploy
            module_dirs:
              - ~/rvmkit/modules
            grains:
              platform: ubuntu
            """
        )
    )
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # rvmkit_config exports RVMKIT_CONFIG itself, setting it here restores it
    monkeypatch.setenv("RVMKIT_CONFIG", "")
    monkeypatch.setenv("RVMKIT_CONFIG_DIR", "")


def test_defaults(tmp_path):
    opts = rvmkit.config.rvmkit_config(str(tmp_path / "missing"))
    assert opts["log_level"] == "warning"
    assert opts["rvm.runas"] is None
    assert opts["rvm.path"] is None
    assert opts["output"] == "nested"
    assert opts["grains"] == {}


def test_defaults_are_not_shared(tmp_path):
    opts = rvmkit.config.rvmkit_config(str(tmp_path / "missing"))
    opts["grains"]["platform"] = "ubuntu"
    assert rvmkit.config.DEFAULT_OPTS["grains"] == {}


def test_read_config_file(config_file):
    opts = rvmkit.config.rvmkit_config(str(config_file))
    assert opts["conf_file"] == str(config_file)
    assert opts["log_level"] == "debug"
    assert opts["rvm.runas"] == "deploy"
    assert opts["grains"] == {"platform": "ubuntu"}
    assert not opts["module_dirs"][0].startswith("~")


def test_env_var(config_file, monkeypatch):
    monkeypatch.setenv("RVMKIT_CONFIG", str(config_file))
    opts = rvmkit.config.rvmkit_config()
    assert opts["rvm.runas"] == "deploy"


def test_config_dir_env_var(config_file, monkeypatch):
    monkeypatch.setenv("RVMKIT_CONFIG_DIR", str(config_file.parent))
    opts = rvmkit.config.rvmkit_config()
    assert opts["conf_file"] == str(config_file)


def test_invalid_type_falls_back_to_default(tmp_path, caplog):
    path = tmp_path / "rvmkit"
    path.write_text("grains: ubuntu\nlog_level: 10\n")
    opts = rvmkit.config.rvmkit_config(str(path))
    assert opts["grains"] == {}
    assert opts["log_level"] == "10"
    assert "Config option 'grains' with value ubuntu" in caplog.text


def test_read_conf_file_not_a_document(tmp_path):
    path = tmp_path / "rvmkit"
    path.write_text("just a string\n")
    with pytest.raises(RvmKitConfigurationError):
        rvmkit.config._read_conf_file(str(path))


def test_bad_yaml_is_ignored(tmp_path):
    path = tmp_path / "rvmkit"
    path.write_text("log_level: [debug\n")
    opts = rvmkit.config.rvmkit_config(str(path))
    assert opts["log_level"] == "warning"


def test_bad_yaml_exits(tmp_path):
    path = tmp_path / "rvmkit"
    path.write_text("log_level: [debug\n")
    with pytest.raises(SystemExit) as excinfo:
        rvmkit.config.rvmkit_config(str(path), ignore_config_errors=False)
    assert excinfo.value.code == rvmkit.defaults.exitcodes.EX_CONFIG


def test_apply_config():
    opts = rvmkit.config.apply_config({"log_file": "~/rvmkit.log"})
    assert not opts["log_file"].startswith("~")
    assert opts["disable_modules"] == []
