"""
Unit tests for rvmkit.client
"""

import logging

import pytest

import rvmkit.client
import rvmkit.config
from rvmkit.exceptions import RvmKitInvocationError

from unittest.mock import MagicMock, patch


@pytest.fixture
def caller():
    opts = rvmkit.config.apply_config({"grains": {"platform": "centos"}})
    os_data = MagicMock(return_value={"platform": "ubuntu", "os_family": "RedHat"})
    os_data.__name__ = "os_data"
    os_data.__module__ = "rvmkit.grains.core"
    with patch("rvmkit.loader.GRAIN_FUNCS", (os_data,)):
        yield rvmkit.client.Caller(opts=opts)


def test_grains_are_loaded(caller):
    assert caller.opts["grains"] == {"platform": "centos", "os_family": "RedHat"}


def test_cmd(caller):
    assert caller.cmd("rvm_helpers.select_gemset", "ruby-2.0.0@myapp") == "myapp"
    assert caller.cmd("rvm_helpers.ruby_string_sane", rubie="ruby") is False


def test_cmd_uses_platform_grain(caller):
    assert caller.cmd("rvm_helpers.ruby_dependencies", "jruby-1.7.0") == ["g++"]
    assert caller.cmd("rvm_helpers.ruby_dependencies", "ruby-head")[-1] == "autoconf"


def test_unknown_function(caller):
    with pytest.raises(RvmKitInvocationError, match="rvm_helpers.nope"):
        caller.cmd("rvm_helpers.nope")


def test_invalid_arguments(caller):
    with pytest.raises(RvmKitInvocationError, match="Passed invalid arguments"):
        caller.cmd("rvm_helpers.select_ruby")
    with pytest.raises(RvmKitInvocationError):
        caller.cmd("rvm_helpers.select_ruby", "ruby-2.0.0", bogus=True)


def test_caller_reads_config(tmp_path, monkeypatch):
    monkeypatch.setenv("RVMKIT_CONFIG", "")
    path = tmp_path / "rvmkit"
    path.write_text("grains:\n  platform: suse\n")
    with patch("rvmkit.loader.GRAIN_FUNCS", ()):
        caller = rvmkit.client.Caller(str(path))
    assert caller.opts["conf_file"] == str(path)
    assert caller.cmd("rvm_helpers.ruby_dependencies", "ruby-2.0.0")[0] == "gcc-c++"


def test_missing_rvm_warns_at_startup(tmp_path, caplog):
    rvm_path = str(tmp_path / "missing" / "rvm")
    opts = rvmkit.config.apply_config(
        {"rvm.path": rvm_path, "grains": {"platform": "ubuntu"}}
    )
    with patch("rvmkit.loader.GRAIN_FUNCS", ()):
        with caplog.at_level(logging.WARNING):
            caller = rvmkit.client.Caller(opts=opts)
    warnings = [r.getMessage() for r in caplog.records if "Missing 'rvm'" in r.getMessage()]
    assert len(warnings) == 1
    assert rvm_path in warnings[0]

    caplog.clear()
    assert caller.cmd("rvm_helpers.ruby_dependencies", "jruby-1.7.0") == ["g++"]
    assert "Missing 'rvm'" not in caplog.text


def test_rvm_present_does_not_warn(tmp_path, caplog):
    rvm_path = tmp_path / "rvm"
    rvm_path.write_text("#!/bin/sh\n")
    rvm_path.chmod(0o755)
    opts = rvmkit.config.apply_config({"rvm.path": str(rvm_path), "grains": {}})
    with patch("rvmkit.loader.GRAIN_FUNCS", ()):
        with caplog.at_level(logging.WARNING):
            rvmkit.client.Caller(opts=opts)
    assert "Missing 'rvm'" not in caplog.text
