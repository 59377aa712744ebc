"""
Test cases for rvmkit.modules.config
"""

import pytest

import rvmkit.modules.config as config


@pytest.fixture
def configure_loader_modules():
    return {
        config: {
            "__opts__": {
                "rvm.runas": "deploy",
                "rvm.path": None,
                "grains": {"platform": "ubuntu"},
            },
            "__grains__": {"platform": "ubuntu", "os_family": "Debian"},
        }
    }


def test_option_from_opts():
    assert config.option("rvm.runas") == "deploy"


def test_option_from_grains():
    assert config.option("platform") == "ubuntu"
    assert config.option("platform", omit_grains=True) == ""


def test_option_omit_opts_falls_back_to_defaults():
    assert config.option("rvm.runas", omit_opts=True) is None


def test_option_default():
    assert config.option("rvm.missing", default="x") == "x"
    assert config.option("rvm.missing") == ""


def test_option_wildcard():
    assert config.option("rvm.*", wildcard=True) == {
        "rvm.runas": "deploy",
        "rvm.path": None,
    }
    assert config.option("nope.*", wildcard=True) == {}


def test_get():
    assert config.get("grains:platform") == "ubuntu"
    assert config.get("os_family") == "Debian"
    assert config.get("grains:nope", default="x") == "x"
    assert config.get("rvm.path") is None
