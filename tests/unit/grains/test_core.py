import pytest

import rvmkit.grains.core as core

from unittest.mock import MagicMock, patch


def _linux(distro_id, name="", version="", codename=""):
    return (
        patch("platform.system", MagicMock(return_value="Linux")),
        patch("platform.release", MagicMock(return_value="6.1.0")),
        patch("platform.machine", MagicMock(return_value="x86_64")),
        patch("distro.id", MagicMock(return_value=distro_id)),
        patch("distro.name", MagicMock(return_value=name)),
        patch("distro.version", MagicMock(return_value=version)),
        patch("distro.codename", MagicMock(return_value=codename)),
    )


def _os_data(distro_id, **kwargs):
    patches = _linux(distro_id, **kwargs)
    for patcher in patches:
        patcher.start()
    try:
        return core.os_data()
    finally:
        for patcher in patches:
            patcher.stop()


def test_ubuntu():
    grains = _os_data("ubuntu", name="Ubuntu", version="22.04", codename="jammy")
    assert grains == {
        "kernel": "Linux",
        "kernelrelease": "6.1.0",
        "cpuarch": "x86_64",
        "platform": "ubuntu",
        "os": "Ubuntu",
        "os_family": "Debian",
        "osrelease": "22.04",
        "oscodename": "jammy",
        "osfullname": "Ubuntu",
    }


@pytest.mark.parametrize(
    "distro_id,platform,os_family",
    [
        ("debian", "debian", "Debian"),
        ("linuxmint", "mint", "Debian"),
        ("centos", "centos", "RedHat"),
        ("rhel", "redhat", "RedHat"),
        ("fedora", "fedora", "RedHat"),
        ("sles", "suse", "Suse"),
        ("opensuse-leap", "suse", "Suse"),
    ],
)
def test_platform_and_os_family(distro_id, platform, os_family):
    grains = _os_data(distro_id)
    assert grains["platform"] == platform
    assert grains["os_family"] == os_family


def test_unknown_distribution():
    grains = _os_data("Void", name="Void Linux")
    assert grains["platform"] == "void"
    assert grains["os"] == "Void Linux"
    assert grains["os_family"] == "Void Linux"


def test_not_linux():
    with patch("platform.system", MagicMock(return_value="Darwin")), patch(
        "platform.release", MagicMock(return_value="23.1.0")
    ):
        grains = core.os_data()
    assert grains["platform"] == "darwin"
    assert grains["os_family"] == "Darwin"
    assert grains["osrelease"] == "23.1.0"
