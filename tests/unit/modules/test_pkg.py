"""
Test cases for the pkg and lowpkg modules
"""

import os

import pytest

import rvmkit.modules.aptpkg as aptpkg
import rvmkit.modules.dpkg_lowpkg as dpkg_lowpkg
import rvmkit.modules.rpm_lowpkg as rpm_lowpkg
import rvmkit.modules.yumpkg as yumpkg
import rvmkit.modules.zypperpkg as zypperpkg
from rvmkit.exceptions import CommandExecutionError

from unittest.mock import MagicMock, patch

DPKG_QUERY = (
    "installed\tbison\t2:3.8.2+dfsg-1\n"
    "installed\tzlib1g:amd64\t1:1.2.13.dfsg-1\n"
    "not-installed\tautoconf\t\n"
)

RPM_QUERY = "gcc-c++ 11.4.1-2.el9\npackage autoconf is not installed\n"


@pytest.fixture
def configure_loader_modules():
    debian = {"os_family": "Debian"}
    redhat = {"os_family": "RedHat"}
    return {
        aptpkg: {"__grains__": debian},
        dpkg_lowpkg: {"__grains__": debian},
        rpm_lowpkg: {"__grains__": redhat},
        yumpkg: {"__grains__": redhat},
        zypperpkg: {
            "__grains__": {"os_family": "Suse"},
            "__salt__": {"cmd.has_exec": MagicMock(return_value=True)},
        },
    }


def _run_all(stdout="", stderr="", retcode=0):
    return MagicMock(
        return_value={"stdout": stdout, "stderr": stderr, "retcode": retcode}
    )


def test_virtual():
    assert aptpkg.__virtual__() == "pkg"
    assert dpkg_lowpkg.__virtual__() == "lowpkg"
    assert rpm_lowpkg.__virtual__() == "lowpkg"
    assert yumpkg.__virtual__() == "pkg"
    assert zypperpkg.__virtual__() == "pkg"


def test_virtual_wrong_os_family():
    with patch.dict(aptpkg.__grains__, {"os_family": "RedHat"}):
        assert aptpkg.__virtual__()[0] is False
    with patch.dict(yumpkg.__grains__, {"os_family": "Debian"}):
        assert yumpkg.__virtual__()[0] is False
    with patch.dict(zypperpkg.__salt__, {"cmd.has_exec": MagicMock(return_value=False)}):
        assert zypperpkg.__virtual__() == (
            False,
            "Module zypper: zypper package manager not found",
        )


def test_dpkg_list_pkgs():
    mock = _run_all(DPKG_QUERY, retcode=1)
    with patch.dict(dpkg_lowpkg.__salt__, {"cmd.run_all": mock}):
        assert dpkg_lowpkg.list_pkgs("bison", "zlib1g", "autoconf") == {
            "bison": "2:3.8.2+dfsg-1",
            "zlib1g": "1:1.2.13.dfsg-1",
        }
    args, kwargs = mock.call_args
    assert args[0][-3:] == ["bison", "zlib1g", "autoconf"]
    assert kwargs["ignore_retcode"] is True


def test_dpkg_version():
    with patch.dict(dpkg_lowpkg.__salt__, {"cmd.run_all": _run_all(DPKG_QUERY)}):
        assert dpkg_lowpkg.version("bison") == "2:3.8.2+dfsg-1"
        assert dpkg_lowpkg.version("autoconf") == ""


def test_rpm_list_pkgs():
    mock = _run_all(RPM_QUERY, retcode=1)
    with patch.dict(rpm_lowpkg.__salt__, {"cmd.run_all": mock}):
        assert rpm_lowpkg.list_pkgs("gcc-c++", "autoconf") == {
            "gcc-c++": "11.4.1-2.el9"
        }
    assert mock.call_args[0][0][:4] == ["rpm", "-q", "gcc-c++", "autoconf"]


def test_rpm_list_all_pkgs():
    mock = _run_all("zlib 1.2.11-40.el9\n")
    with patch.dict(rpm_lowpkg.__salt__, {"cmd.run_all": mock}):
        assert rpm_lowpkg.list_pkgs() == {"zlib": "1.2.11-40.el9"}
    assert mock.call_args[0][0][:2] == ["rpm", "-qa"]


@pytest.mark.parametrize("pkg_mod", [aptpkg, yumpkg, zypperpkg])
def test_install_already_installed(pkg_mod):
    run_all = MagicMock()
    with patch.dict(
        pkg_mod.__salt__,
        {"lowpkg.version": MagicMock(return_value="1.0"), "cmd.run_all": run_all},
    ):
        assert pkg_mod.install("bison") == {}
    run_all.assert_not_called()


@pytest.mark.parametrize("pkg_mod", [aptpkg, yumpkg, zypperpkg])
def test_install(pkg_mod):
    run_all = _run_all()
    with patch.dict(
        pkg_mod.__salt__,
        {
            "lowpkg.version": MagicMock(side_effect=["", "3.8.2"]),
            "cmd.run_all": run_all,
            "cmd.has_exec": MagicMock(return_value=False),
        },
    ):
        assert pkg_mod.install("bison") == {"bison": {"old": "", "new": "3.8.2"}}
    assert run_all.call_args[0][0][-1] == "bison"


@pytest.mark.parametrize("pkg_mod", [aptpkg, yumpkg, zypperpkg])
def test_install_failure(pkg_mod):
    with patch.dict(
        pkg_mod.__salt__,
        {
            "lowpkg.version": MagicMock(return_value=""),
            "cmd.run_all": _run_all(stderr="Unable to locate package bogus", retcode=100),
            "cmd.has_exec": MagicMock(return_value=False),
        },
    ):
        with pytest.raises(CommandExecutionError) as excinfo:
            pkg_mod.install("bogus")
    assert excinfo.value.info == {
        "errors": ["Unable to locate package bogus"],
        "changes": {},
    }


def test_apt_install_command():
    run_all = _run_all()
    with patch.dict(
        aptpkg.__salt__,
        {
            "lowpkg.version": MagicMock(side_effect=["", "1.0"]),
            "cmd.run_all": run_all,
        },
    ):
        aptpkg.install("bison", refresh=True)
    update, install = run_all.call_args_list
    assert update[0][0] == ["apt-get", "-q", "update"]
    assert install[0][0][:3] == ["apt-get", "-q", "-y"]
    assert install[1]["env"] == aptpkg.DPKG_ENV_VARS


def test_apt_init_exports_env():
    with patch.dict("os.environ", {}, clear=True):
        aptpkg.__init__({})
        assert os.environ["DEBIAN_FRONTEND"] == "noninteractive"


def test_yum_prefers_dnf():
    run_all = _run_all()
    with patch.dict(
        yumpkg.__salt__,
        {
            "lowpkg.version": MagicMock(side_effect=["", "11.4.1"]),
            "cmd.run_all": run_all,
            "cmd.has_exec": MagicMock(return_value=True),
        },
    ):
        yumpkg.install("gcc-c++")
    assert run_all.call_args[0][0] == ["dnf", "-y", "install", "gcc-c++"]
    assert yumpkg.__context__["yum_bin"] == "dnf"


def test_zypper_install_command():
    run_all = _run_all()
    with patch.dict(
        zypperpkg.__salt__,
        {
            "lowpkg.version": MagicMock(side_effect=["", "8.1"]),
            "cmd.run_all": run_all,
        },
    ):
        zypperpkg.install("readline-devel")
    assert run_all.call_args[0][0] == [
        "zypper",
        "--non-interactive",
        "install",
        "--auto-agree-with-licenses",
        "readline-devel",
    ]
