"""
Support for APT (Advanced Packaging Tool)
"""

import logging
import os

from rvmkit.exceptions import CommandExecutionError

log = logging.getLogger(__name__)

DPKG_ENV_VARS = {
    "APT_LISTBUGS_FRONTEND": "none",
    "APT_LISTCHANGES_FRONTEND": "none",
    "DEBIAN_FRONTEND": "noninteractive",
    "UCF_FORCE_CONFFOLD": "1",
}

# Define the module's virtual name
__virtualname__ = "pkg"


def __virtual__():
    """
    Confirm this module is on a Debian-based system
    """
    if __grains__.get("os_family") == "Debian":
        return __virtualname__
    return False, "The pkg module could not be loaded: unsupported OS family"


def __init__(opts):
    """
    For Debian and derivative systems, set up
    a few env variables to keep apt happy and
    non-interactive.
    """
    if __virtual__() == __virtualname__:
        # Export these puppies so they persist
        os.environ.update(DPKG_ENV_VARS)


def version(name):
    """
    Returns a string representing the package version or an empty string if
    not installed.

    CLI Example:

    .. code-block:: bash

        rvmkit-call pkg.version bison
    """
    return __salt__["lowpkg.version"](name)


def install(name, refresh=False):
    """
    Install the passed package, unless it is installed already. Add
    ``refresh=True`` to update the apt database first.

    Returns a dict containing the new package names and versions::

        {'<package>': {'old': '<old-version>',
                       'new': '<new-version>'}}

    CLI Example:

    .. code-block:: bash

        rvmkit-call pkg.install bison
    """
    old = version(name)
    if old:
        log.debug("Package %s is already installed at version %s", name, old)
        return {}

    if refresh:
        __salt__["cmd.run_all"](
            ["apt-get", "-q", "update"], env=DPKG_ENV_VARS, python_shell=False
        )

    cmd = [
        "apt-get",
        "-q",
        "-y",
        "-o",
        "DPkg::Options::=--force-confold",
        "install",
        name,
    ]
    out = __salt__["cmd.run_all"](
        cmd, env=DPKG_ENV_VARS, python_shell=False, output_loglevel="trace"
    )
    new = version(name)
    if out["retcode"] != 0 or not new:
        raise CommandExecutionError(
            "Error occurred installing package(s)",
            info={"errors": [out["stderr"] or out["stdout"]], "changes": {}},
        )
    return {name: {"old": old, "new": new}}
