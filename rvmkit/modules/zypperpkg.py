"""
Package support for openSUSE via the zypper package manager
"""

import logging

from rvmkit.exceptions import CommandExecutionError

log = logging.getLogger(__name__)

# Define the module's virtual name
__virtualname__ = "pkg"

ZYPPER_CMD = ["zypper", "--non-interactive"]


def __virtual__():
    """
    Set the virtual pkg module if the os is openSUSE
    """
    if __grains__.get("os_family", "") != "Suse":
        return (
            False,
            "Module zypper: non SUSE OS not supported by zypper package manager",
        )
    # Not all versions of SUSE use zypper, check that it is available
    if not __salt__["cmd.has_exec"]("zypper"):
        return (False, "Module zypper: zypper package manager not found")
    return __virtualname__


def version(name):
    """
    Returns a string representing the package version or an empty string if
    not installed.

    CLI Example:

    .. code-block:: bash

        rvmkit-call pkg.version readline-devel
    """
    return __salt__["lowpkg.version"](name)


def install(name, refresh=False):
    """
    Install the passed package, unless it is installed already. Add
    ``refresh=True`` to force a refresh of the repositories first.

    Returns a dict containing the new package names and versions::

        {'<package>': {'old': '<old-version>',
                       'new': '<new-version>'}}

    CLI Example:

    .. code-block:: bash

        rvmkit-call pkg.install readline-devel
    """
    old = version(name)
    if old:
        log.debug("Package %s is already installed at version %s", name, old)
        return {}

    if refresh:
        __salt__["cmd.run_all"](ZYPPER_CMD + ["refresh", "--force"], python_shell=False)

    out = __salt__["cmd.run_all"](
        ZYPPER_CMD + ["install", "--auto-agree-with-licenses", name],
        python_shell=False,
        output_loglevel="trace",
    )
    new = version(name)
    if out["retcode"] != 0 or not new:
        raise CommandExecutionError(
            "Error occurred installing package(s)",
            info={"errors": [out["stderr"] or out["stdout"]], "changes": {}},
        )
    return {name: {"old": old, "new": new}}
