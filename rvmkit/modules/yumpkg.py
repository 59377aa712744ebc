"""
Support for YUM/DNF
"""

import logging

from rvmkit.exceptions import CommandExecutionError

log = logging.getLogger(__name__)

# Define the module's virtual name
__virtualname__ = "pkg"


def __virtual__():
    """
    Confine this module to yum based systems
    """
    if __grains__.get("os_family") == "RedHat":
        return __virtualname__
    return (False, "Module yumpkg: no yum based system detected")


def _yum():
    """
    Determine package manager name (yum or dnf), depending on the executable
    existence.
    """
    contextkey = "yum_bin"
    if contextkey not in __context__:
        if __salt__["cmd.has_exec"]("dnf"):
            __context__[contextkey] = "dnf"
        else:
            __context__[contextkey] = "yum"
    return __context__[contextkey]


def version(name):
    """
    Returns a string representing the package version or an empty string if
    not installed.

    CLI Example:

    .. code-block:: bash

        rvmkit-call pkg.version gcc-c++
    """
    return __salt__["lowpkg.version"](name)


def install(name, refresh=False):
    """
    Install the passed package, unless it is installed already. Add
    ``refresh=True`` to clean the yum database before executing.

    Returns a dict containing the new package names and versions::

        {'<package>': {'old': '<old-version>',
                       'new': '<new-version>'}}

    CLI Example:

    .. code-block:: bash

        rvmkit-call pkg.install gcc-c++
    """
    old = version(name)
    if old:
        log.debug("Package %s is already installed at version %s", name, old)
        return {}

    if refresh:
        __salt__["cmd.run_all"]([_yum(), "clean", "expire-cache"], python_shell=False)

    out = __salt__["cmd.run_all"](
        [_yum(), "-y", "install", name], python_shell=False, output_loglevel="trace"
    )
    new = version(name)
    if out["retcode"] != 0 or not new:
        raise CommandExecutionError(
            "Error occurred installing package(s)",
            info={"errors": [out["stderr"] or out["stdout"]], "changes": {}},
        )
    return {name: {"old": old, "new": new}}
