"""
Support for DEB packages
"""

import logging

log = logging.getLogger(__name__)

# Define the module's virtual name
__virtualname__ = "lowpkg"


def __virtual__():
    """
    Confirm this module is on a Debian based system
    """
    if __grains__.get("os_family") == "Debian":
        return __virtualname__
    return (
        False,
        "The dpkg execution module cannot be loaded: "
        "only works on Debian family systems.",
    )


def list_pkgs(*packages):
    """
    List the packages currently installed in a dict::

        {'<package_name>': '<version>'}

    Packages dpkg has never heard of are left out instead of failing.

    CLI Example:

    .. code-block:: bash

        rvmkit-call lowpkg.list_pkgs
        rvmkit-call lowpkg.list_pkgs bison zlib1g-dev
    """
    cmd = [
        "dpkg-query",
        "-f=${db:Status-Status}\t${binary:Package}\t${Version}\n",
        "-W",
    ] + list(packages)
    out = __salt__["cmd.run_all"](
        cmd, python_shell=False, output_loglevel="trace", ignore_retcode=True
    )

    pkgs = {}
    for line in out["stdout"].splitlines():
        try:
            status, name, version = line.split("\t")
        except ValueError:
            continue
        if status == "installed":
            # Strip the architecture, ie: zlib1g:amd64
            pkgs[name.split(":", 1)[0]] = version
    return pkgs


def version(name):
    """
    Return the installed version of a package, or an empty string if it is
    not installed.

    CLI Example:

    .. code-block:: bash

        rvmkit-call lowpkg.version bison
    """
    return list_pkgs(name).get(name, "")
