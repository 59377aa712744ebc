"""
Support for rpm
"""

import logging

log = logging.getLogger(__name__)

# Define the module's virtual name
__virtualname__ = "lowpkg"


def __virtual__():
    """
    Confine this module to rpm based systems
    """
    if __grains__.get("os_family") in ("RedHat", "Suse"):
        return __virtualname__
    return (
        False,
        "The rpm execution module failed to load: only available on redhat "
        "or suse based systems.",
    )


def list_pkgs(*packages):
    """
    List the packages currently installed in a dict::

        {'<package_name>': '<version>'}

    CLI Example:

    .. code-block:: bash

        rvmkit-call lowpkg.list_pkgs
        rvmkit-call lowpkg.list_pkgs gcc-c++ zlib-devel
    """
    cmd = ["rpm"]
    if packages:
        cmd.append("-q")
        cmd.extend(packages)
    else:
        cmd.append("-qa")
    cmd.extend(["--queryformat", r"%{NAME} %{VERSION}-%{RELEASE}\n"])
    out = __salt__["cmd.run_all"](
        cmd, python_shell=False, output_loglevel="trace", ignore_retcode=True
    )

    pkgs = {}
    for line in out["stdout"].splitlines():
        # rpm reports missing packages as "package foo is not installed"
        if "is not installed" in line:
            continue
        comps = line.split()
        if len(comps) != 2:
            continue
        pkgs[comps[0]] = comps[1]
    return pkgs


def version(name):
    """
    Return the installed version of a package, or an empty string if it is
    not installed.

    CLI Example:

    .. code-block:: bash

        rvmkit-call lowpkg.version gcc-c++
    """
    return list_pkgs(name).get(name, "")
