"""
Query RVM, the Ruby Version Manager.

Every function reads rvm's state fresh, nothing is cached between calls.
When the rvm binary is missing, the functions raise
:class:`~rvmkit.exceptions.RvmUnavailableError` instead of reporting that
nothing is installed.
"""

import logging
import os
import re

from rvmkit.exceptions import CommandExecutionError, RvmUnavailableError

__func_alias__ = {"do_": "do"}

log = logging.getLogger(__name__)

RVM_SYSTEM_PATH = "/usr/local/rvm/bin/rvm"

# "   name", or "=> name" for the gemset in use
_GEMSET_LINE_RE = re.compile(r"^(?:=>|  ) ([^ (]\S*)")


def __virtual__():
    """
    Always load. Without rvm the module still loads so callers get a clear
    error from every function instead of a missing function.
    """
    if not is_installed():
        log.warning(
            "Missing 'rvm', looked for it at %s. Queries about rubies will fail.",
            _get_rvm_location(_runas(None))[0],
        )
    return True


def _runas(runas):
    if runas is None:
        runas = __salt__["config.option"]("rvm.runas")
    return runas or None


def _get_rvm_location(runas=None):
    rvmpath = __salt__["config.option"]("rvm.path")
    if rvmpath:
        return [os.path.expanduser(rvmpath)]
    if runas:
        runas_home = os.path.expanduser(f"~{runas}")
        rvmpath = f"{runas_home}/.rvm/bin/rvm"
        if os.path.exists(rvmpath):
            return [rvmpath]
    return [RVM_SYSTEM_PATH]


def _rvm(command, runas=None, cwd=None, env=None):
    runas = _runas(runas)
    if not is_installed(runas):
        raise RvmUnavailableError(
            "rvm is not installed at {}".format(_get_rvm_location(runas)[0])
        )

    cmd = _get_rvm_location(runas) + command

    ret = __salt__["cmd.run_all"](
        cmd, runas=runas, cwd=cwd, python_shell=False, env=env
    )

    if ret["retcode"] == 0:
        return ret["stdout"]
    raise CommandExecutionError(
        ret["stderr"] or "rvm {} failed".format(" ".join(command)),
        info={"retcode": ret["retcode"]},
    )


def _rvm_do(ruby, command, runas=None, cwd=None, env=None):
    return _rvm([ruby or "default", "do"] + command, runas=runas, cwd=cwd, env=env)


def _lines(output):
    return [line.strip() for line in output.splitlines() if line.strip()]


def is_installed(runas=None):
    """
    Check whether RVM is installed.

    CLI Example:

    .. code-block:: bash

        rvmkit-call rvm.is_installed
    """
    runas = _runas(runas)
    return bool(__salt__["cmd.has_exec"](_get_rvm_location(runas)[0]))


def list_strings(runas=None):
    """
    List the installed rubies as ruby strings, one per installed patch
    level.

    runas
        The user under which to run rvm. If not specified, then rvm will be
        run as the user under which rvmkit is running.

    CLI Example:

    .. code-block:: bash

        rvmkit-call rvm.list_strings
    """
    return _lines(_rvm(["list", "strings"], runas=runas))


def list_known_strings(runas=None):
    """
    List the ruby strings rvm knows how to install.

    CLI Example:

    .. code-block:: bash

        rvmkit-call rvm.list_known_strings
    """
    return _lines(_rvm(["list", "known_strings"], runas=runas))


def list_default(runas=None):
    """
    Return the default ruby string, or ``None`` if no default is set.

    CLI Example:

    .. code-block:: bash

        rvmkit-call rvm.list_default
    """
    ret = _rvm(["list", "default", "string"], runas=runas).strip()
    return ret or None


def do_(ruby, command, runas=None, cwd=None, env=None):
    """
    Execute a command in an RVM controlled environment.

    ruby
        Which ruby to use

    command
        The rvm command to execute, a list of arguments or a string

    runas
        The user under which to run rvm. If not specified, then rvm will be
        run as the user under which rvmkit is running.

    cwd
        The directory from which to run the rvm command. Defaults to the
        user's home directory.

    CLI Example:

    .. code-block:: bash

        rvmkit-call rvm.do 2.0.0 <command>
    """
    if isinstance(command, str):
        command = command.split()
    return _rvm_do(ruby, list(command), runas=runas, cwd=cwd, env=env)


def gemset_list(ruby="default", runas=None):
    """
    List all gemsets for the given ruby.

    ruby : default
        The ruby version for which to list the gemsets

    CLI Example:

    .. code-block:: bash

        rvmkit-call rvm.gemset_list
    """
    gemsets = []
    output = _rvm_do(ruby, ["rvm", "gemset", "list"], runas=runas)
    for line in output.splitlines():
        match = _GEMSET_LINE_RE.match(line)
        if match:
            gemsets.append(match.group(1))
    return gemsets
