"""
A module for shelling out.
"""

import getpass
import logging
import os
import shlex
import shutil
import subprocess

from rvmkit._logging import LOG_LEVELS
from rvmkit.exceptions import CommandExecutionError

# Define the module's virtual name
__virtualname__ = "cmd"

log = logging.getLogger(__name__)


# Overwriting the cmd python module makes debugging modules with pdb a bit
# harder so lets do it this way instead.
def __virtual__():
    return __virtualname__


def _log_cmd(cmd):
    if isinstance(cmd, (tuple, list)):
        return cmd[0].strip()
    else:
        return str(cmd).split()[0].strip()


def _check_loglevel(level="info"):
    """
    Retrieve the level code for use in logging.Logger.log().
    """
    try:
        level = level.lower()
        if level == "quiet":
            return None
        return LOG_LEVELS[level]
    except (AttributeError, KeyError):
        log.error(
            "Invalid output_loglevel '%s'. Valid levels are: %s. Falling "
            "back to 'info'.",
            level,
            ", ".join(sorted(LOG_LEVELS, reverse=True)),
        )
        return LOG_LEVELS["info"]


def _runas_cmd(cmd, runas, python_shell):
    """
    Wrap ``cmd`` so it runs in a login shell of ``runas``
    """
    if python_shell or not isinstance(cmd, (list, tuple)):
        cmd_str = cmd if isinstance(cmd, str) else " ".join(cmd)
    else:
        cmd_str = " ".join(shlex.quote(str(arg)) for arg in cmd)
    return ["su", "-l", runas, "-c", cmd_str]


def run_all(
    cmd,
    cwd=None,
    stdin=None,
    runas=None,
    python_shell=False,
    env=None,
    rstrip=True,
    output_loglevel="debug",
    timeout=None,
    ignore_retcode=False,
    **kwargs,
):
    """
    Execute the passed command and return a dict of return data

    :param cmd: The command to run, a list of arguments or a string.

    :param str cwd: The directory from which to execute the command.

    :param str stdin: A string of standard input can be specified for the
        command to be run using the ``stdin`` parameter.

    :param str runas: Specify an alternate user to run the command. The
        command runs through ``su -l`` so the user's login environment, where
        a per-user rvm hooks itself in, is loaded.

    :param bool python_shell: If ``False``, let python handle the positional
        arguments. Set to ``True`` to use shell features, such as pipes or
        redirection.

    :param dict env: Environment variables to be set prior to execution.

    :param bool rstrip: Strip all whitespace off the end of output before it
        is returned.

    :param str output_loglevel: Control the loglevel at which the output from
        the command is logged. Set to ``quiet`` to suppress logging.

    :param int timeout: A timeout in seconds for the executed process to
        return.

    :param bool ignore_retcode: If the exit code of the command is nonzero,
        this is treated as an error condition, and the output from the command
        will be logged. However, there are some cases where
        programs use the return code for signaling and a nonzero exit code
        doesn't necessarily mean failure. Pass this argument as ``True`` to
        skip logging the output if the command has a nonzero exit code.

    CLI Example:

    .. code-block:: bash

        rvmkit-call cmd.run_all "ls -l | awk '/foo/{print \\$2}'" python_shell=True
    """
    lvl = _check_loglevel(output_loglevel)

    if runas and runas == getpass.getuser():
        runas = None

    if isinstance(cmd, str) and not python_shell:
        cmd = shlex.split(cmd)

    if runas:
        proc_cmd = _runas_cmd(cmd, runas, python_shell)
        use_shell = False
    else:
        proc_cmd = cmd
        use_shell = bool(python_shell)

    if lvl is not None:
        log.info(
            "Executing command %s %sin directory '%s'",
            _log_cmd(cmd),
            f"as user '{runas}' " if runas else "",
            cwd or os.getcwd(),
        )

    run_env = os.environ.copy()
    if env:
        if not isinstance(env, dict):
            raise CommandExecutionError("Invalid input: env must be a dict")
        run_env.update({str(key): str(val) for key, val in env.items()})

    try:
        proc = subprocess.run(
            proc_cmd,
            cwd=cwd,
            input=stdin,
            env=run_env,
            shell=use_shell,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            timeout=timeout,
            universal_newlines=True,
            check=False,
        )
    except subprocess.TimeoutExpired as exc:
        raise CommandExecutionError(
            "Unable to run command '{}' Reason: Timed out after {} seconds".format(
                cmd if lvl is not None else "REDACTED", exc.timeout
            )
        )
    except OSError as exc:
        raise CommandExecutionError(
            "Unable to run command '{}' with the context '{}', reason: {}".format(
                cmd if lvl is not None else "REDACTED",
                {"cwd": cwd, "runas": runas, "shell": use_shell},
                exc,
            )
        )

    ret = {
        "retcode": proc.returncode,
        "stdout": proc.stdout or "",
        "stderr": proc.stderr or "",
    }
    if rstrip:
        ret["stdout"] = ret["stdout"].rstrip()
        ret["stderr"] = ret["stderr"].rstrip()

    if ret["retcode"] != 0 and not ignore_retcode:
        if lvl is not None and lvl < LOG_LEVELS["error"]:
            lvl = LOG_LEVELS["error"]
        msg = "Command '{}' failed with return code: {}".format(
            _log_cmd(cmd), ret["retcode"]
        )
        log.error(msg)
    if lvl is not None:
        if ret["stdout"]:
            log.log(lvl, "stdout: %s", ret["stdout"])
        if ret["stderr"]:
            log.log(lvl, "stderr: %s", ret["stderr"])
        if ret["retcode"]:
            log.log(lvl, "retcode: %s", ret["retcode"])
    return ret


def which(cmd):
    """
    Returns the path of an executable available on the host, None otherwise

    CLI Example:

    .. code-block:: bash

        rvmkit-call cmd.which cat
    """
    return shutil.which(cmd)


def has_exec(cmd):
    """
    Returns true if the executable is available on the host, false otherwise

    CLI Example:

    .. code-block:: bash

        rvmkit-call cmd.has_exec cat
    """
    return which(cmd) is not None
