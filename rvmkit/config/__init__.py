"""
All rvmkit configuration loading and defaults should be in this module
"""

import logging
import os
import sys
from copy import deepcopy

import yaml

import rvmkit.defaults.exitcodes
import rvmkit.exceptions
from rvmkit._logging import (
    DFLT_LOG_DATEFMT,
    DFLT_LOG_DATEFMT_LOGFILE,
    DFLT_LOG_FMT_CONSOLE,
    DFLT_LOG_FMT_LOGFILE,
)

log = logging.getLogger(__name__)

CONFIG_DIR = os.path.join(os.sep, "etc", "rvmkit")

VALID_OPTS = {
    # The path to the configuration file which was loaded
    "conf_file": str,
    # The level of messages to send to the console
    "log_level": str,
    # The location of the log file, no file logging when unset
    "log_file": (type(None), str),
    # The level of messages to send to the log file, defaults to log_level
    "log_level_logfile": (type(None), str),
    "log_fmt_console": str,
    "log_fmt_logfile": str,
    "log_datefmt": str,
    "log_datefmt_logfile": str,
    # Per logger overrides, ie: {"rvmkit.loader": "debug"}
    "log_granular_levels": dict,
    # Extra directories searched for execution modules
    "module_dirs": list,
    # Execution modules which should never be loaded
    "disable_modules": list,
    # Static grains which take precedence over the detected ones
    "grains": dict,
    # The user rvm commands run as. A per-user rvm install lives in
    # ~<user>/.rvm, a system-wide one in /usr/local/rvm
    "rvm.runas": (type(None), str),
    # Explicit location of the rvm binary
    "rvm.path": (type(None), str),
    # Outputter used by rvmkit-call
    "output": str,
}

DEFAULT_OPTS = {
    "conf_file": os.path.join(CONFIG_DIR, "rvmkit"),
    "log_level": "warning",
    "log_file": None,
    "log_level_logfile": None,
    "log_fmt_console": DFLT_LOG_FMT_CONSOLE,
    "log_fmt_logfile": DFLT_LOG_FMT_LOGFILE,
    "log_datefmt": DFLT_LOG_DATEFMT,
    "log_datefmt_logfile": DFLT_LOG_DATEFMT_LOGFILE,
    "log_granular_levels": {},
    "module_dirs": [],
    "disable_modules": [],
    "grains": {},
    "rvm.runas": None,
    "rvm.path": None,
    "output": "nested",
}


def _validate_opts(opts):
    """
    Check that all of the types of values passed into the config are
    of the right types. Bad values are logged and replaced by their default.
    """

    def format_multi_opt(valid_type):
        try:
            return ", ".join(item.__name__ for item in valid_type)
        except TypeError:
            # Bare type name won't be iterable, return the name of the type
            return valid_type.__name__

    errors = []
    for key, val in opts.items():
        if key not in VALID_OPTS:
            continue
        valid_type = VALID_OPTS[key]
        if isinstance(val, valid_type):
            continue
        # Numbers are fine where strings are expected, ie: log_level: 10
        if valid_type is str and isinstance(val, (int, float)) and not isinstance(
            val, bool
        ):
            opts[key] = str(val)
            continue
        errors.append(
            "Config option '{}' with value {} has an invalid type of {}, a {} "
            "is required for this option".format(
                key, val, type(val).__name__, format_multi_opt(valid_type)
            )
        )

    for error in errors:
        log.warning(error)
    for key in [k for k in opts if k in VALID_OPTS]:
        if not isinstance(opts[key], VALID_OPTS[key]):
            opts[key] = deepcopy(DEFAULT_OPTS[key])
    return not errors


def _read_conf_file(path):
    """
    Read in a config file from a given path and process it into a dictionary
    """
    log.debug("Reading configuration from %s", path)
    with open(path, encoding="utf-8") as conf_file:
        try:
            conf_opts = yaml.safe_load(conf_file) or {}
        except yaml.YAMLError as err:
            message = f"Error parsing configuration file: {path} - {err}"
            log.error(message)
            raise rvmkit.exceptions.RvmKitConfigurationError(message)

    # only interpret documents as a valid conf, not things like strings,
    # which might have been caused by invalid yaml syntax
    if not isinstance(conf_opts, dict):
        message = (
            "Error parsing configuration file: {} - conf "
            "should be a document, not {}.".format(path, type(conf_opts))
        )
        log.error(message)
        raise rvmkit.exceptions.RvmKitConfigurationError(message)
    return conf_opts


def load_config(path, env_var, default_path=None, exit_on_config_errors=True):
    """
    Returns configuration dict from parsing either the file described by
    ``path`` or the environment variable described by ``env_var`` as YAML.
    """
    if path is None:
        # When the passed path is None, we just want the configuration
        # defaults, not actually loading the whole configuration.
        return {}

    if default_path is None:
        default_path = DEFAULT_OPTS["conf_file"]

    # Default to the environment variable path, if it exists
    env_path = os.environ.get(env_var, path)
    if not env_path or not os.path.isfile(env_path):
        env_path = path
    # If non-default path was passed explicitly, use that over the env variable
    if path != default_path:
        env_path = path

    path = env_path

    opts = {}

    if os.path.isfile(path) and os.access(path, os.R_OK):
        try:
            opts = _read_conf_file(path)
            opts["conf_file"] = path
        except rvmkit.exceptions.RvmKitConfigurationError as error:
            log.error(error)
            if exit_on_config_errors:
                sys.exit(rvmkit.defaults.exitcodes.EX_CONFIG)
    else:
        log.debug("Missing configuration file: %s", path)

    return opts


def apply_config(overrides=None, defaults=None):
    """
    Merge the passed overrides over the defaults and validate the result
    """
    if defaults is None:
        defaults = DEFAULT_OPTS

    opts = deepcopy(defaults)
    if overrides:
        opts.update(overrides)

    _validate_opts(opts)

    if opts["log_file"]:
        opts["log_file"] = os.path.expanduser(opts["log_file"])
    opts["module_dirs"] = [os.path.expanduser(path) for path in opts["module_dirs"]]
    return opts


def rvmkit_config(
    path=None, env_var="RVMKIT_CONFIG", defaults=None, ignore_config_errors=True
):
    """
    Reads in the rvmkit configuration file and merges it over the defaults

    .. code-block:: python

        import rvmkit.config
        opts = rvmkit.config.rvmkit_config('/etc/rvmkit/rvmkit')
    """
    if path is None:
        path = DEFAULT_OPTS["conf_file"]

    if not os.environ.get(env_var, None):
        # No valid setting was given using the configuration variable.
        # Lets see if RVMKIT_CONFIG_DIR is of any use
        config_dir = os.environ.get("RVMKIT_CONFIG_DIR", None)
        if config_dir:
            env_config_file_path = os.path.join(config_dir, "rvmkit")
            if os.path.isfile(env_config_file_path):
                os.environ[env_var] = env_config_file_path

    overrides = load_config(
        path,
        env_var,
        DEFAULT_OPTS["conf_file"],
        exit_on_config_errors=not ignore_config_errors,
    )
    return apply_config(overrides, defaults)
