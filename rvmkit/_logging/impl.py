"""
    rvmkit._logging.impl
    ~~~~~~~~~~~~~~~~~~~~

    rvmkit's logging implementation classes/functionality
"""

import atexit
import logging
import logging.handlers
import os
import sys

# Let's define the custom logging level before anything asks for a logger
TRACE = logging.TRACE = 5
QUIET = logging.QUIET = 1000

LOG_LEVELS = {
    "all": logging.NOTSET,
    "debug": logging.DEBUG,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
    "info": logging.INFO,
    "quiet": QUIET,
    "trace": TRACE,
    "warning": logging.WARNING,
}

# Make a list of log level names sorted by log level
SORTED_LEVEL_NAMES = [l[0] for l in sorted(LOG_LEVELS.items(), key=lambda x: x[1])]

# Default logging formatting options
DFLT_LOG_DATEFMT = "%H:%M:%S"
DFLT_LOG_DATEFMT_LOGFILE = "%Y-%m-%d %H:%M:%S"
DFLT_LOG_FMT_CONSOLE = "[%(levelname)-8s] %(message)s"
DFLT_LOG_FMT_LOGFILE = "%(asctime)s,%(msecs)03d [%(name)-17s:%(lineno)-4d][%(levelname)-8s][%(process)d] %(message)s"

logging.addLevelName(TRACE, "TRACE")
logging.addLevelName(QUIET, "QUIET")


class LoggingTraceMixin:
    """
    Simple mix-in class to add a trace method to python's logging.
    """

    def trace(self, msg, *args, **kwargs):
        self.log(getattr(logging, "TRACE", 5), msg, *args, **kwargs)


# Store an instance of the current logging logger class
LOGGING_LOGGER_CLASS = logging.getLoggerClass()


class RvmKitLoggingClass(LOGGING_LOGGER_CLASS, LoggingTraceMixin):
    """
    Logger class aware of the ``trace`` level
    """


if logging.getLoggerClass() is not RvmKitLoggingClass:
    logging.setLoggerClass(RvmKitLoggingClass)

    # Loggers created before the class was swapped, ours included, need the
    # method too.
    for _logger in list(logging.Logger.manager.loggerDict.values()):
        if isinstance(_logger, logging.Logger) and not hasattr(_logger, "trace"):
            _logger.__class__ = RvmKitLoggingClass
    if not hasattr(logging.root, "trace"):
        logging.root.__class__ = type(
            "RvmKitRootLogger", (logging.RootLogger, LoggingTraceMixin), {}
        )

log = logging.getLogger(__name__)


def get_logging_level_from_string(level):
    """
    Return an integer matching a logging level.
    Return logging.ERROR when not matching.
    Return logging.WARNING when the passed level is None
    """
    if level is None:
        return logging.WARNING

    if isinstance(level, int):
        # Level is already an integer, return it
        return level
    try:
        return LOG_LEVELS[level.lower()]
    except KeyError:
        if level:
            log.warning(
                "Could not translate the logging level string '%s' "
                "into an actual logging level integer. Returning "
                "'logging.ERROR'.",
                level,
            )
        # Couldn't translate the passed string into a logging level.
        return logging.ERROR


def get_logging_options_dict():
    """
    Return the logging options dictionary
    """
    try:
        return set_logging_options_dict.__options_dict__
    except AttributeError:
        return


def set_logging_options_dict(opts):
    """
    Create a logging related options dictionary based off of the loaded config
    """
    set_logging_options_dict.__options_dict__ = opts
    set_lowest_log_level_by_opts(opts)


def get_console_handler():
    """
    Get the console stream handler
    """
    try:
        return setup_console_handler.__handler__
    except AttributeError:
        return


def is_console_handler_configured():
    """
    Is the console stream handler configured
    """
    return get_console_handler() is not None


def shutdown_console_handler():
    """
    Shutdown the console stream handler
    """
    console_handler = get_console_handler()
    if console_handler is not None:
        logging.root.removeHandler(console_handler)
        console_handler.close()
        setup_console_handler.__handler__ = None
        atexit.unregister(shutdown_console_handler)


def setup_console_handler(log_level=None, log_format=None, date_format=None):
    """
    Setup the console stream handler
    """
    if is_console_handler_configured():
        log.warning("Console logging already configured")
        return

    atexit.register(shutdown_console_handler)

    log.trace(
        "Setting up console logging: %s",
        dict(log_level=log_level, log_format=log_format, date_format=date_format),
    )

    log_level = get_logging_level_from_string(log_level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)

    # Set the default console formatter config
    if not log_format:
        log_format = DFLT_LOG_FMT_CONSOLE
    if not date_format:
        date_format = DFLT_LOG_DATEFMT

    formatter = logging.Formatter(log_format, datefmt=date_format)

    handler.setFormatter(formatter)
    logging.root.addHandler(handler)

    setup_console_handler.__handler__ = handler


def get_logfile_handler():
    """
    Get the log file handler
    """
    try:
        return setup_logfile_handler.__handler__
    except AttributeError:
        return


def is_logfile_handler_configured():
    """
    Is the log file handler configured
    """
    return get_logfile_handler() is not None


def shutdown_logfile_handler():
    """
    Shutdown the log file handler
    """
    logfile_handler = get_logfile_handler()
    if logfile_handler is not None:
        logging.root.removeHandler(logfile_handler)
        logfile_handler.close()
        setup_logfile_handler.__handler__ = None
        atexit.unregister(shutdown_logfile_handler)


def setup_logfile_handler(log_path, log_level=None, log_format=None, date_format=None):
    """
    Setup the log file handler

    The file is opened with a ``WatchedFileHandler`` so external log rotation
    is picked up without restarting.
    """
    if is_logfile_handler_configured():
        log.warning("Logfile logging already configured")
        return

    log.trace(
        "Setting up log file logging: %s",
        dict(
            log_path=log_path,
            log_level=log_level,
            log_format=log_format,
            date_format=date_format,
        ),
    )

    if log_path is None:
        log.warning("log_path setting is set to `None`. Nothing else to do")
        return

    log_level = get_logging_level_from_string(log_level)

    log_dir = os.path.dirname(log_path)
    if log_dir and not os.path.isdir(log_dir):
        os.makedirs(log_dir, exist_ok=True)

    atexit.register(shutdown_logfile_handler)

    handler = logging.handlers.WatchedFileHandler(log_path, encoding="utf-8")
    handler.setLevel(log_level)

    if not log_format:
        log_format = DFLT_LOG_FMT_LOGFILE
    if not date_format:
        date_format = DFLT_LOG_DATEFMT_LOGFILE

    handler.setFormatter(logging.Formatter(log_format, datefmt=date_format))
    logging.root.addHandler(handler)

    setup_logfile_handler.__handler__ = handler


def setup_log_granular_levels(log_granular_levels):
    """
    Set per-logger levels
    """
    for handler_name, handler_level in log_granular_levels.items():
        _logger = logging.getLogger(handler_name)
        _logger.setLevel(get_logging_level_from_string(handler_level))


def setup_logging():
    """
    Configure the console and logfile handlers from the logging options dict
    """
    opts = get_logging_options_dict()
    if not opts:
        raise RuntimeError("The logging options have not been set yet.")
    if (
        opts.get("configure_console_logger", True)
        and not is_console_handler_configured()
    ):
        setup_console_handler(
            log_level=opts.get("log_level"),
            log_format=opts.get("log_fmt_console"),
            date_format=opts.get("log_datefmt"),
        )
    if (
        opts.get("configure_file_logger", True)
        and opts.get("log_file")
        and not is_logfile_handler_configured()
    ):
        log_file_level = opts.get("log_level_logfile") or opts.get("log_level")
        if log_file_level != "quiet":
            setup_logfile_handler(
                log_path=opts["log_file"],
                log_level=log_file_level,
                log_format=opts.get("log_fmt_logfile"),
                date_format=opts.get("log_datefmt_logfile"),
            )
    setup_log_granular_levels(opts.get("log_granular_levels") or {})


def shutdown_logging():
    if is_logfile_handler_configured():
        shutdown_logfile_handler()
    if is_console_handler_configured():
        shutdown_console_handler()


def get_lowest_log_level():
    """
    Get the lowest log level
    """
    try:
        return set_lowest_log_level.__log_level__
    except AttributeError:
        return


def set_lowest_log_level(log_level):
    """
    Set the lowest log level
    """
    set_lowest_log_level.__log_level__ = log_level
    # Additionally set the root logger to the same level.
    # Nothing below this level should be processed by python's logging machinery
    logging.root.setLevel(log_level)


def set_lowest_log_level_by_opts(opts):
    """
    Set the lowest log level by the passed config
    """
    log_levels = [get_logging_level_from_string(opts.get("log_level"))]
    if opts.get("log_file"):
        log_levels.append(
            get_logging_level_from_string(
                opts.get("log_level_logfile") or opts.get("log_level")
            )
        )
    for log_level in (opts.get("log_granular_levels") or {}).values():
        log_levels.append(get_logging_level_from_string(log_level))

    log_level = min(log_levels)
    set_lowest_log_level(log_level)
