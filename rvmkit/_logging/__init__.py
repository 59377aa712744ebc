"""
    rvmkit._logging
    ~~~~~~~~~~~~~~~

    rvmkit's logging setup.

    The ``rvmkit._logging`` package should be imported as soon as possible
    since it registers the ``trace`` log level and the logger class which
    knows about it.
"""

from rvmkit._logging.impl import (
    DFLT_LOG_DATEFMT,
    DFLT_LOG_DATEFMT_LOGFILE,
    DFLT_LOG_FMT_CONSOLE,
    DFLT_LOG_FMT_LOGFILE,
    LOG_LEVELS,
    SORTED_LEVEL_NAMES,
    get_console_handler,
    get_logfile_handler,
    get_logging_level_from_string,
    get_logging_options_dict,
    get_lowest_log_level,
    is_console_handler_configured,
    is_logfile_handler_configured,
    set_logging_options_dict,
    set_lowest_log_level,
    set_lowest_log_level_by_opts,
    setup_console_handler,
    setup_log_granular_levels,
    setup_logfile_handler,
    setup_logging,
    shutdown_console_handler,
    shutdown_logfile_handler,
    shutdown_logging,
)
