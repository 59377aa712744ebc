"""
This module is a central location for all rvmkit exceptions
"""

import copy
import logging

log = logging.getLogger(__name__)


def _nested_output(obj):
    """
    Serialize obj and format for output
    """
    # Explicit late import to avoid circular import
    from rvmkit.output import NestedOutputter

    return NestedOutputter().format(obj).rstrip()


def get_error_message(error):
    """
    Get human readable message from Python Exception
    """
    return error.args[0] if error.args else ""


class RvmKitException(Exception):
    """
    Base exception class; all rvmkit-specific exceptions should subclass this
    """

    def __init__(self, message=""):
        if not isinstance(message, str):
            message = str(message)
        super().__init__(message)
        self.message = self.strerror = message


class CommandNotFoundError(RvmKitException):
    """
    Used in modules or grains when a required binary is not available
    """


class RvmUnavailableError(CommandNotFoundError):
    """
    The rvm binary could not be found, so no question about installed, known
    or default rubies can be answered
    """


class CommandExecutionError(RvmKitException):
    """
    Used when a module runs a command which returns an error and wants
    to show the user the output gracefully instead of dying
    """

    def __init__(self, message="", info=None):
        if isinstance(message, Exception):
            message = get_error_message(message) or str(message)
        exc_str_prefix = str(message)
        self.error = exc_str_prefix
        self.info = info
        if self.info:
            if exc_str_prefix:
                if exc_str_prefix[-1] not in ".?!":
                    exc_str_prefix += "."
                exc_str_prefix += " "

            exc_str_prefix += "Additional info follows:\n\n"
            exc_str = exc_str_prefix + _nested_output(self.info)

            # Keep a version of the message without the changes, those are
            # reported separately by callers which track them.
            if isinstance(self.info, dict):
                info_without_changes = copy.deepcopy(self.info)
                info_without_changes.pop("changes", None)
                if info_without_changes:
                    self.strerror_without_changes = exc_str_prefix + _nested_output(
                        info_without_changes
                    )
                else:
                    self.strerror_without_changes = self.error
            else:
                self.strerror_without_changes = exc_str
        else:
            self.strerror_without_changes = exc_str = self.error

        super().__init__(exc_str)


class DefaultRubyNotSetError(CommandExecutionError):
    """
    A ruby string referenced ``default`` but rvm has no default ruby set
    """


class LoaderError(RvmKitException):
    """
    Problems loading execution modules
    """


class RvmKitInvocationError(RvmKitException, TypeError):
    """
    Used when the wrong number of arguments are sent to modules or invalid
    arguments are specified on the command line
    """


class RvmKitConfigurationError(RvmKitException):
    """
    Configuration error
    """
