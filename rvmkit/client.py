"""
The client used to call rvmkit execution modules from python code
"""

import inspect
import logging

import rvmkit.config
import rvmkit.loader
from rvmkit.exceptions import RvmKitInvocationError

log = logging.getLogger(__name__)


class Caller:
    """
    Create an object used to call execution module functions directly

    .. code-block:: python

        import rvmkit.client
        caller = rvmkit.client.Caller()
        caller.cmd('rvm_helpers.ruby_installed', 'ruby-2.0.0')

    An already loaded options dictionary can be passed in with ``opts``.
    """

    def __init__(self, c_path=None, opts=None):
        if opts is None:
            opts = rvmkit.config.rvmkit_config(c_path)
        self.opts = opts
        self.opts["grains"] = rvmkit.loader.grains(self.opts)
        self.functions = rvmkit.loader.minion_mods(self.opts)
        # Load the rvm module right away so a missing rvm is reported at
        # startup, not on the first query
        if "rvm.is_installed" not in self.functions:
            log.debug("The rvm module is not available")

    def cmd(self, fun, *args, **kwargs):
        """
        Call an execution module with the given arguments and keyword arguments

        .. code-block:: python

            caller.cmd('rvm_helpers.env_exists', 'ruby-2.0.0@myapp')

            caller.cmd('rvm_helpers.ruby_dependencies', 'ruby-head',
                       platform='ubuntu')
        """
        return self.function(fun, *args, **kwargs)

    def function(self, fun, *args, **kwargs):
        """
        Call a single function
        """
        try:
            func = self.functions[fun]
        except KeyError as exc:
            raise RvmKitInvocationError(
                "Function {} is not available: {}".format(fun, exc.args[0])
            ) from None

        try:
            inspect.signature(func).bind(*args, **kwargs)
        except TypeError as exc:
            raise RvmKitInvocationError(
                "Passed invalid arguments to {}: {}\n{}".format(
                    fun, exc, inspect.getdoc(func) or ""
                )
            ) from None
        log.debug("Calling %s with args=%s kwargs=%s", fun, args, kwargs)
        return func(*args, **kwargs)
