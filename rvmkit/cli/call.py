"""
Execute an rvmkit execution module function from the command line
"""

import logging
import optparse
import sys

import rvmkit
import rvmkit._logging
import rvmkit.client
import rvmkit.config
import rvmkit.defaults.exitcodes
import rvmkit.output
from rvmkit.exceptions import RvmKitException, RvmKitInvocationError

log = logging.getLogger(__name__)

_ARG_CONSTANTS = {"True": True, "False": False, "None": None}


def _convert_arg(arg):
    """
    Only the exact spellings ``True``, ``False`` and ``None`` are converted.
    Everything else stays a string, so ruby strings like ``1.9.3`` and gemset
    names like ``on`` or ``null`` are passed through untouched.
    """
    return _ARG_CONSTANTS.get(arg, arg)


def parse_args_and_kwargs(args):
    """
    Split the command line arguments into positional and ``key=value``
    keyword arguments
    """
    _args = []
    _kwargs = {}
    for arg in args:
        key, sep, val = arg.partition("=")
        if sep and key.isidentifier():
            _kwargs[key] = _convert_arg(val)
        else:
            _args.append(_convert_arg(arg))
    return _args, _kwargs


class RvmKitCallOptionParser(optparse.OptionParser):
    """
    Parses the ``rvmkit-call`` command line and loads the configuration
    """

    usage = "%prog [options] <function> [arguments]"
    description = "rvmkit-call queries rvm and installs ruby build dependencies."

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("usage", self.usage)
        kwargs.setdefault("description", self.description)
        kwargs.setdefault("version", f"%prog {rvmkit.__version__}")
        super().__init__(*args, **kwargs)
        self.config = {}
        self.add_option(
            "-c",
            "--config",
            dest="config",
            default=None,
            help="Path to the rvmkit configuration file. Default: {}".format(
                rvmkit.config.DEFAULT_OPTS["conf_file"]
            ),
        )
        self.add_option(
            "-l",
            "--log-level",
            dest="log_level",
            choices=list(rvmkit._logging.LOG_LEVELS),
            help="Console logging log level. One of {}. Default: 'warning'.".format(
                ", ".join(repr(l) for l in rvmkit._logging.SORTED_LEVEL_NAMES)
            ),
        )
        self.add_option(
            "--out",
            "--output",
            dest="output",
            choices=["nested", "json", "yaml"],
            help="Print the output using the specified outputter.",
        )
        self.add_option(
            "-g",
            "--grains",
            dest="grains_run",
            default=False,
            action="store_true",
            help="Return the information generated by the grains.",
        )

    def error(self, msg):
        self.print_usage(sys.stderr)
        self.exit(
            rvmkit.defaults.exitcodes.EX_USAGE,
            f"{self.get_prog_name()}: error: {msg}\n",
        )

    def parse_args(self, args=None, values=None):
        options, args = super().parse_args(args, values)
        self.options, self.args = options, args

        self.config = rvmkit.config.rvmkit_config(options.config)
        if options.log_level:
            self.config["log_level"] = options.log_level
        if options.output:
            self.config["output"] = options.output

        rvmkit._logging.set_logging_options_dict(self.config)
        rvmkit._logging.setup_logging()

        if not options.grains_run and not args:
            self.error("A function to call is required")
        return options, args


class RvmKitCall(RvmKitCallOptionParser):
    """
    Used to locally execute an rvmkit function
    """

    def run(self, args=None):
        """
        Execute the call and return the exit code
        """
        self.parse_args(args)

        try:
            caller = rvmkit.client.Caller(opts=self.config)
            if self.options.grains_run:
                ret = caller.opts["grains"]
            else:
                fun = self.args[0]
                fun_args, fun_kwargs = parse_args_and_kwargs(self.args[1:])
                ret = caller.cmd(fun, *fun_args, **fun_kwargs)
        except RvmKitInvocationError as exc:
            log.debug("Invalid invocation", exc_info=True)
            print(f"Error: {exc}", file=sys.stderr)
            return rvmkit.defaults.exitcodes.EX_USAGE
        except RvmKitException as exc:
            log.debug("Execution failed", exc_info=True)
            print(f"Error: {exc}", file=sys.stderr)
            return rvmkit.defaults.exitcodes.EX_GENERIC

        rvmkit.output.display_output({"local": ret}, None, self.config)
        return rvmkit.defaults.exitcodes.EX_OK
