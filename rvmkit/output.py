"""
A simple way of setting the output format for data from modules
"""

import json
import logging
import pprint

import yaml

from rvmkit.exceptions import RvmKitException

__all__ = ("get_outputter", "display_output")

log = logging.getLogger(__name__)


class Outputter:
    """
    Class for outputting data to the screen.
    """

    supports = None

    @classmethod
    def check(cls, name):
        return cls.supports == name

    def format(self, data):
        return pprint.pformat(data)

    def __call__(self, data, **kwargs):
        print(self.format(data))


class NestedOutputter(Outputter):
    """
    Recursively display nested data in an indented, human readable layout
    """

    supports = "nested"

    def _display(self, ret, indent, prefix, out):
        if ret is None or isinstance(ret, (bool, int, float)):
            out.append("{}{}{}".format(" " * indent, prefix, ret))
        elif isinstance(ret, str):
            first_line = True
            for line in ret.splitlines() or [""]:
                line_prefix = prefix if first_line else " " * len(prefix)
                out.append("{}{}{}".format(" " * indent, line_prefix, line))
                first_line = False
        elif isinstance(ret, (list, tuple)):
            for item in ret:
                self._display(item, indent, "- ", out)
        elif isinstance(ret, dict):
            if indent:
                out.append("{}{}".format(" " * indent, "----------"))
            for key in sorted(ret, key=str):
                val = ret[key]
                out.append("{}{}{}:".format(" " * indent, prefix, key))
                self._display(val, indent + 4, "", out)
        else:
            out.append("{}{}{}".format(" " * indent, prefix, ret))
        return out

    def format(self, data):
        return "\n".join(self._display(data, 0, "", []))


class JSONOutputter(Outputter):
    """
    JSON output.
    """

    supports = "json"

    def format(self, data):
        try:
            return json.dumps(data, indent=4, sort_keys=True)
        except TypeError:
            log.debug("Unable to serialize output to json", exc_info=True)
            # Return valid json for unserializable objects
            return json.dumps({})


class YamlOutputter(Outputter):
    """
    Yaml output. All of the cool kids are doing it.
    """

    supports = "yaml"

    def format(self, data):
        return yaml.safe_dump(data, default_flow_style=False).rstrip()


def get_outputter(name=None):
    """
    Factory function for returning the right output class.

    Usage:
        printout = get_outputter("nested")
        printout(ret)
    """
    for klass in Outputter.__subclasses__():
        if klass.check(name):
            return klass()
    return Outputter()


def display_output(ret, out, opts=None):
    """
    Display the output of a command in the terminal
    """
    if isinstance(ret, RvmKitException):
        ret = str(ret)
    printout = get_outputter(out or (opts or {}).get("output"))
    printout(ret)
