"""
Return config information
"""

import fnmatch
import logging

log = logging.getLogger(__name__)

# Set up the default values for all systems
DEFAULTS = {
    "rvm.runas": None,
    "rvm.path": None,
}


def option(value, default=None, omit_opts=False, omit_grains=False, wildcard=False):
    """
    Returns the setting for the specified config value. The priority for
    matches is the configuration file, then the grains, then the set of
    "sane defaults".

    default
        The default value if no match is found. If not specified, then the
        fallback default will be an empty string, unless ``wildcard=True``, in
        which case the return will be an empty dictionary.

    omit_opts : False
        Pass as ``True`` to exclude matches from the configuration file

    omit_grains : False
        Pass as ``True`` to exclude matches from the grains

    wildcard : False
        If used, this will perform pattern matching on keys. Instead of only
        a value being returned, a dictionary mapping the matched keys to
        their values is returned.

    CLI Example:

    .. code-block:: bash

        rvmkit-call config.option rvm.runas
    """
    if default is None:
        default = "" if not wildcard else {}

    if not wildcard:
        if not omit_opts:
            if value in __opts__:
                return __opts__[value]
        if not omit_grains:
            if value in __grains__:
                return __grains__[value]
        if value in DEFAULTS:
            return DEFAULTS[value]

        # No match
        return default
    else:
        # We need to do the checks in the reverse order so that config
        # options take precedence
        ret = {}
        for omit, data in ((omit_grains, __grains__), (omit_opts, __opts__)):
            if not omit:
                ret.update({x: data[x] for x in fnmatch.filter(data, value)})
        # Check the DEFAULTS as well to see if the pattern matches it
        for item in (x for x in fnmatch.filter(DEFAULTS, value) if x not in ret):
            ret[item] = DEFAULTS[item]

        # If no matches, return the default
        return ret or default


def get(key, default="", delimiter=":"):
    """
    Attempt to retrieve the named value from the configuration file or the
    grains, descending into nested dictionaries with ``delimiter``. If the
    value is not found, ``default`` is returned.

    CLI Example:

    .. code-block:: bash

        rvmkit-call config.get grains:platform
    """
    for data in (__opts__, __grains__):
        ret = data
        for part in key.split(delimiter):
            if isinstance(ret, dict) and part in ret:
                ret = ret[part]
            else:
                break
        else:
            return ret
    if key in DEFAULTS:
        return DEFAULTS[key]
    return default
