"""
Functions for parsing and classifying RVM ruby strings.

A ruby string names an interpreter and version, optionally followed by a
gemset: ``ruby-2.0.0-p648@myapp``. ``goruby`` has no versions yet and is
accepted as is.
"""

import enum
import re

GORUBY = "goruby"
DEFAULT = "default"
GEMSET_SEPARATOR = "@"

# must be xxx-vvv at least
_SANE_RE = re.compile(r"^[^-]+-[^-]+")
_MRI_RE = re.compile(r"^(?:1\.[89]\.|ree|ruby-)")
_JRUBY_RE = re.compile(r"^jruby")


class RubyFamily(enum.Enum):
    """
    The interpreter lineage a ruby string belongs to
    """

    MRI = "mri"
    JRUBY = "jruby"
    GORUBY = "goruby"
    OTHER = "other"


def is_sane(rubie):
    """
    Determines if given ruby string is moderately sane and potentially legal.

    This only rejects obviously broken strings, version syntax is not checked.
    """
    if not isinstance(rubie, str):
        return False
    if rubie == GORUBY:
        return True
    return _SANE_RE.match(rubie) is not None


def has_gemset(ruby_string):
    """
    Determines whether or not there is a gemset defined in a given ruby string.
    Anything that is not a string has no gemset.
    """
    if not isinstance(ruby_string, str):
        return False
    return GEMSET_SEPARATOR in ruby_string


def select_ruby(ruby_string):
    """
    Filters out any gemset declarations in a ruby string. Anything that is not
    a string is returned unchanged.
    """
    if not isinstance(ruby_string, str):
        return ruby_string
    return ruby_string.split(GEMSET_SEPARATOR, 1)[0]


def select_gemset(ruby_string):
    """
    Filters out the ruby declaration in a ruby string. Returns ``None`` when
    no gemset is given or ``ruby_string`` is not a string.
    """
    if has_gemset(ruby_string):
        return ruby_string.split(GEMSET_SEPARATOR, 1)[1]
    return None


def substitute_default(ruby_string, default):
    """
    Replace the leading ``default`` alias of a ruby string with ``default``,
    the ruby string rvm reports as its default. Other strings are returned
    unchanged.
    """
    if not ruby_string.startswith(DEFAULT):
        return ruby_string
    return ruby_string.replace(DEFAULT, default, 1)


def classify(rubie):
    """
    Return the :class:`RubyFamily` of a ruby string
    """
    if rubie == GORUBY:
        return RubyFamily.GORUBY
    if _MRI_RE.match(rubie):
        return RubyFamily.MRI
    if _JRUBY_RE.match(rubie):
        return RubyFamily.JRUBY
    return RubyFamily.OTHER
