"""
Helpers to answer questions about RVM ruby strings.

A ruby string names a ruby and optionally a gemset, ie:
``ruby-2.0.0-p648@myapp``. The predicates in this module never raise on a
malformed ruby string, they answer ``False``. They do raise when rvm itself
cannot be queried, so "not installed" is never confused with "cannot tell".

Matching against installed, known and default rubies is done by prefix, so
``ruby-1.9.3`` matches an installed ``ruby-1.9.3-p551``.
"""

import logging

import rvmkit.utils.rubydeps
import rvmkit.utils.rubystring
from rvmkit.exceptions import DefaultRubyNotSetError

log = logging.getLogger(__name__)

__virtualname__ = "rvm_helpers"


def __virtual__():
    return __virtualname__


def _any_startswith(rubies, rubie):
    return any(ruby.startswith(rubie) for ruby in rubies)


def ruby_string_sane(rubie):
    """
    Determines if given ruby string is moderately sane and potentially legal

    CLI Example:

    .. code-block:: bash

        rvmkit-call rvm_helpers.ruby_string_sane ruby-2.0.0
    """
    return rvmkit.utils.rubystring.is_sane(rubie)


def string_include_gemset(ruby_string):
    """
    Determines whether or not there is a gemset defined in a given ruby string

    CLI Example:

    .. code-block:: bash

        rvmkit-call rvm_helpers.string_include_gemset ruby-2.0.0@myapp
    """
    return rvmkit.utils.rubystring.has_gemset(ruby_string)


def select_ruby(ruby_string):
    """
    Return the ruby string minus any gemset

    CLI Example:

    .. code-block:: bash

        rvmkit-call rvm_helpers.select_ruby ruby-2.0.0@myapp
    """
    return rvmkit.utils.rubystring.select_ruby(ruby_string)


def select_gemset(ruby_string):
    """
    Return the gemset of a ruby string, ``None`` if no gemset is given

    CLI Example:

    .. code-block:: bash

        rvmkit-call rvm_helpers.select_gemset ruby-2.0.0@myapp
    """
    return rvmkit.utils.rubystring.select_gemset(ruby_string)


def installed_rubies(runas=None):
    """
    Returns a list of installed rvm rubies on the system

    CLI Example:

    .. code-block:: bash

        rvmkit-call rvm_helpers.installed_rubies
    """
    return __salt__["rvm.list_strings"](runas=runas)


def known_rubies(runas=None):
    """
    Returns the list of ruby strings rvm knows about

    CLI Example:

    .. code-block:: bash

        rvmkit-call rvm_helpers.known_rubies
    """
    return __salt__["rvm.list_known_strings"](runas=runas)


def current_ruby_default(runas=None):
    """
    Fetches the current default ruby string, potentially with gemset.
    Returns ``None`` if none is set.

    CLI Example:

    .. code-block:: bash

        rvmkit-call rvm_helpers.current_ruby_default
    """
    return __salt__["rvm.list_default"](runas=runas)


def ruby_installed(rubie, runas=None):
    """
    Determines whether or not the given ruby is already installed

    CLI Example:

    .. code-block:: bash

        rvmkit-call rvm_helpers.ruby_installed ruby-1.9.3
    """
    if not ruby_string_sane(rubie):
        return False
    return _any_startswith(installed_rubies(runas=runas), rubie)


def ruby_not_installed(rubie, runas=None):
    """
    Inverse of :py:func:`ruby_installed`

    CLI Example:

    .. code-block:: bash

        rvmkit-call rvm_helpers.ruby_not_installed ruby-1.9.3
    """
    return not ruby_installed(rubie, runas=runas)


def ruby_known(rubie, runas=None):
    """
    Determines whether or not the given ruby is a known ruby string

    CLI Example:

    .. code-block:: bash

        rvmkit-call rvm_helpers.ruby_known jruby
    """
    if not ruby_string_sane(rubie):
        return False
    return _any_startswith(known_rubies(runas=runas), rubie)


def ruby_unknown(rubie, runas=None):
    """
    Inverse of :py:func:`ruby_known`

    CLI Example:

    .. code-block:: bash

        rvmkit-call rvm_helpers.ruby_unknown jruby
    """
    return not ruby_known(rubie, runas=runas)


def ruby_default(rubie, runas=None):
    """
    Determines whether or not the given ruby is the default one

    CLI Example:

    .. code-block:: bash

        rvmkit-call rvm_helpers.ruby_default ruby-2.0.0
    """
    if not ruby_string_sane(rubie):
        return False

    current_default = current_ruby_default(runas=runas)
    if current_default is None:
        return False
    return current_default.startswith(rubie)


def env_exists(ruby_string, runas=None):
    """
    Determines whether or not a ruby/gemset environment exists

    CLI Example:

    .. code-block:: bash

        rvmkit-call rvm_helpers.env_exists ruby-2.0.0@myapp
    """
    rubie = select_ruby(ruby_string)
    gemset = select_gemset(ruby_string)

    if gemset is not None:
        return gemset_exists(ruby=rubie, gemset=gemset, runas=runas)
    return ruby_installed(rubie, runas=runas)


def gemset_exists(ruby=None, gemset=None, runas=None):
    """
    Determines whether or not a gemset exists for a given ruby

    ruby
        The ruby to query within

    gemset
        The gemset to look for, matched exactly

    CLI Example:

    .. code-block:: bash

        rvmkit-call rvm_helpers.gemset_exists ruby=ruby-2.0.0 gemset=myapp
    """
    if ruby is None or gemset is None:
        return False
    if not ruby_string_sane(ruby):
        return False
    if not ruby_installed(ruby, runas=runas):
        return False

    return gemset in __salt__["rvm.gemset_list"](ruby, runas=runas)


def normalize_ruby_string(ruby_string, runas=None):
    """
    Sanitizes a ruby string so that it's more normalized. A leading
    ``default`` is replaced with the current default ruby string.

    Raises :class:`~rvmkit.exceptions.DefaultRubyNotSetError` when the ruby
    string refers to ``default`` and rvm has no default ruby.

    CLI Example:

    .. code-block:: bash

        rvmkit-call rvm_helpers.normalize_ruby_string default@myapp
    """
    # get the actual ruby string that corresponds to "default"
    if not ruby_string.startswith(rvmkit.utils.rubystring.DEFAULT):
        return ruby_string

    current_default = current_ruby_default(runas=runas)
    if not current_default:
        raise DefaultRubyNotSetError(
            f"Cannot normalize '{ruby_string}', rvm has no default ruby set"
        )
    return rvmkit.utils.rubystring.substitute_default(ruby_string, current_default)


def ruby_dependencies(rubie, platform=None):
    """
    Return the list of OS packages needed before the given ruby can be built.
    ``platform`` defaults to the ``platform`` grain.

    CLI Example:

    .. code-block:: bash

        rvmkit-call rvm_helpers.ruby_dependencies ruby-head
        rvmkit-call rvm_helpers.ruby_dependencies jruby-1.7.0 platform=centos
    """
    if platform is None:
        platform = __grains__.get("platform")
    return rvmkit.utils.rubydeps.ruby_dependencies(rubie, platform)


def install_ruby_dependencies(rubie, platform=None):
    """
    Installs any package dependencies needed by a given ruby, right away and
    one package at a time.

    Returns a dict mapping every package to the return of ``pkg.install``,
    which is empty for packages that were installed already.

    CLI Example:

    .. code-block:: bash

        rvmkit-call rvm_helpers.install_ruby_dependencies ruby-1.9.3
    """
    pkgs = ruby_dependencies(rubie, platform=platform)
    if not pkgs:
        log.debug("No package dependencies for %s", rubie)
        return {}

    ret = {}
    for pkg in pkgs:
        log.info("Installing %s, needed by %s", pkg, rubie)
        ret[pkg] = __salt__["pkg.install"](pkg)
    return ret
