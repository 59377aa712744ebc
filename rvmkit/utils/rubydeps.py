"""
Static table of the OS packages needed to build a ruby, per platform
"""

import rvmkit.utils.rubystring
from rvmkit.utils.rubystring import RubyFamily

RUBY_HEAD = "ruby-head"

_DEBIAN_MRI = [
    "build-essential",
    "bison",
    "openssl",
    "libreadline6",
    "libreadline6-dev",
    "zlib1g",
    "zlib1g-dev",
    "libssl-dev",
    "libyaml-dev",
    "libsqlite3-0",
    "libsqlite3-dev",
    "sqlite3",
    "libxml2-dev",
    "libxslt1-dev",
    "ssl-cert",
]
_SUSE_MRI = [
    "gcc-c++",
    "patch",
    "readline",
    "readline-devel",
    "zlib",
    "zlib-devel",
    "libffi-devel",
    "openssl-devel",
    "sqlite3-devel",
    "libxml2-devel",
    "libxslt-devel",
]
_REDHAT_MRI = [
    "gcc-c++",
    "patch",
    "readline",
    "readline-devel",
    "zlib",
    "zlib-devel",
    "libyaml-devel",
    "libffi-devel",
    "openssl-devel",
]

# platform: (base packages, extra packages to build ruby-head from source)
MRI_PACKAGES = {
    "debian": (_DEBIAN_MRI, ["git-core", "subversion", "autoconf"]),
    "ubuntu": (_DEBIAN_MRI, ["git-core", "subversion", "autoconf"]),
    "suse": (_SUSE_MRI, ["git", "subversion", "autoconf"]),
    "centos": (_REDHAT_MRI, ["git", "subversion", "autoconf"]),
    "redhat": (_REDHAT_MRI, ["git", "subversion", "autoconf"]),
    "fedora": (_REDHAT_MRI, ["git", "subversion", "autoconf"]),
}

# A java runtime is not pulled in here, users of jruby have to provide one.
JRUBY_PACKAGES = ["g++"]


def ruby_dependencies(rubie, platform):
    """
    Return the list of packages which must be installed before ``rubie`` can
    be built on ``platform``. Unknown rubies and platforms need nothing.
    """
    family = rvmkit.utils.rubystring.classify(rubie)
    if family is RubyFamily.MRI:
        try:
            base, head = MRI_PACKAGES[platform]
        except KeyError:
            return []
        pkgs = list(base)
        if rubie == RUBY_HEAD:
            pkgs.extend(head)
        return pkgs
    if family is RubyFamily.JRUBY:
        return list(JRUBY_PACKAGES)
    return []
