"""
The static grains which describe the host operating system.

The ``platform`` grain is the lower-case distribution identifier used to
pick build dependencies: ``debian``, ``ubuntu``, ``suse``, ``centos``,
``redhat``, ``fedora`` and so on.
"""

import logging
import platform

import distro

log = logging.getLogger(__name__)

# distro.id() values which are known by another name here
_PLATFORM_MAP = {
    "rhel": "redhat",
    "redhatenterpriseserver": "redhat",
    "sles": "suse",
    "sled": "suse",
    "sles_sap": "suse",
    "opensuse": "suse",
    "opensuse-leap": "suse",
    "opensuse-tumbleweed": "suse",
    "linuxmint": "mint",
}

# Maps the platform to the traditional capitalized OS name
_OS_NAME_MAP = {
    "debian": "Debian",
    "ubuntu": "Ubuntu",
    "mint": "Mint",
    "suse": "SUSE",
    "centos": "CentOS",
    "redhat": "RedHat",
    "fedora": "Fedora",
    "amzn": "Amazon",
    "rocky": "Rocky",
    "almalinux": "AlmaLinux",
    "ol": "OEL",
    "arch": "Arch",
    "gentoo": "Gentoo",
}

_OS_FAMILY_MAP = {
    "Ubuntu": "Debian",
    "Debian": "Debian",
    "Mint": "Debian",
    "SUSE": "Suse",
    "CentOS": "RedHat",
    "RedHat": "RedHat",
    "Fedora": "RedHat",
    "Amazon": "RedHat",
    "Rocky": "RedHat",
    "AlmaLinux": "RedHat",
    "OEL": "RedHat",
}


def _platform_from_id(distro_id):
    distro_id = (distro_id or "").strip().lower()
    return _PLATFORM_MAP.get(distro_id, distro_id)


def os_data():
    """
    Return grains pertaining to the operating system
    """
    grains = {
        "kernel": platform.system(),
        "kernelrelease": platform.release(),
        "cpuarch": platform.machine(),
    }

    if grains["kernel"] != "Linux":
        grains["platform"] = grains["kernel"].lower()
        grains["os"] = grains["os_family"] = grains["kernel"]
        grains["osrelease"] = grains["kernelrelease"]
        return grains

    log.trace("Getting OS name, release, and codename from distro")
    grains["platform"] = _platform_from_id(distro.id())
    grains["os"] = _OS_NAME_MAP.get(grains["platform"], distro.name() or "Linux")
    grains["os_family"] = _OS_FAMILY_MAP.get(grains["os"], grains["os"])
    grains["osrelease"] = distro.version()
    grains["oscodename"] = distro.codename()
    grains["osfullname"] = distro.name()
    return grains
