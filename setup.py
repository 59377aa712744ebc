#!/usr/bin/env python
"""
The setup script for rvmkit
"""

import os
import re

from setuptools import find_packages, setup

# Change to rvmkit source's directory prior to running any command
try:
    SETUP_DIRNAME = os.path.dirname(__file__)
except NameError:
    SETUP_DIRNAME = ""

if SETUP_DIRNAME != "":
    os.chdir(SETUP_DIRNAME)

SETUP_DIRNAME = os.path.abspath(SETUP_DIRNAME)

RVMKIT_INIT_MODULE = os.path.join(SETUP_DIRNAME, "rvmkit", "__init__.py")
RVMKIT_BASE_REQUIREMENTS = [
    os.path.join(SETUP_DIRNAME, "requirements", "base.txt"),
]
RVMKIT_TESTS_REQUIREMENTS = [
    os.path.join(SETUP_DIRNAME, "requirements", "pytest.txt"),
]


def _parse_version(init_module):
    with open(init_module, encoding="utf-8") as rfh:
        match = re.search(r'^__version__ = "([^"]+)"', rfh.read(), re.M)
    if match is None:
        raise RuntimeError(f"Unable to find __version__ in {init_module}")
    return match.group(1)


def _parse_requirements_file(requirements_file):
    parsed_requirements = []
    with open(requirements_file, encoding="utf-8") as rfh:
        for line in rfh.readlines():
            line = line.strip()
            if not line or line.startswith(("#", "-r")):
                continue
            parsed_requirements.append(line)
    return parsed_requirements


def _parse_requirements_files(requirements_files):
    requirements = []
    for requirements_file in requirements_files:
        for requirement in _parse_requirements_file(requirements_file):
            if requirement not in requirements:
                requirements.append(requirement)
    return requirements


setup(
    name="rvmkit",
    version=_parse_version(RVMKIT_INIT_MODULE),
    description="Query RVM ruby strings and install ruby build dependencies",
    license="Apache Software License 2.0",
    python_requires=">=3.8",
    packages=find_packages(include=["rvmkit", "rvmkit.*"]),
    install_requires=_parse_requirements_files(RVMKIT_BASE_REQUIREMENTS),
    extras_require={"tests": _parse_requirements_files(RVMKIT_TESTS_REQUIREMENTS)},
    entry_points={"console_scripts": ["rvmkit-call = rvmkit.scripts:rvmkit_call"]},
    classifiers=[
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Development Status :: 3 - Alpha",
        "Environment :: Console",
        "Intended Audience :: System Administrators",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: POSIX :: Linux",
        "Topic :: System :: Systems Administration",
    ],
)
