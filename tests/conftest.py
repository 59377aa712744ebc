# pylint: disable=redefined-outer-name,invalid-name

import logging
import pathlib

import pytest

import rvmkit._logging

TESTS_DIR = pathlib.Path(__file__).resolve().parent
CODE_DIR = TESTS_DIR.parent

log = logging.getLogger(__name__)

_MISSING = object()


@pytest.fixture(autouse=True)
def setup_loader_modules(request):
    """
    Inject the dunders returned by a test module's ``configure_loader_modules``
    fixture into the modules under test, like the loader would, and restore
    the modules afterwards.

    .. code-block:: python

        @pytest.fixture
        def configure_loader_modules():
            return {rvm: {"__salt__": {"cmd.run_all": MagicMock()}}}
    """
    try:
        loader_modules = request.getfixturevalue("configure_loader_modules")
    except pytest.FixtureLookupError:
        yield
        return

    saved = []
    for module, globals_to_set in loader_modules.items():
        globals_to_set = dict(globals_to_set)
        for dunder in ("__salt__", "__opts__", "__grains__", "__context__"):
            globals_to_set.setdefault(dunder, {})
        for name, value in globals_to_set.items():
            saved.append((module, name, getattr(module, name, _MISSING)))
            setattr(module, name, value)
    try:
        yield
    finally:
        for module, name, value in reversed(saved):
            if value is _MISSING:
                delattr(module, name)
            else:
                setattr(module, name, value)


@pytest.fixture
def shutdown_logging():
    """
    Remove any handler set up by the test so later tests don't write into a
    closed capture stream
    """
    root_level = logging.root.level
    try:
        yield
    finally:
        rvmkit._logging.shutdown_logging()
        logging.root.setLevel(root_level)
