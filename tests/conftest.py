"""Pytest configuration for TPI core tests."""

import sys

import numpy as np
import pytest

# Remove ROS paths that may interfere with testing
ros_paths = [p for p in sys.path if 'ros' in p.lower()]
for p in ros_paths:
    if p in sys.path:
        sys.path.remove(p)

from tpi.controllers import ArticulatedBase, ArticulatedLink  # noqa: E402
from tpi.interfaces import LocalConnection, LoggingDialogMenu, FixedPlacement  # noqa: E402
from tpi.utils.config import PANDA_LINK_NAMES, PANDA_HAND_LINK  # noqa: E402


def pytest_configure(config):
    """Block ROS pytest plugins that leak from system site-packages."""
    pm = config.pluginmanager
    for name in (
        "launch_testing_ros",
        "launch_testing",
        "ament_copyright",
        "ament_flake8",
        "ament_pep257",
        "ament_xmllint",
        "ament_lint",
    ):
        pm.set_blocked(name)


@pytest.fixture
def connection():
    return LocalConnection()


@pytest.fixture
def dialogs():
    return LoggingDialogMenu()


@pytest.fixture
def placement():
    return FixedPlacement()


@pytest.fixture
def robot_base():
    return ArticulatedBase(name="panda_link0")


@pytest.fixture
def robot_links():
    """Links of a FRANKA RESEARCH 3 twin keyed by hierarchy path."""
    links = {name: ArticulatedLink(name=name) for name in PANDA_LINK_NAMES}
    links[PANDA_HAND_LINK] = ArticulatedLink(
        name=PANDA_HAND_LINK, position=np.array([0.1, 0.5, 0.3])
    )
    return links
