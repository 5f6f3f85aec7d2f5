"""Tests for configuration system."""

import os
import tempfile
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from tpi.core import ReceiveMode, PublishMode, ConfigurationError
from tpi.utils.config import (
    TpiConfig, load_config, RobotBridgeConfig, TutorialConfig,
    PANDA_LINK_NAMES, PANDA_HAND_LINK, _apply_overrides
)


def test_default_config():
    """Test default configuration values."""
    config = TpiConfig()

    assert config.project_name == "TPI"
    assert config.version == "0.1.0"
    assert config.debug_mode is False
    assert config.robot.base_topic == "tpi_robot_basepose"
    assert config.robot.joint_topic == "tpi_robot_joints"
    assert config.robot.pose_topic == "tpi_robot_pose"
    assert config.robot.pose_reachable_topic == "tpi_robot_posereachable"
    assert config.robot.receive_base_pose == ReceiveMode.DO_NOT
    assert config.robot.publish_base_pose == PublishMode.DO_NOT
    assert config.tutorial.enabled is False


def test_panda_link_names():
    """Link paths follow the FRANKA RESEARCH 3 hierarchy."""
    assert len(PANDA_LINK_NAMES) == 7
    assert PANDA_LINK_NAMES[0] == "panda_link0/panda_link1"
    assert PANDA_LINK_NAMES[-1].endswith("panda_link6/panda_link7")
    assert PANDA_HAND_LINK.endswith("panda_link7/panda_link8/panda_hand")


def test_config_from_dict():
    """Test creating config from dictionary."""
    config = TpiConfig(**{
        "project_name": "Test Project",
        "debug_mode": True,
        "robot": {
            "receive_base_pose": "continuously",
            "publish_base_pose": "Automatically",
            "publish_frequency_hz": 10.0,
        },
        "tutorial": {"enabled": True},
    })

    assert config.project_name == "Test Project"
    assert config.debug_mode is True
    assert config.robot.receive_base_pose == ReceiveMode.CONTINUOUSLY
    assert config.robot.publish_base_pose == PublishMode.AUTOMATICALLY
    assert config.robot.publish_frequency_hz == 10.0
    assert config.tutorial.enabled is True


def test_enum_values_accepted():
    config = RobotBridgeConfig(receive_base_pose=ReceiveMode.ONCE)
    assert config.receive_base_pose == ReceiveMode.ONCE


def test_unknown_mode_rejected():
    with pytest.raises(ValidationError):
        RobotBridgeConfig(receive_base_pose="sometimes")


@pytest.mark.parametrize("frequency", [0.0, -1.0])
def test_frequency_must_be_positive(frequency):
    with pytest.raises(ValidationError):
        RobotBridgeConfig(publish_frequency_hz=frequency)


def test_load_config_from_yaml():
    """Test loading config from YAML file."""
    with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
        yaml.dump({
            "project_name": "YAML Test",
            "robot": {"receive_base_pose": "once"},
            "tutorial": {
                "enabled": True,
                "steps": [{"title": "First", "text": "Hello"}],
            },
        }, f)
        temp_path = f.name

    try:
        config = load_config(temp_path)
        assert config.project_name == "YAML Test"
        assert config.robot.receive_base_pose == ReceiveMode.ONCE
        assert config.tutorial.steps == [{"title": "First", "text": "Hello"}]
    finally:
        os.unlink(temp_path)


def test_load_invalid_yaml_raises_configuration_error():
    with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
        yaml.dump({"robot": {"publish_frequency_hz": 0}}, f)
        temp_path = f.name

    try:
        with pytest.raises(ConfigurationError):
            load_config(temp_path)
    finally:
        os.unlink(temp_path)


def test_missing_file_uses_defaults():
    config = load_config("/nonexistent/tpi.yaml")
    assert config.project_name == "TPI"


def test_config_overrides():
    """Test applying overrides to config."""
    config_dict = {"robot": {"publish_frequency_hz": 1.0}}

    overrides = {
        "robot.publish_frequency_hz": 5.0,
        "tutorial.enabled": True,
        "debug_mode": True,
    }

    result = _apply_overrides(config_dict, overrides)

    assert result["robot"]["publish_frequency_hz"] == 5.0
    assert result["tutorial"]["enabled"] is True
    assert result["debug_mode"] is True


def test_load_config_with_overrides():
    """Test load_config with overrides."""
    config = load_config(overrides={
        "debug_mode": True,
        "robot.publish_base_pose": "manually",
    })

    assert config.debug_mode is True
    assert config.robot.publish_base_pose == PublishMode.MANUALLY


def test_default_yaml():
    """The shipped default.yaml matches the built-in defaults."""
    repo_root = Path(__file__).parent.parent.parent
    default_path = repo_root / "config" / "default.yaml"

    if not default_path.exists():
        pytest.skip("default.yaml not found")

    config = load_config(str(default_path))

    assert config.robot.link_names == PANDA_LINK_NAMES
    assert config.robot.end_effector_link == PANDA_HAND_LINK
    assert config.tutorial.start_label == "Start\nTutorial"
    assert config.tutorial.steps[0]["template"]["texts"] == ["[Name]", "[Textfield]"]


def test_tutorial_config_defaults():
    config = TutorialConfig()
    assert config.toggle_button_key == "workflow_menu/tutorial"
    assert config.stop_label == "Stop\nTutorial"
    assert config.abort_icon == "abort"
    assert config.steps == []
