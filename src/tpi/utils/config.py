"""Configuration management for the TPI core."""

import logging
from pathlib import Path
from typing import Optional, Dict, Any, List

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from tpi.core import ReceiveMode, PublishMode, ConfigurationError


logger = logging.getLogger(__name__)


PANDA_LINK_NAMES = [
    "/".join(f"panda_link{j}" for j in range(i + 1))
    for i in range(1, 8)
]
PANDA_HAND_LINK = "/".join(f"panda_link{j}" for j in range(9)) + "/panda_hand"


def _parse_mode(enum_cls, value: str):
    """Look up a mode by name, e.g. ``"once"`` -> ``ReceiveMode.ONCE``."""
    try:
        return enum_cls[value.strip().upper()]
    except KeyError:
        options = ", ".join(m.name.lower() for m in enum_cls)
        raise ValueError(f"unknown {enum_cls.__name__} '{value}', expected one of: {options}")


class RobotBridgeConfig(BaseModel):
    """Configuration for the robot twin bridge.

    Defaults are set up for the FRANKA RESEARCH 3 arm.
    """
    base_topic: str = "tpi_robot_basepose"
    joint_topic: str = "tpi_robot_joints"
    pose_topic: str = "tpi_robot_pose"
    pose_reachable_topic: str = "tpi_robot_posereachable"
    receive_base_pose: ReceiveMode = ReceiveMode.DO_NOT
    publish_base_pose: PublishMode = PublishMode.DO_NOT
    publish_frequency_hz: float = 1.0
    # Order must match the kinematic chain
    link_names: List[str] = Field(default_factory=lambda: list(PANDA_LINK_NAMES))
    end_effector_link: str = PANDA_HAND_LINK

    @field_validator("receive_base_pose", mode="before")
    @classmethod
    def parse_receive_mode(cls, v: Any) -> Any:
        if isinstance(v, str):
            return _parse_mode(ReceiveMode, v)
        return v

    @field_validator("publish_base_pose", mode="before")
    @classmethod
    def parse_publish_mode(cls, v: Any) -> Any:
        if isinstance(v, str):
            return _parse_mode(PublishMode, v)
        return v

    @field_validator("publish_frequency_hz")
    @classmethod
    def validate_frequency(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("publish_frequency_hz must be positive")
        return v


class TutorialConfig(BaseModel):
    """Configuration for the tutorial sequencer."""
    enabled: bool = False
    # Key of the toggle button in the widget table
    toggle_button_key: str = "workflow_menu/tutorial"
    start_label: str = "Start\nTutorial"
    stop_label: str = "Stop\nTutorial"
    start_icon: Optional[str] = "tutorial_start"
    stop_icon: Optional[str] = "tutorial_stop"
    abort_icon: Optional[str] = "abort"
    # Steps seeded at start-up: {title, text, template: {name, texts}}
    steps: List[Dict[str, Any]] = Field(default_factory=list)


class LoggingConfig(BaseModel):
    """Configuration for logging."""
    level: str = "INFO"
    log_to_file: bool = False
    log_directory: str = "logs"
    max_log_size_mb: int = 100
    backup_count: int = 5


class TpiConfig(BaseModel):
    """Root configuration for the TPI core."""

    # System settings
    project_name: str = "TPI"
    version: str = "0.1.0"
    debug_mode: bool = False

    # Sub-configurations
    robot: RobotBridgeConfig = Field(default_factory=RobotBridgeConfig)
    tutorial: TutorialConfig = Field(default_factory=TutorialConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def setup_logging(self) -> None:
        """Configure logging based on config."""
        log_level = getattr(logging, self.logging.level.upper())

        handlers = []

        # Console handler
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

        # File handler
        if self.logging.log_to_file:
            log_dir = Path(self.logging.log_directory)
            log_dir.mkdir(exist_ok=True, parents=True)

            from logging.handlers import RotatingFileHandler
            file_handler = RotatingFileHandler(
                log_dir / "tpi.log",
                maxBytes=self.logging.max_log_size_mb * 1024 * 1024,
                backupCount=self.logging.backup_count
            )
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)

        logging.basicConfig(
            level=log_level,
            handlers=handlers,
            force=True
        )

        logger.info(f"Logging configured: level={self.logging.level}")


def load_config(
    config_path: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None
) -> TpiConfig:
    """Load configuration from YAML file with optional overrides.

    Args:
        config_path: Path to YAML config file. If None, uses default.yaml
        overrides: Dictionary of config overrides (nested keys with dots)

    Returns:
        Validated TpiConfig instance

    Raises:
        ConfigurationError: If the file or overrides do not validate

    Example:
        >>> config = load_config("config/default.yaml")
        >>> config = load_config(overrides={"tutorial.enabled": True})
    """
    if config_path is None:
        repo_root = Path(__file__).parent.parent.parent.parent
        config_path = repo_root / "config" / "default.yaml"
    else:
        config_path = Path(config_path)

    config_dict = {}
    if config_path.exists():
        logger.info(f"Loading config from {config_path}")
        with open(config_path) as f:
            config_dict = yaml.safe_load(f) or {}
    else:
        logger.warning(f"Config file not found: {config_path}, using defaults")

    if overrides:
        config_dict = _apply_overrides(config_dict, overrides)

    try:
        config = TpiConfig(**config_dict)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {config_path}: {e}") from e
    config.setup_logging()

    return config


def _apply_overrides(
    config_dict: Dict[str, Any],
    overrides: Dict[str, Any]
) -> Dict[str, Any]:
    """Apply nested overrides to config dictionary.

    Example:
        overrides = {"robot.publish_frequency_hz": 5.0}
        -> config_dict["robot"]["publish_frequency_hz"] = 5.0
    """
    for key, value in overrides.items():
        keys = key.split(".")
        d = config_dict
        for k in keys[:-1]:
            d = d.setdefault(k, {})
        d[keys[-1]] = value
    return config_dict
