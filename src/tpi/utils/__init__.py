"""Utilities for the TPI core."""

from .config import TpiConfig, load_config

__all__ = ["TpiConfig", "load_config"]
