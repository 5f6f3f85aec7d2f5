"""Exception types raised inside the TPI core.

Controllers catch these at their public entry points, log them and turn
them into a ``False`` return so the surrounding application stays
interactive.
"""


class TpiError(Exception):
    """Base class for all TPI core errors."""


class ConfigurationError(TpiError):
    """Invalid setup, e.g. a joint link name that does not exist."""


class MessageError(TpiError):
    """A payload received from or built for the ROS feed is malformed."""


class JointStateError(MessageError, IndexError):
    """A joint angle array does not cover the whole joint chain."""
