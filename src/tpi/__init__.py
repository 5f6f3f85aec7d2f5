"""TPI - Task Planning Interface core.

Robot twin bridge and tutorial sequencer for a mixed-reality
task-planning interface.
"""

__version__ = "0.1.0"


def main() -> None:
    """Entry point for the tpi command."""
    print(f"TPI core v{__version__}")
    print("Robot twin bridge and tutorial sequencer for mixed-reality task planning")
    print()
    print("Components:")
    print("  tpi.controllers.RobotPoseBridge    - sync the robot twin with ROS")
    print("  tpi.controllers.TutorialSequencer  - step-by-step operator tutorial")
    print()
    print("Configuration: config/default.yaml (see tpi.utils.config)")
