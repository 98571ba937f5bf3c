"""Template instance launch exports."""

from .instance_launcher import InstanceLauncher
from .launch_outcomes import LaunchedInstance

__all__ = ["InstanceLauncher", "LaunchedInstance"]
