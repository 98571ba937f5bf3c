"""Smoketest failure taxonomy exports."""

from .failure_kinds import InstanceLaunchError, SmoketestError, SmoketestFailure

__all__ = ["SmoketestFailure", "SmoketestError", "InstanceLaunchError"]
