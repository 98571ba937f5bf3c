"""Instance validation exports."""

from .instance_validator import InstanceValidator, decode_expected_args

__all__ = ["InstanceValidator", "decode_expected_args"]
