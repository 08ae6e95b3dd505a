"""Factory helpers for runtime units."""

from .id_factory import make_instance_id
from .unit_factory import create_unit_instance

__all__ = [
    "create_unit_instance",
    "make_instance_id",
]
