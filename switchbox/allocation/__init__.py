"""Box capacity accounting and the box allocation store."""

from switchbox.allocation.capacity import (
    can_add,
    capacity_message,
    remaining_modules,
    used_modules,
)
from switchbox.allocation.store import BoxStore

__all__ = [
    "BoxStore",
    "can_add",
    "capacity_message",
    "remaining_modules",
    "used_modules",
]
