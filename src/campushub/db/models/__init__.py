"""Database models for CampusHub search."""

from .action_log import ActionLog, ActionType
from .base import Base, CreatedAtMixin, PortableINET, PortableTSVector
from .resource import Course, Resource, User

__all__ = [
    "Base",
    "CreatedAtMixin",
    "PortableINET",
    "PortableTSVector",
    "ActionLog",
    "ActionType",
    "Course",
    "Resource",
    "User",
]
