"""Repositories for CampusHub data access."""

from .action_log import ActionLogRepository, normalize_ip_address
from .base import BaseRepository
from .resource import ResourceRepository, escape_like

__all__ = [
    "BaseRepository",
    "ActionLogRepository",
    "ResourceRepository",
    "escape_like",
    "normalize_ip_address",
]
