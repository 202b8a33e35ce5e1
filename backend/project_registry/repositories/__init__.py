"""Repository layer for database operations"""

from .base import BaseRepository
from .project_ref import ProjectRefRepository

__all__ = [
    "BaseRepository",
    "ProjectRefRepository",
]
