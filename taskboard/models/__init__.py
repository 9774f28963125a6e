"""
Models package.

Import all models here so they are registered with SQLAlchemy.
"""

from taskboard.models.task import TaskRow
from taskboard.models.profile import Profile

__all__ = [
    "TaskRow",
    "Profile",
]
