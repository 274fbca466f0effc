"""Database models for DayPlanner."""

from .task import Base, Task

__all__ = [
    "Base",
    "Task"
]
