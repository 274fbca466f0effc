"""Task model for scheduled todos."""

from typing import Dict, Any
from sqlalchemy import Column, String, Integer
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Task(Base):
    __tablename__ = "scheduler"

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(String(8), nullable=False, index=True)  # YYYYMMDD
    title = Column(String(255), nullable=False)
    comment = Column(String(255))

    # "" for one-shot tasks, otherwise "d <n>" or "y"
    repeat = Column(String(50))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": str(self.id),
            "date": self.date,
            "title": self.title,
            "comment": self.comment or "",
            "repeat": self.repeat or ""
        }

    def is_recurring(self) -> bool:
        """Check if completing this task moves it to a new date instead of deleting it."""
        return bool(self.repeat)
