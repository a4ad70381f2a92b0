"""SQLAlchemy ORM models for VibeFlo."""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class PomodoroSession(Base):
    """One naturally completed Pomodoro."""

    __tablename__ = "pomodoro_sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    duration_minutes = Column(Integer, nullable=False)
    task = Column(String(255), nullable=True)
    completed_at = Column(DateTime, nullable=False, default=datetime.now, index=True)

    def __repr__(self) -> str:
        return (
            f"<PomodoroSession id={self.id} minutes={self.duration_minutes} "
            f"task={self.task!r}>"
        )


class TodoItem(Base):
    """An entry in the task list the timer can be bound to."""

    __tablename__ = "todos"

    id = Column(Integer, primary_key=True, autoincrement=True)
    text = Column(String(255), nullable=False, default="")
    completed = Column(Boolean, nullable=False, default=False)
    position = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    def __repr__(self) -> str:
        return (
            f"<TodoItem id={self.id} text={self.text!r} "
            f"completed={self.completed}>"
        )
