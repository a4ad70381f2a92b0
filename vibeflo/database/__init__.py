"""Database package."""

from .db import get_session, init_db, configure_engine
from .models import PomodoroSession, TodoItem

__all__ = ["get_session", "init_db", "configure_engine", "PomodoroSession", "TodoItem"]
