"""Task list and the link between a task and the running timer.

``TaskList`` is the store behind the task panel (rows in ``todos``).
``TaskBinding`` is what the panel talks to when the user picks a task:
it hands the label to the engine without touching the countdown, and
ticks the task off once a Pomodoro spent on it completes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from .database.db import get_session
from .database.models import TodoItem

if TYPE_CHECKING:
    from .timer.engine import PomodoroSessionRecord, TimerEngine

logger = logging.getLogger(__name__)

MAX_TASK_LENGTH = 255


@dataclass(frozen=True)
class Task:
    id: int
    text: str
    completed: bool
    position: int


def _to_task(row: TodoItem) -> Task:
    return Task(id=row.id, text=row.text, completed=row.completed, position=row.position)


def _clean(text: str) -> str:
    return (text or "").strip()[:MAX_TASK_LENGTH]


# ═══════════════════════════════════════════════════════════════════════════
#  TASK LIST
# ═══════════════════════════════════════════════════════════════════════════


class TaskList:
    """Ordered, persisted list of tasks."""

    def items(self) -> list[Task]:
        with get_session() as db:
            rows = db.query(TodoItem).order_by(TodoItem.position, TodoItem.id).all()
            return [_to_task(r) for r in rows]

    def add(self, text: str) -> Task | None:
        """Append a task.  Blank text is ignored."""
        text = _clean(text)
        if not text:
            return None
        with get_session() as db:
            last = db.query(TodoItem).order_by(TodoItem.position.desc()).first()
            row = TodoItem(text=text, position=(last.position + 1) if last else 0)
            db.add(row)
            db.flush()
            return _to_task(row)

    def rename(self, item_id: int, text: str) -> Task | None:
        with get_session() as db:
            row = db.get(TodoItem, item_id)
            if row is None:
                return None
            row.text = _clean(text)
            return _to_task(row)

    def toggle(self, item_id: int) -> Task | None:
        with get_session() as db:
            row = db.get(TodoItem, item_id)
            if row is None:
                return None
            row.completed = not row.completed
            return _to_task(row)

    def remove(self, item_id: int) -> bool:
        with get_session() as db:
            row = db.get(TodoItem, item_id)
            if row is None:
                return False
            db.delete(row)
        self._renumber()
        return True

    def move(self, item_id: int, new_index: int) -> None:
        """Drag-and-drop reorder."""
        with get_session() as db:
            rows = db.query(TodoItem).order_by(TodoItem.position, TodoItem.id).all()
            moving = next((r for r in rows if r.id == item_id), None)
            if moving is None:
                return
            rows.remove(moving)
            new_index = max(0, min(new_index, len(rows)))
            rows.insert(new_index, moving)
            for i, row in enumerate(rows):
                row.position = i

    def reset(self) -> None:
        """Clear the whole list."""
        with get_session() as db:
            db.query(TodoItem).delete()

    def first_incomplete(self) -> Task | None:
        for task in self.items():
            if not task.completed and task.text:
                return task
        return None

    def mark_completed(self, text: str | None) -> Task | None:
        """Tick off the first open task whose text matches."""
        text = _clean(text or "")
        if not text:
            return None
        with get_session() as db:
            row = (
                db.query(TodoItem)
                .filter(TodoItem.text == text, TodoItem.completed.is_(False))
                .order_by(TodoItem.position, TodoItem.id)
                .first()
            )
            if row is None:
                return None
            row.completed = True
            return _to_task(row)

    def _renumber(self) -> None:
        with get_session() as db:
            rows = db.query(TodoItem).order_by(TodoItem.position, TodoItem.id).all()
            for i, row in enumerate(rows):
                row.position = i


# ═══════════════════════════════════════════════════════════════════════════
#  BINDING
# ═══════════════════════════════════════════════════════════════════════════


class TaskBinding:
    """Associates a task label with the engine's current session.

    ``select`` can be called at any moment, including mid-countdown; the
    timer neither pauses nor resets.  ``on_change`` (optional) is called
    with the new label so a view can refresh.
    """

    def __init__(
        self,
        engine: TimerEngine,
        task_list: TaskList | None = None,
        *,
        on_change: Callable[[str | None], None] | None = None,
    ) -> None:
        self._engine = engine
        self._task_list = task_list
        self._on_change = on_change
        engine.add_completion_listener(self.on_pomodoro_completed)

    @property
    def current_task(self) -> str | None:
        return self._engine.current_task

    def select(self, text: str | None) -> None:
        self._engine.set_task(text)
        if self._on_change is not None:
            self._on_change(self._engine.current_task)

    def clear(self) -> None:
        self.select(None)

    def select_first_incomplete(self) -> str | None:
        """Pick the first open task when nothing is bound yet."""
        if self.current_task is not None or self._task_list is None:
            return self.current_task
        task = self._task_list.first_incomplete()
        if task is not None:
            self.select(task.text)
        return self.current_task

    def on_pomodoro_completed(self, record: PomodoroSessionRecord) -> None:
        if self._task_list is None or record.task is None:
            return
        task = self._task_list.mark_completed(record.task)
        if task is not None:
            logger.info("Marked task %r done after a completed Pomodoro", task.text)
