"""Task panel: the list of goals for today.

Check a row to mark it done, click its text to work on it, double-click
to rename it and drag it to reorder.  Selecting a task never pauses or
resets the timer.
"""

from __future__ import annotations

from PyQt6.QtCore import QModelIndex, Qt
from PyQt6.QtWidgets import (
    QAbstractItemView, QWidget, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit,
    QListWidget, QListWidgetItem, QPushButton,
)

from ..tasks import TaskBinding, TaskList


class TaskPanel(QWidget):
    """Editable task list bound to the timer's current task."""

    def __init__(
        self,
        task_list: TaskList,
        binding: TaskBinding,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._task_list = task_list
        self._binding = binding
        self._refreshing = False
        self._build_ui()
        self.refresh()

    # ── build ─────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 8, 0, 0)
        layout.setSpacing(6)

        header = QLabel("What are your goals today?")
        header.setAlignment(Qt.AlignmentFlag.AlignCenter)
        header.setStyleSheet("font-size: 13px; font-weight: 600;")
        layout.addWidget(header)

        self._list = QListWidget(self)
        self._list.setDragDropMode(QAbstractItemView.DragDropMode.InternalMove)
        self._list.setDefaultDropAction(Qt.DropAction.MoveAction)
        self._list.setEditTriggers(
            QAbstractItemView.EditTrigger.DoubleClicked
            | QAbstractItemView.EditTrigger.EditKeyPressed
        )
        self._list.itemChanged.connect(self._on_item_changed)
        self._list.itemClicked.connect(self._on_item_clicked)
        self._list.model().rowsMoved.connect(self._on_rows_moved)
        layout.addWidget(self._list)

        add_row = QHBoxLayout()
        self._input = QLineEdit(self)
        self._input.setPlaceholderText("Add a task")
        self._input.setMaxLength(255)
        self._input.returnPressed.connect(self._on_add)
        add_row.addWidget(self._input)

        clear_btn = QPushButton("Clear", self)
        clear_btn.setObjectName("secondaryButton")
        clear_btn.clicked.connect(self._on_clear)
        add_row.addWidget(clear_btn)
        layout.addLayout(add_row)

    # ── refresh ───────────────────────────────────────────────────────

    def refresh(self) -> None:
        """Reload rows from the task store."""
        self._refreshing = True
        try:
            self._list.clear()
            current = self._binding.current_task
            for task in self._task_list.items():
                item = QListWidgetItem(task.text)
                item.setData(Qt.ItemDataRole.UserRole, task.id)
                item.setFlags(
                    item.flags()
                    | Qt.ItemFlag.ItemIsUserCheckable
                    | Qt.ItemFlag.ItemIsEditable
                    | Qt.ItemFlag.ItemIsDragEnabled
                )
                item.setCheckState(
                    Qt.CheckState.Checked if task.completed else Qt.CheckState.Unchecked
                )
                if task.text == current:
                    font = item.font()
                    font.setBold(True)
                    item.setFont(font)
                self._list.addItem(item)
        finally:
            self._refreshing = False

    @property
    def row_count(self) -> int:
        return self._list.count()

    def row_texts(self) -> list[str]:
        return [self._list.item(i).text() for i in range(self._list.count())]

    # ── slots ─────────────────────────────────────────────────────────

    def _on_add(self) -> None:
        if self._task_list.add(self._input.text()) is not None:
            self._input.clear()
            self._binding.select_first_incomplete()
            self.refresh()

    def _on_clear(self) -> None:
        self._task_list.reset()
        self._binding.clear()
        self.refresh()

    def _on_item_changed(self, item: QListWidgetItem) -> None:
        if self._refreshing:
            return
        task_id = item.data(Qt.ItemDataRole.UserRole)
        task = next((t for t in self._task_list.items() if t.id == task_id), None)
        if task is None:
            return

        done = item.checkState() == Qt.CheckState.Checked
        if task.completed != done:
            self._task_list.toggle(task_id)

        if item.text() != task.text:
            self._rename(task.text, task_id, item.text())

    def _rename(self, old_text: str, task_id: int, new_text: str) -> None:
        # blank edits are reverted
        if not new_text.strip():
            self.refresh()
            return
        renamed = self._task_list.rename(task_id, new_text)
        if renamed is not None and self._binding.current_task == old_text:
            self._binding.select(renamed.text)
        self.refresh()

    def _on_rows_moved(
        self, _parent: QModelIndex, start: int, end: int,
        _destination: QModelIndex, row: int,
    ) -> None:
        if self._refreshing:
            return
        new_index = row if row < start else row - (end - start + 1)
        item = self._list.item(new_index)
        if item is None:
            return
        self._task_list.move(item.data(Qt.ItemDataRole.UserRole), new_index)

    def _on_item_clicked(self, item: QListWidgetItem) -> None:
        self.select_text(item.text())

    def select_text(self, text: str) -> None:
        self._binding.select(text)
        self.refresh()
