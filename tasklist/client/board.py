"""Client-side task state.

``TaskBoard`` is the single owner of the task collection shown to a user. All
mutations go through its methods: they update the local copy at once and
mirror the change to the server in the background. Remote failures are logged
and otherwise ignored; ``load()`` re-syncs from the server.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, List, Optional

from ..errors import ApiError
from ..filters import TaskFilter, filter_tasks
from ..schemas import TaskRead
from .debounce import Debouncer

logger = logging.getLogger(__name__)

_UNSET = object()


class TaskField(str, Enum):
    VALUE = 'value'
    CHECKED = 'checked'
    REMOVED = 'removed'
    COMPLETED_AT = 'completedAt'

    @property
    def attr(self) -> str:
        """Attribute name on TaskRead."""
        return 'completed_at' if self is TaskField.COMPLETED_AT else self.value


_FIELD_TYPES = {
    TaskField.VALUE: (str,),
    TaskField.CHECKED: (bool,),
    TaskField.REMOVED: (bool,),
    TaskField.COMPLETED_AT: (date, type(None)),
}


@dataclass(frozen=True)
class TaskEdit:
    """A single-field change to one task."""
    task_id: int
    field: TaskField
    value: Any

    def __post_init__(self):
        field = TaskField(self.field)
        object.__setattr__(self, 'field', field)
        value = self.value
        if isinstance(value, datetime):
            value = value.date()
            object.__setattr__(self, 'value', value)
        if not isinstance(value, _FIELD_TYPES[field]):
            raise TypeError(f"{field.value} expects {_FIELD_TYPES[field][0].__name__}, got {type(value).__name__}")


class TaskBoard:

    def __init__(self, api, debouncer: Debouncer = None):
        self.api = api
        self.debouncer = debouncer if debouncer is not None else Debouncer()
        self._tasks: List[TaskRead] = []
        self.filter = TaskFilter.ALL
        # new-task form state
        self.draft_text = ''
        self.draft_date: Optional[date] = date.today()
        self._closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @property
    def tasks(self) -> tuple:
        return tuple(self._tasks)

    def visible(self) -> List[TaskRead]:
        return filter_tasks(self._tasks, self.filter)

    def set_filter(self, mode: TaskFilter | str) -> None:
        self.filter = TaskFilter(mode)

    @property
    def can_empty_trash(self) -> bool:
        return self.filter is TaskFilter.REMOVED and any(t.removed for t in self._tasks)

    @property
    def accepts_new_tasks(self) -> bool:
        # the create form is only shown where a new unchecked task would appear
        return self.filter in (TaskFilter.ALL, TaskFilter.UNCHECKED)

    @property
    def pending_updates(self) -> List[int]:
        """Ids of tasks with an update still waiting for its quiet window."""
        return sorted({key[0] for key in self.debouncer.pending_keys})

    @staticmethod
    def is_editable(task: TaskRead, field: TaskField) -> bool:
        if field is TaskField.CHECKED:
            return not task.removed
        if field in (TaskField.VALUE, TaskField.COMPLETED_AT):
            return not (task.checked or task.removed)
        return True

    def load(self) -> List[TaskRead]:
        """Replace local state with the server's full task list.

        Unlike the write paths, a failure here propagates as ApiError.
        """
        tasks = self.api.list_tasks()
        self._tasks = list(tasks)
        logger.debug('loaded %d task(s)', len(self._tasks))
        return list(self._tasks)

    def _index_of(self, task_id: int) -> Optional[int]:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return None

    def edit(self, change: TaskEdit) -> bool:
        """Apply change locally now and schedule the debounced server update.

        Returns False when no local task has the given id, or when the task's
        state locks the field: a removed task cannot be (un)checked, and a
        checked or removed task keeps its text and date.
        """
        if self._closed:
            raise RuntimeError('board is closed')
        idx = self._index_of(change.task_id)
        if idx is None:
            logger.debug('edit for unknown task id=%s ignored', change.task_id)
            return False
        task = self._tasks[idx]
        if not self.is_editable(task, change.field):
            logger.debug('edit of %s on task id=%s is locked', change.field.value, task.id)
            return False
        updated = task.model_copy(update={change.field.attr: change.value})
        self._tasks[idx] = updated
        # the snapshot is taken now; edits to other fields of the same task
        # are sent by their own timers
        self.debouncer.schedule((change.task_id, change.field), self._send_update, updated)
        return True

    def set_value(self, task_id: int, value: str) -> bool:
        return self.edit(TaskEdit(task_id, TaskField.VALUE, value))

    def set_completed_at(self, task_id: int, day: Optional[date]) -> bool:
        return self.edit(TaskEdit(task_id, TaskField.COMPLETED_AT, day))

    def toggle_checked(self, task_id: int) -> bool:
        idx = self._index_of(task_id)
        if idx is None:
            return False
        return self.edit(TaskEdit(task_id, TaskField.CHECKED, not self._tasks[idx].checked))

    def toggle_removed(self, task_id: int) -> bool:
        idx = self._index_of(task_id)
        if idx is None:
            return False
        return self.edit(TaskEdit(task_id, TaskField.REMOVED, not self._tasks[idx].removed))

    def _send_update(self, snapshot: TaskRead) -> None:
        try:
            self.api.update_task(snapshot)
        except ApiError as e:
            logger.warning('update for task id=%s not saved: %s', snapshot.id, e)

    def sync_now(self) -> int:
        """Send every pending update immediately. Returns how many were sent."""
        return self.debouncer.flush()

    def set_draft(self, text: str = _UNSET, day: Optional[date] = _UNSET) -> None:
        """Change the new-task form. Arguments left out keep their value;
        ``day=None`` clears the date."""
        if text is not _UNSET:
            self.draft_text = text
        if day is not _UNSET:
            self.draft_date = day

    def submit(self) -> Optional[TaskRead]:
        """Create a task from the draft; returns it, or None if nothing was added.

        Nothing is sent without text and a date, or while the filter hides
        unchecked tasks. The draft is cleared as soon as the request goes
        out, whether or not the server accepts it.
        """
        if self._closed:
            raise RuntimeError('board is closed')
        if not self.accepts_new_tasks:
            return None
        text, day = self.draft_text, self.draft_date
        if not text or not day:
            return None
        fields = {'value': text, 'checked': False, 'removed': False, 'completedAt': day.isoformat()}
        self.draft_text = ''
        self.draft_date = date.today()
        try:
            created = self.api.create_task(fields)
        except ApiError as e:
            logger.warning('create for %r not saved: %s', text, e)
            return None
        self._tasks.append(created)
        return created

    def empty_trash(self) -> int:
        """Permanently delete every removed task. Only works from the trash view.

        Local state drops the removed tasks without waiting for the server.
        Returns the number of tasks dropped.
        """
        if self.filter is not TaskFilter.REMOVED:
            return 0
        ids = [t.id for t in self._tasks if t.removed]
        if not ids:
            return 0
        # pending edits to purged tasks would only hit missing rows
        for task_id in ids:
            for field in TaskField:
                self.debouncer.cancel((task_id, field))
        try:
            self.api.delete_tasks(ids)
        except ApiError as e:
            logger.warning('purge of %d task(s) not saved: %s', len(ids), e)
        self._tasks = [t for t in self._tasks if not t.removed]
        return len(ids)

    def close(self) -> None:
        """Tear down: pending debounced updates are dropped, not sent."""
        if self._closed:
            return
        self._closed = True
        dropped = self.debouncer.close()
        if dropped:
            logger.debug('dropped %d pending update(s) on close', dropped)
