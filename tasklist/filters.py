from enum import Enum
from typing import Iterable, List, TypeVar

T = TypeVar('T')


class TaskFilter(str, Enum):
    ALL = 'all'
    CHECKED = 'checked'
    UNCHECKED = 'unchecked'
    REMOVED = 'removed'


FILTER_LABELS = {
    TaskFilter.ALL: 'All tasks',
    TaskFilter.CHECKED: 'Completed tasks',
    TaskFilter.UNCHECKED: 'Current tasks',
    TaskFilter.REMOVED: 'Trash',
}


def filter_label(mode: TaskFilter | str) -> str:
    try:
        return FILTER_LABELS[TaskFilter(mode)]
    except ValueError:
        return 'Filter'


def matches(task, mode: TaskFilter | str) -> bool:
    """Return True if task is visible under mode.

    Removed tasks only ever show in the trash.
    """
    mode = TaskFilter(mode)
    if mode is TaskFilter.REMOVED:
        return bool(task.removed)
    if task.removed:
        return False
    if mode is TaskFilter.CHECKED:
        return bool(task.checked)
    if mode is TaskFilter.UNCHECKED:
        return not task.checked
    return True


def filter_tasks(tasks: Iterable[T], mode: TaskFilter | str) -> List[T]:
    """Visible subsequence of tasks for mode, in their original order."""
    mode = TaskFilter(mode)
    return [t for t in tasks if matches(t, mode)]
