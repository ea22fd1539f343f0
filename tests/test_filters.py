import pytest
from types import SimpleNamespace
from tasklist.filters import TaskFilter, filter_tasks, filter_label, matches


def _t(id, checked, removed):
    return SimpleNamespace(id=id, checked=checked, removed=removed)


TASKS = [
    _t(1, False, False),
    _t(2, True, False),
    _t(3, False, True),
    _t(4, True, True),
    _t(5, False, False),
]


@pytest.mark.parametrize('mode,expected', [
    ('all', [1, 2, 5]),
    ('checked', [2]),
    ('unchecked', [1, 5]),
    ('removed', [3, 4]),
])
def test_filter_predicates(mode, expected):
    assert [t.id for t in filter_tasks(TASKS, mode)] == expected


def test_all_and_removed_partition_everything():
    visible = filter_tasks(TASKS, TaskFilter.ALL)
    trash = filter_tasks(TASKS, TaskFilter.REMOVED)
    ids = sorted(t.id for t in visible + trash)
    assert ids == [t.id for t in TASKS]
    assert not set(t.id for t in visible) & set(t.id for t in trash)


def test_checked_and_unchecked_cover_non_removed():
    checked = filter_tasks(TASKS, TaskFilter.CHECKED)
    unchecked = filter_tasks(TASKS, TaskFilter.UNCHECKED)
    non_removed = [t.id for t in TASKS if not t.removed]
    assert sorted(t.id for t in checked + unchecked) == non_removed
    assert not set(t.id for t in checked) & set(t.id for t in unchecked)


def test_filter_preserves_order_and_does_not_mutate():
    reordered = list(reversed(TASKS))
    assert [t.id for t in filter_tasks(reordered, 'all')] == [5, 2, 1]
    assert [t.id for t in reordered] == [5, 4, 3, 2, 1]


def test_unknown_mode_raises():
    with pytest.raises(ValueError):
        filter_tasks(TASKS, 'archived')
    with pytest.raises(ValueError):
        matches(TASKS[0], 'archived')


def test_labels():
    assert filter_label('all') == 'All tasks'
    assert filter_label(TaskFilter.CHECKED) == 'Completed tasks'
    assert filter_label('unchecked') == 'Current tasks'
    assert filter_label('removed') == 'Trash'
    assert filter_label('nope') == 'Filter'
