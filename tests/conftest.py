import os
import sys
import pathlib
import tempfile
import warnings
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import delete as sqlalchemy_delete
try:
    from sqlalchemy.exc import SAWarning
    warnings.filterwarnings('ignore', category=SAWarning)
except Exception:
    # If SQLAlchemy not available at import, ignore
    pass

# Point the app at a throwaway SQLite file before tasklist.db creates its
# engine. One file per test session; rows are cleared per test.
_TEST_DB = os.path.join(tempfile.gettempdir(), f'tasklist_test_{os.getpid()}.db')
os.environ['DATABASE_URL'] = f'sqlite+aiosqlite:///{_TEST_DB}'

# Reduce SQLAlchemy logger verbosity during tests
import logging as _logging
for _name in ('sqlalchemy', 'sqlalchemy.engine', 'sqlalchemy.pool', 'sqlmodel'):
    _logging.getLogger(_name).setLevel(_logging.ERROR)

# ensure project root is on PYTHONPATH for test runs
ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from tasklist.main import app
from tasklist.db import init_db, async_session
from tasklist.models import Task
from tasklist.errors import ApiError
from tasklist.schemas import TaskRead


@pytest_asyncio.fixture
async def ensure_db():
    await init_db()
    async with async_session() as sess:
        await sess.execute(sqlalchemy_delete(Task))
        await sess.commit()


@pytest_asyncio.fixture
async def client(ensure_db):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# --- Client-side fakes ---
# The board tests drive TaskBoard without a server: FakeApi keeps tasks in
# memory and records every call, FakeTimerFactory stands in for
# threading.Timer so debounced calls fire only when a test says so.

class FakeTimer:
    def __init__(self, interval, function, args=None, kwargs=None):
        self.interval = interval
        self.function = function
        self.args = args or ()
        self.kwargs = kwargs or {}
        self.daemon = False
        self.started = False
        self.cancelled = False
        self.fired = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if self.cancelled or self.fired:
            return
        self.fired = True
        self.function(*self.args, **self.kwargs)


class FakeTimerFactory:
    def __init__(self):
        self.timers = []

    def __call__(self, interval, function, args=None, kwargs=None):
        t = FakeTimer(interval, function, args=args, kwargs=kwargs)
        self.timers.append(t)
        return t

    def live(self):
        return [t for t in self.timers if t.started and not t.cancelled and not t.fired]

    def fire_all(self):
        for t in self.live():
            t.fire()


class FakeApi:
    def __init__(self, tasks=None):
        self.tasks = [TaskRead.model_validate(t) for t in (tasks or [])]
        self.calls = []
        self.fail = False
        self._next_id = max([t.id for t in self.tasks], default=0) + 1

    def _maybe_fail(self, name):
        if self.fail:
            raise ApiError(f'{name} failed', 500, {'error': {'error': 'boom'}})

    def calls_named(self, name):
        return [c for c in self.calls if c[0] == name]

    def list_tasks(self):
        self.calls.append(('list',))
        self._maybe_fail('list')
        return list(self.tasks)

    def create_task(self, fields):
        self.calls.append(('create', dict(fields)))
        self._maybe_fail('create')
        task = TaskRead.model_validate({**fields, 'id': self._next_id})
        self._next_id += 1
        self.tasks.append(task)
        return task

    def update_task(self, task):
        self.calls.append(('update', task))
        self._maybe_fail('update')
        self.tasks = [task if t.id == task.id else t for t in self.tasks]
        return task

    def delete_tasks(self, ids):
        self.calls.append(('delete', list(ids)))
        self._maybe_fail('delete')
        before = len(self.tasks)
        self.tasks = [t for t in self.tasks if t.id not in set(ids)]
        return before - len(self.tasks)


@pytest.fixture
def fake_timers():
    return FakeTimerFactory()


@pytest.fixture
def sample_tasks():
    return [
        {'id': 1, 'value': 'buy milk', 'checked': False, 'removed': False, 'completedAt': '2024-01-01'},
        {'id': 2, 'value': 'file taxes', 'checked': True, 'removed': False, 'completedAt': '2024-04-15'},
        {'id': 3, 'value': 'old idea', 'checked': False, 'removed': True, 'completedAt': None},
        {'id': 4, 'value': 'done and binned', 'checked': True, 'removed': True, 'completedAt': '2023-12-31'},
    ]


@pytest.fixture
def fake_api(sample_tasks):
    return FakeApi(sample_tasks)


def pytest_sessionfinish(session, exitstatus):
    """Remove the throwaway database file at the end of the run."""
    try:
        os.remove(_TEST_DB)
    except OSError:
        pass
