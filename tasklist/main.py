from fastapi import FastAPI, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError as PydanticValidationError
from contextlib import asynccontextmanager
from pathlib import Path
import logging
import sys

from . import config
from . import store
from .db import init_db, DATABASE_URL
from .errors import TaskListError, ValidationError, StoreError
from .filters import TaskFilter, filter_label, filter_tasks
from .schemas import TaskPayload, serialize_task

logger = logging.getLogger(__name__)
# Ensure INFO-level messages from this module appear on the server console when
# no handlers are configured (safe fallback for development/testing).
if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    formatter = logging.Formatter('%(asctime)s %(levelname)s:%(name)s: %(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)
logger.setLevel(getattr(logging, config.LOG_LEVEL, logging.INFO))


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    logger.info('starting server using DATABASE_URL=%s', DATABASE_URL)
    yield


app = FastAPI(lifespan=lifespan)

TEMPLATES = Jinja2Templates(directory=str(Path(__file__).resolve().parent / 'templates'))


@app.exception_handler(TaskListError)
async def _task_list_error_handler(request: Request, exc: TaskListError):
    return JSONResponse(exc.to_payload(), status_code=exc.status_code)


async def _read_json(request: Request):
    try:
        return await request.json()
    except Exception:
        raise ValidationError('invalid JSON')


async def _read_task_input(request: Request) -> TaskPayload:
    """Pull the ``input`` object out of a create/update body."""
    payload = await _read_json(request)
    raw = payload.get('input') if isinstance(payload, dict) else None
    if not isinstance(raw, dict):
        raise ValidationError('input is required')
    try:
        return TaskPayload.model_validate(raw)
    except PydanticValidationError as e:
        raise ValidationError(f'invalid input: {e.errors(include_url=False)}')


@app.get('/todos')
async def list_todos():
    """Return every task in insertion order; filtering is left to clients."""
    try:
        tasks = await store.find_all()
    except Exception as e:
        logger.exception('GET /todos: store failure')
        raise StoreError(e) from e
    if tasks is None:
        if config.LIST_NULL_AS_EMPTY:
            return []
        logger.error('GET /todos: store returned no result')
        raise StoreError(RuntimeError('No todos found'))
    return [serialize_task(t) for t in tasks]


@app.post('/todos')
async def create_todo(request: Request):
    """
    Create a task. Expects JSON payload ``{"input": {...}}`` with:
    - value: str
    - checked: bool (optional, default false)
    - removed: bool (optional, default false)
    - completedAt: date (optional; falsy means null)
    Any id in the input is ignored; the store assigns one.
    """
    data = await _read_task_input(request)
    try:
        task = await store.create_task(data)
    except Exception as e:
        logger.exception('POST /todos: store failure')
        raise StoreError(e) from e
    logger.info('POST /todos created task id=%s', task.id)
    return serialize_task(task)


@app.patch('/todos')
async def update_todo(request: Request):
    """Overwrite all mutable fields of the task named by ``input.id``."""
    data = await _read_task_input(request)
    try:
        task = await store.update_task(data)
    except Exception as e:
        logger.exception('PATCH /todos: store failure for id=%s', data.id)
        raise StoreError(e) from e
    return serialize_task(task)


@app.delete('/todos')
async def delete_todos(request: Request):
    """Permanently delete the tasks whose ids are listed in ``{"ids": [...]}``."""
    payload = await _read_json(request)
    ids = payload.get('ids') if isinstance(payload, dict) else None
    if ids is None:
        raise ValidationError('ids are required')
    if not isinstance(ids, list) or not all(isinstance(i, int) and not isinstance(i, bool) for i in ids):
        raise ValidationError('ids must be a list of integers')
    try:
        count = await store.delete_tasks(ids)
    except Exception as e:
        logger.exception('DELETE /todos: store failure')
        raise StoreError(e) from e
    logger.info('DELETE /todos removed %d task(s)', count)
    return {'count': count}


@app.get('/', response_class=HTMLResponse)
async def index(request: Request, mode: str = Query('all', alias='filter')):
    try:
        current = TaskFilter(mode)
    except ValueError:
        raise ValidationError(f'unknown filter: {mode}')
    try:
        tasks = await store.find_all()
    except Exception as e:
        logger.exception('GET /: store failure')
        raise StoreError(e) from e
    tasks = tasks or []
    ctx = {
        'tasks': filter_tasks(tasks, current),
        'current_filter': current,
        'filters': list(TaskFilter),
        'label': filter_label,
        'trash_count': len(filter_tasks(tasks, TaskFilter.REMOVED)),
    }
    return TEMPLATES.TemplateResponse(request, 'index.html', ctx)
