"""Persistence operations for tasks.

Each function opens its own session and performs exactly one write or read.
Exceptions are not translated here; the HTTP layer decides how to report them.
"""
from sqlmodel import select
from sqlalchemy import delete as sqlalchemy_delete

import logging

from .db import async_session
from .models import Task
from .schemas import TaskPayload

logger = logging.getLogger(__name__)


class TaskNotFound(LookupError):
    pass


async def find_all() -> list[Task]:
    async with async_session() as sess:
        res = await sess.exec(select(Task).order_by(Task.id))
        return list(res.all())


async def create_task(payload: TaskPayload) -> Task:
    # fields left out fall back to column defaults; a missing value is
    # rejected by the NOT NULL constraint
    fields = payload.model_dump(exclude_none=True, exclude={'id'})
    async with async_session() as sess:
        task = Task(**fields)
        sess.add(task)
        try:
            await sess.commit()
        except Exception:
            await sess.rollback()
            raise
        await sess.refresh(task)
        logger.debug('created task id=%s', task.id)
        return task


async def update_task(payload: TaskPayload) -> Task:
    """Overwrite value, checked, removed and completed_at of one task."""
    if payload.id is None:
        raise TaskNotFound('record to update not found (no id given)')
    async with async_session() as sess:
        task = await sess.get(Task, payload.id)
        if task is None:
            raise TaskNotFound(f'record to update not found (id={payload.id})')
        task.value = payload.value
        task.checked = payload.checked
        task.removed = payload.removed
        task.completed_at = payload.completed_at
        sess.add(task)
        try:
            await sess.commit()
        except Exception:
            await sess.rollback()
            raise
        await sess.refresh(task)
        return task


async def delete_tasks(ids: list[int]) -> int:
    """Delete every task whose id is in ids; unknown ids are ignored."""
    if not ids:
        return 0
    async with async_session() as sess:
        res = await sess.execute(sqlalchemy_delete(Task).where(Task.id.in_(ids)))
        await sess.commit()
        count = res.rowcount or 0
        logger.debug('deleted %d task(s) for ids=%s', count, ids)
        return count
