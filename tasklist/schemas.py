"""Wire shapes for tasks.

The JSON contract uses ``completedAt``; Python code uses ``completed_at``.
Both the server handlers and the client parse through these models so the
alias lives in one place.
"""
from datetime import date
from typing import Annotated, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, StrictBool


def _date_or_none(v):
    # falsy dates (missing, null, "") are stored as null
    if not v:
        return None
    if isinstance(v, str) and 'T' in v:
        # browsers send full ISO timestamps for date pickers
        return v.split('T', 1)[0]
    return v


TaskDate = Annotated[Optional[date], BeforeValidator(_date_or_none)]


class TaskPayload(BaseModel):
    """Body of ``{"input": ...}`` for create and update.

    Every field is optional here; the store decides what it accepts. Flags
    must be JSON booleans, not "true" or 1.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None
    value: Optional[str] = None
    checked: Optional[StrictBool] = None
    removed: Optional[StrictBool] = None
    completed_at: TaskDate = Field(default=None, alias='completedAt')


class TaskRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: int
    value: str
    checked: bool = False
    removed: bool = False
    completed_at: TaskDate = Field(default=None, alias='completedAt')

    def to_json(self) -> dict:
        return self.model_dump(mode='json', by_alias=True)


def serialize_task(task) -> dict:
    return TaskRead.model_validate(task).to_json()
