from typing import Optional
from datetime import date
from sqlmodel import SQLModel, Field


class Task(SQLModel, table=True):
    """One to-do item. Rows are only hard-deleted when the trash is emptied."""
    id: Optional[int] = Field(default=None, primary_key=True)
    value: str
    checked: bool = Field(default=False)
    # soft-delete flag; removed rows live in the trash view until purged
    removed: bool = Field(default=False, index=True)
    # target/completion date chosen by the user
    completed_at: Optional[date] = None
