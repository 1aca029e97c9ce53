"""
NoteTaker Backend: Note SQLAlchemy Model
=========================================

What:  ORM model for the `notes` table.
Who:   Queried by NoteService; read by Alembic for schema management.

Table Design:
    - id:       INTEGER primary key, assigned by the store on insert
    - title:    TEXT, nullable (the API does not require it)
    - contents: TEXT, nullable

Lifecycle:
    Created by insert, read any number of times, never updated, removed only
    by the reset operation (which also restarts the id sequence).
"""

from typing import Optional

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from notetaker.database import Base


class Note(Base):
    """A single note row."""

    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    title: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    contents: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r})>"
