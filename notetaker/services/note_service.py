"""
NoteTaker Backend: Note Service (Persistence Layer)
====================================================

What:  Translates the four note operations into statements against the
       pooled async engine and shapes the results.
Who:   Called by the route handlers in routes/notes.py.

Operations:
    list_notes()                 SELECT every row, store default order
    get_note(note_id)            SELECT by id, returns a list of 0 or 1 rows
    create_note(title, contents) INSERT, then get_note(new id)
    reset_notes()                TRUNCATE (restarting the id sequence)

Each operation opens its own session, so it borrows a pooled connection for
its statement and returns it afterwards. create_note is two independent
borrow/return cycles. There is no cross-operation atomicity: a concurrent
reset may land between the insert and the read-back.

All values are bound parameters; query text is never built from user input.

Error Handling:
    SQLAlchemyError from the driver or the store is logged and wrapped in
    DatabaseError. Nothing is retried.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from starlette.requests import Request

from notetaker.database import build_session_factory
from notetaker.exceptions import DatabaseError
from notetaker.models.note import Note

logger = logging.getLogger(__name__)

RESET_MESSAGE = "Notes table has been reset"

# Statement that empties the table and restarts its id counter, per dialect.
# SQLite reuses max(rowid) + 1 for tables without AUTOINCREMENT, so an empty
# table starts again at 1.
_RESET_STATEMENTS: Dict[str, str] = {
    "postgresql": f"TRUNCATE TABLE {Note.__tablename__} RESTART IDENTITY",
    "mysql": f"TRUNCATE TABLE {Note.__tablename__}",
    "mariadb": f"TRUNCATE TABLE {Note.__tablename__}",
    "sqlite": f"DELETE FROM {Note.__tablename__}",
}
_DEFAULT_RESET = f"TRUNCATE TABLE {Note.__tablename__}"

# Bounds of the 32-bit INTEGER id column. Keys outside them can never match a
# row; drivers reject them at bind time (asyncpg) or overflow (sqlite3).
ID_MIN = -(2 ** 31)
ID_MAX = 2 ** 31 - 1


class NoteService:
    """
    Persistence layer for notes.

    Args:
        engine:          The application's async engine (owns the pool).
        session_factory: Optional override; defaults to a factory bound to
                         `engine`. Tests pass a mock here.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        session_factory: Optional[Callable[[], AsyncSession]] = None,
    ):
        self._engine = engine
        self._session_factory = session_factory or build_session_factory(engine)

    @property
    def dialect_name(self) -> str:
        return self._engine.dialect.name

    async def list_notes(self) -> List[Note]:
        """
        Return every note.

        No ORDER BY is applied; rows come back in the store's default order,
        which is usually but not necessarily insertion order.
        """
        try:
            async with self._session_factory() as session:
                result = await session.execute(select(Note))
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing notes: %s", str(e))
            raise DatabaseError(
                message="Could not retrieve notes",
                context={"error_type": type(e).__name__},
            ) from e

    async def get_note(self, note_id: Any) -> List[Note]:
        """
        Fetch the note whose id equals `note_id`.

        Args:
            note_id: Identifier as received from the client (usually a query
                     string value). Integer-like strings are accepted.

        Returns:
            A list holding the matching note, or an empty list when no row
            matches (including ids beyond the 32-bit column range). A
            missing note is not an error.

        Raises:
            DatabaseError: `note_id` is not an integer, or the query failed.
        """
        key = self._coerce_id(note_id)
        if not ID_MIN <= key <= ID_MAX:
            # No row can carry this id, so skip the round trip
            logger.debug("Note id %s outside the id column range", key)
            return []
        try:
            async with self._session_factory() as session:
                result = await session.execute(select(Note).where(Note.id == key))
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error fetching note %s: %s", key, str(e))
            raise DatabaseError(
                message="Could not retrieve the note",
                context={"note_id": key, "error_type": type(e).__name__},
            ) from e

    async def create_note(self, title: Optional[str], contents: Optional[str]) -> Note:
        """
        Insert a note and return the row as stored.

        The insert and the read-back run in separate sessions.

        Raises:
            DatabaseError: The insert failed, or the new row was gone before
                           it could be read back (e.g. a concurrent reset).
        """
        note = Note(title=title, contents=contents)
        try:
            async with self._session_factory() as session:
                session.add(note)
                await session.commit()
                new_id = note.id
        except SQLAlchemyError as e:
            logger.error("Database error creating note: %s", str(e))
            raise DatabaseError(
                message="Could not create the note",
                context={"error_type": type(e).__name__},
            ) from e

        logger.info("Note %s created", new_id)

        rows = await self.get_note(new_id)
        if not rows:
            raise DatabaseError(
                message="Created note could not be read back",
                context={"note_id": new_id},
            )
        return rows[0]

    async def reset_notes(self) -> Dict[str, Any]:
        """
        Remove every note and restart the id sequence.

        Returns:
            {"success": True, "message": "Notes table has been reset"}.
            Failures raise instead of returning success=False.
        """
        statement = _RESET_STATEMENTS.get(self.dialect_name, _DEFAULT_RESET)
        try:
            async with self._session_factory() as session:
                await session.execute(text(statement))
                await session.commit()
        except SQLAlchemyError as e:
            logger.error("Database error resetting notes: %s", str(e))
            raise DatabaseError(
                message="Could not reset the notes table",
                context={"dialect": self.dialect_name, "error_type": type(e).__name__},
            ) from e

        logger.warning("Notes table reset")
        return {"success": True, "message": RESET_MESSAGE}

    @staticmethod
    def _coerce_id(note_id: Any) -> int:
        if isinstance(note_id, bool):
            note_id = None
        try:
            return int(str(note_id).strip())
        except (TypeError, ValueError):
            raise DatabaseError(
                message="Note id is not an integer",
                context={"note_id": repr(note_id)},
            ) from None


# ── FastAPI Dependency ────────────────────────────────────────────────────
def get_note_service(request: Request) -> NoteService:
    """
    Provide the application's NoteService to a route handler.

    The lifespan (or a test fixture) stores the service on `app.state`.
    """
    return request.app.state.note_service
