"""
NoteTaker Backend: Note Service Tests
======================================

What:  Tests for NoteService (list, get, create, reset).
How:   Behavioural tests run against a real SQLite file through aiosqlite;
       failure-path tests use a mocked session factory.

What we test:
    ✅ Create then get returns the stored title/contents
    ✅ Unknown id yields an empty list, not an error
    ✅ Non-integer ids fail with DatabaseError
    ✅ Reset empties the table and restarts ids at 1
    ✅ Concurrent creates receive distinct ids
    ✅ Store errors are wrapped in DatabaseError
    ✅ Reset issues the dialect's truncate statement
"""

import asyncio

import pytest
from unittest.mock import AsyncMock, patch
from sqlalchemy.exc import OperationalError

from notetaker.exceptions import DatabaseError
from notetaker.services.note_service import NoteService, RESET_MESSAGE


class TestNoteServiceCreateAndGet:
    """Round trips through the real store."""

    @pytest.mark.asyncio
    async def test_create_note_returns_persisted_row(self, note_service):
        note = await note_service.create_note("groceries", "milk, eggs")

        assert note.id == 1
        assert note.title == "groceries"
        assert note.contents == "milk, eggs"

    @pytest.mark.asyncio
    async def test_get_note_after_create(self, note_service):
        created = await note_service.create_note("a", "b")

        rows = await note_service.get_note(created.id)

        assert len(rows) == 1
        assert rows[0].id == created.id
        assert rows[0].title == "a"
        assert rows[0].contents == "b"

    @pytest.mark.asyncio
    async def test_get_note_accepts_numeric_string(self, note_service):
        created = await note_service.create_note("a", "b")

        rows = await note_service.get_note(str(created.id))

        assert [row.id for row in rows] == [created.id]

    @pytest.mark.asyncio
    async def test_get_unknown_note_returns_empty_list(self, note_service):
        assert await note_service.get_note(12345) == []

    @pytest.mark.asyncio
    async def test_create_note_with_missing_fields(self, note_service):
        note = await note_service.create_note(None, None)

        assert note.title is None
        assert note.contents is None

    @pytest.mark.asyncio
    async def test_values_are_bound_not_interpolated(self, note_service):
        """Quotes and SQL fragments are stored verbatim."""
        hostile = "x'); DROP TABLE notes; --"
        note = await note_service.create_note(hostile, "it's fine")

        rows = await note_service.get_note(note.id)

        assert rows[0].title == hostile
        assert rows[0].contents == "it's fine"
        assert len(await note_service.list_notes()) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad_id", [None, "", "abc", "1 OR 1=1", "1.5"])
    async def test_get_note_rejects_non_integer_id(self, note_service, bad_id):
        with pytest.raises(DatabaseError, match="not an integer"):
            await note_service.get_note(bad_id)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "large_id", [3000000000, 10 ** 20, -(2 ** 31) - 1, "100000000000000000000"]
    )
    async def test_get_note_out_of_range_id_returns_empty_list(self, note_service, large_id):
        await note_service.create_note("t", "c")

        assert await note_service.get_note(large_id) == []


class TestNoteServiceListAndReset:

    @pytest.mark.asyncio
    async def test_list_notes_empty(self, note_service):
        assert await note_service.list_notes() == []

    @pytest.mark.asyncio
    async def test_list_notes_returns_every_created_note(self, note_service):
        for i in range(3):
            await note_service.create_note(f"title {i}", f"contents {i}")

        notes = await note_service.list_notes()

        assert sorted(n.title for n in notes) == ["title 0", "title 1", "title 2"]
        assert len({n.id for n in notes}) == 3

    @pytest.mark.asyncio
    async def test_reset_returns_fixed_descriptor(self, note_service):
        result = await note_service.reset_notes()

        assert result == {"success": True, "message": RESET_MESSAGE}
        assert RESET_MESSAGE == "Notes table has been reset"

    @pytest.mark.asyncio
    async def test_reset_empties_table_and_restarts_ids(self, note_service):
        for _ in range(3):
            await note_service.create_note("t", "c")

        await note_service.reset_notes()

        assert await note_service.list_notes() == []
        note = await note_service.create_note("fresh", "start")
        assert note.id == 1

    @pytest.mark.asyncio
    async def test_concurrent_creates_get_unique_ids(self, note_service):
        count = 10
        notes = await asyncio.gather(
            *(note_service.create_note(f"n{i}", "body") for i in range(count))
        )

        ids = [note.id for note in notes]
        assert len(set(ids)) == count
        assert len(await note_service.list_notes()) == count


class TestNoteServiceFailures:
    """Failure paths with a mocked session."""

    @pytest.mark.asyncio
    async def test_list_notes_wraps_store_error(
        self, mock_engine, mock_session, mock_session_factory
    ):
        mock_session.execute.side_effect = OperationalError(
            "SELECT", {}, Exception("connection refused")
        )
        service = NoteService(mock_engine, session_factory=mock_session_factory)

        with pytest.raises(DatabaseError) as exc_info:
            await service.list_notes()

        assert exc_info.value.context["error_type"] == "OperationalError"
        assert isinstance(exc_info.value.__cause__, OperationalError)

    @pytest.mark.asyncio
    async def test_create_note_wraps_commit_error(
        self, mock_engine, mock_session, mock_session_factory
    ):
        mock_session.commit.side_effect = OperationalError(
            "INSERT", {}, Exception("disk full")
        )
        service = NoteService(mock_engine, session_factory=mock_session_factory)

        with pytest.raises(DatabaseError, match="Could not create"):
            await service.create_note("t", "c")

    @pytest.mark.asyncio
    async def test_create_note_fails_when_read_back_is_empty(
        self, mock_engine, mock_session, mock_session_factory
    ):
        def assign_id(note):
            note.id = 7

        mock_session.add.side_effect = assign_id
        service = NoteService(mock_engine, session_factory=mock_session_factory)

        with patch.object(service, "get_note", AsyncMock(return_value=[])) as get_note:
            with pytest.raises(DatabaseError, match="read back"):
                await service.create_note("t", "c")

        get_note.assert_awaited_once_with(7)

    @pytest.mark.asyncio
    async def test_reset_propagates_store_error(
        self, mock_engine, mock_session, mock_session_factory
    ):
        mock_session.execute.side_effect = OperationalError(
            "TRUNCATE", {}, Exception("lock timeout")
        )
        service = NoteService(mock_engine, session_factory=mock_session_factory)

        with pytest.raises(DatabaseError):
            await service.reset_notes()
        mock_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "dialect, statement",
        [
            ("postgresql", "TRUNCATE TABLE notes RESTART IDENTITY"),
            ("mysql", "TRUNCATE TABLE notes"),
            ("sqlite", "DELETE FROM notes"),
        ],
    )
    async def test_reset_uses_dialect_statement(
        self, mock_engine, mock_session, mock_session_factory, dialect, statement
    ):
        mock_engine.dialect.name = dialect
        service = NoteService(mock_engine, session_factory=mock_session_factory)

        await service.reset_notes()

        executed = [str(call.args[0]) for call in mock_session.execute.await_args_list]
        assert executed == [statement]
        assert mock_session.execute.await_count == 1
        mock_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_out_of_range_id_skips_the_store(
        self, mock_engine, mock_session, mock_session_factory
    ):
        service = NoteService(mock_engine, session_factory=mock_session_factory)

        assert await service.get_note(2 ** 31) == []
        mock_session.execute.assert_not_awaited()
