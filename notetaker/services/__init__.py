# Services package init
"""
NoteTaker Backend: Services Layer
==================================

What:  The persistence layer sitting between routes (HTTP) and the database.

Service Inventory:
    - NoteService: list, fetch, create and reset notes over the async engine

A single NoteService is built per application (in the lifespan) around the
shared engine and stored on `app.state`; routes obtain it with
`Depends(get_note_service)`.
"""
