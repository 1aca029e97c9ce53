"""
NoteTaker Backend: Application Package
======================================

What: A small notes API (create, list, fetch, reset) over a relational store.
Who:  Imported by uvicorn (`notetaker.main:app`), Alembic, and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     NoteService (Persistence)       │  ← One statement per operation
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Engine/Pool)       │  ← Async SQLAlchemy engine
    └─────────────────────────────────────┘

    The engine is built once in the application lifespan and handed to
    NoteService; routes reach the service through a FastAPI dependency.
"""

__version__ = "1.0.0"
