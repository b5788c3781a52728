"""
Bloglist — Application Package Initializer
===========================================

What: Marks the `bloglist` directory as a Python package.
Who:  Used by uvicorn (`uvicorn bloglist.main:app`), Alembic, and pytest.

Architecture Note:
    The backend follows a layered layout:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← auth, blogs, users
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    The `bloglist.client` subpackage is the consumer side: an HTTP client for
    the REST surface, a reducer store, a notification scheduler and the list
    rendering components that read from the store.
"""

__version__ = "1.0.0"
