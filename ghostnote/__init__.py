"""
GhostNote Backend — Application Package Initializer
===================================================

What: Marks the `ghostnote` directory as a Python package.
Who:  Imported by uvicorn (`ghostnote.main:app`), Alembic, and pytest.

Architecture Note:
    The backend is a thin pass-through store for client-side encrypted notes:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, auth gate
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Validation, burn-after-read
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    The server never decrypts anything. `content`, `image_data` and `image_iv`
    are opaque strings that go into the `notes` table and come back out unchanged.
"""

__version__ = "1.0.0"
