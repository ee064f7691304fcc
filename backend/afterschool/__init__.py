"""
After School Lessons Backend — Application Package
=====================================================

What: The `afterschool` package: REST API, persistence and seeding utilities
      for the after-school lesson booking system.
Who:  Imported by uvicorn (afterschool.main:app), Alembic, the CLI tools and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, error translation
    ├─────────────────────────────────────┤
    │     Repositories (Store Façades)    │  ← lessons / orders operations
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← engine, pool, sessions
    └─────────────────────────────────────┘

    Services (seeding, artwork) sit beside the repositories and are used by
    the command-line tools only.
"""

__version__ = "1.0.0"
