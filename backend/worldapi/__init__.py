"""
World API Backend — Application Package Initializer
===================================================

What: Marks the `worldapi` directory as a Python package.
Who:  Imported by uvicorn (`worldapi.main:app`), Alembic and pytest.

Architecture Note:
    The backend is split into thin layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← status codes, cookies, bodies
    ├─────────────────────────────────────┤
    │   Services (handlers + gates)       │  ← validation, existence checks, auth
    ├─────────────────────────────────────┤
    │   WorldStore (data access)          │  ← one parameterized query per call
    ├─────────────────────────────────────┤
    │   Models & Schemas                  │  ← SQLAlchemy ORM + Pydantic
    └─────────────────────────────────────┘

    Every layer receives its collaborators explicitly (database session,
    settings) through FastAPI dependencies; nothing reaches for a global
    store handle.
"""

__version__ = "1.0.0"
