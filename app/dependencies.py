# app/dependencies.py
from fastapi import Request
from app.storage.database import DatabaseRepository


def get_repository(request: Request):
    """FastAPI dependency: yield the repository the app was built with.

    The memory backend shares one repository for the whole process; the
    database backend opens a session per request.
    """
    state = request.app.state
    if state.storage_backend == "memory":
        yield state.repository
        return

    db = state.session_factory()
    try:
        yield DatabaseRepository(db)
    finally:
        db.close()
