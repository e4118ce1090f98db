# app/core.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from config import DATABASE_URL

# -------------------- Declarative Base --------------------
Base = declarative_base()  # shared by all ERP models


# -------------------- Engine & Session --------------------
def make_engine(database_url: str, **kwargs):
    """Return an engine for the given URL (SQLite needs cross-thread access under FastAPI)."""
    if database_url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    return create_engine(
        database_url,
        echo=False,
        future=True,
        pool_pre_ping=True,
        **kwargs
    )


def make_sessionmaker(bind):
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=bind,
        future=True
    )


engine = make_engine(DATABASE_URL)
