# shopflow/database.py
from sqlmodel import SQLModel, create_engine, Session

from shopflow.core.config import get_settings

settings = get_settings()

# ---------------------------------------------------------
# Engine
#
# - SQLite (default for local dev): allow the connection to be used
#   from FastAPI's threadpool workers.
# - Postgres: enforce SSL and keep the pool small, hosted poolers
#   limit the number of concurrent clients.
# ---------------------------------------------------------


def build_engine(db_url: str, echo: bool = False):
    if db_url.startswith("sqlite"):
        return create_engine(
            db_url,
            echo=echo,
            connect_args={"check_same_thread": False},
        )

    # Append sslmode=require if it is not already present
    if db_url.startswith("postgresql") and "sslmode=" not in db_url:
        if "?" in db_url:
            db_url = db_url + "&sslmode=require"
        else:
            db_url = db_url + "?sslmode=require"

    return create_engine(
        db_url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=5,
    )


engine = build_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)


def create_db_and_tables() -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    FastAPI dependency that yields a SQLModel Session.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    with Session(engine) as session:
        yield session
