from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from eventhub.core.config import get_database_url

SQLALCHEMY_DATABASE_URL = get_database_url()

connect_args = {}
if SQLALCHEMY_DATABASE_URL.startswith("sqlite"):
    connect_args = {"check_same_thread": False}

engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autoflush=False, bind=engine)


class Base(DeclarativeBase):
    pass


def init_db() -> None:
    """Create all tables (in production, use migrations such as Alembic)."""
    # Import models so that they register with Base.metadata
    from eventhub.models import attendees, events  # noqa: F401

    Base.metadata.create_all(bind=engine)
