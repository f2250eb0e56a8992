"""Engine, sessions and schema setup"""
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from .config import DATABASE_URL

IS_SQLITE = DATABASE_URL.startswith("sqlite")
# WAL needs a file; ":memory:" / "sqlite://" stay in the default journal mode
IS_FILE_SQLITE = IS_SQLITE and DATABASE_URL not in ("sqlite://", "sqlite:///:memory:")

engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if IS_SQLITE else {},
    echo=False,
)

if IS_SQLITE:
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        if IS_FILE_SQLITE:
            cursor.execute("PRAGMA journal_mode=WAL")
        # regions.parent_region_id and museums.region_id are real FKs
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


class Base(DeclarativeBase):
    pass


def init_db(bind: Engine = None) -> None:
    """Create the regions/museums tables if they do not exist yet"""
    from . import models  # noqa: F401  registers the mapped tables on Base

    Base.metadata.create_all(bind=bind or engine)


def get_db():
    """FastAPI dependency: one session per request"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
