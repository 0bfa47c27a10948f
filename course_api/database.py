from threading import Lock

from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker

from course_api.core import config


engine_kwargs: dict = {}
if config.DATABASE_URL.startswith("sqlite"):
    # FastAPI runs sync routes in a threadpool.
    engine_kwargs["connect_args"] = {"check_same_thread": False}
else:
    engine_kwargs["pool_pre_ping"] = True

engine = create_engine(config.DATABASE_URL, **engine_kwargs)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_schema_checked = False


def enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


if engine.dialect.name == "sqlite":
    event.listen(engine, "connect", enable_sqlite_foreign_keys)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def ensure_schema() -> None:
    global _schema_checked

    if _schema_checked:
        return

    with _schema_lock:
        if _schema_checked:
            return

        # Register the mapped tables on Base.metadata.
        from course_api.models import course, user  # noqa: F401

        Base.metadata.create_all(bind=engine)
        _schema_checked = True
