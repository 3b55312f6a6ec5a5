# kubra_market/db/session.py
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from kubra_market.core.config import settings


def _enable_sqlite_locking(engine: Engine) -> None:
    """
    SQLite ignores FOR UPDATE, so every transaction opens with BEGIN IMMEDIATE
    to take the write lock up front. Stock checks then serialise like they do
    with row locks on PostgreSQL. Foreign keys are off by default on SQLite.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # let SQLAlchemy emit BEGIN itself
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False, "timeout": 30},
        )
        _enable_sqlite_locking(engine)
        return engine

    return create_engine(
        url,
        # check the connection before use, reconnect if it died
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
        # recycle hourly so the server never drops an idle connection under us
        pool_recycle=3600,
    )


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
