from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from ticketing.config import settings


def _engine_options(database_uri: str) -> dict:
    if database_uri.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_size": settings.SQLALCHEMY_POOL_SIZE,
        "max_overflow": settings.SQLALCHEMY_POOL_MAX_OVERFLOW,
    }


def enable_sqlite_savepoints(sqlite_engine):
    """pysqlite defers BEGIN on its own, which breaks SAVEPOINT; let SQLAlchemy emit it."""

    @event.listens_for(sqlite_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(sqlite_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return sqlite_engine


engine = create_engine(settings.SQLALCHEMY_DATABASE_URI,
                       **_engine_options(settings.SQLALCHEMY_DATABASE_URI)
                       )
if engine.dialect.name == "sqlite":
    enable_sqlite_savepoints(engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)
