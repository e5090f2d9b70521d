from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from storefront.core.config import settings

class Base(DeclarativeBase): pass


def _install_sqlite_hooks(engine: Engine) -> None:
    # pysqlite opens transactions lazily on first write, which lets two
    # readers race into the same reservation. Writer sessions take the write
    # lock up front; everything else gets a plain deferred transaction.
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        if conn.get_execution_options().get("sqlite_immediate"):
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        else:
            conn.exec_driver_sql("BEGIN")


def create_db_engine(url: str, busy_timeout: float = settings.DB_BUSY_TIMEOUT) -> Engine:
    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False, "timeout": busy_timeout},
        )
        _install_sqlite_hooks(engine)
        return engine
    return create_engine(url, pool_pre_ping=True)


def create_session_factory(engine: Engine, *, writer: bool = False) -> sessionmaker:
    """Sessions bound to ``engine``; ``writer`` sessions begin with SQLite's write lock held."""
    if writer:
        engine = engine.execution_options(sqlite_immediate=True)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


engine = create_db_engine(settings.DATABASE_URL)
SessionLocal = create_session_factory(engine)
WriterSessionLocal = create_session_factory(engine, writer=True)
