from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from storefront.utils.log import get_logger

Base = declarative_base()

log = get_logger("db")


def _configure_sqlite(engine: Engine):
    # pysqlite never emits BEGIN before a SELECT and mangles SAVEPOINT, so take
    # over transaction control from the driver. IMMEDIATE takes the write lock
    # at BEGIN so concurrent writers queue on the busy timeout.
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cur = dbapi_connection.cursor()
        cur.execute("PRAGMA foreign_keys=ON")
        cur.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


class Database:
    """
    Store handle: one engine plus its session factory.

    Built explicitly at process start (see the lifespan in storefront.main)
    and disposed at shutdown; request handlers receive sessions through
    get_db().
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        connect_args = {}
        if url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
            # writers wait on each other instead of failing immediately
            connect_args["timeout"] = 15
        self.engine = create_engine(url, future=True, echo=echo, connect_args=connect_args)
        if self.engine.dialect.name == "sqlite":
            _configure_sqlite(self.engine)
        self.SessionLocal = sessionmaker(
            autocommit=False, autoflush=False, expire_on_commit=False, bind=self.engine
        )

    def init(self, reset: bool = False):
        """
        Create the schema. With reset=True, drop every table first.

        Model modules are imported here so the metadata is populated before
        create_all runs.
        """
        from storefront.models import cart, cart_line, product, user  # noqa: F401

        if reset:
            log.info("Resetting database %s", self.engine.url.render_as_string(hide_password=True))
            Base.metadata.drop_all(bind=self.engine)
        Base.metadata.create_all(bind=self.engine)
        log.info("Database initialized.")

    def session(self) -> Session:
        return self.SessionLocal()

    def ping(self) -> bool:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True

    def dispose(self):
        self.engine.dispose()


def get_db(request: Request) -> Iterator[Session]:
    database: Optional[Database] = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database not initialized; is the application lifespan running?")
    db = database.session()
    try:
        yield db
    finally:
        db.close()
