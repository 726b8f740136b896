import logging

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Use the same Base as models to ensure one metadata registry
from models.base import Base
from models import project, skill, user  # noqa: F401

logger = logging.getLogger(__name__)


class Database:
    """Process-owned engine and session factory.

    The engine is created on first use and reused afterwards, so calling
    ``connect()`` more than once is harmless.
    """

    def __init__(self, url: str, **engine_kwargs):
        self.url = url
        self._engine_kwargs = engine_kwargs
        self._engine: Engine | None = None
        self._session_factory: sessionmaker | None = None

    def connect(self) -> Engine:
        if self._engine is not None:
            return self._engine

        kwargs = dict(self._engine_kwargs)
        if self.url.startswith("sqlite"):
            kwargs.setdefault("connect_args", {"check_same_thread": False})
            if ":memory:" in self.url or self.url in ("sqlite://", "sqlite+pysqlite://"):
                kwargs.setdefault("poolclass", StaticPool)
        else:
            kwargs.setdefault("pool_pre_ping", True)
            kwargs.setdefault("pool_recycle", 3600)

        self._engine = create_engine(self.url, future=True, **kwargs)
        self._session_factory = sessionmaker(
            bind=self._engine, autocommit=False, autoflush=False, future=True
        )
        logger.info("Database engine created for %s", self._engine.url.render_as_string(hide_password=True))
        return self._engine

    @property
    def engine(self) -> Engine:
        return self.connect()

    def session(self) -> Session:
        self.connect()
        return self._session_factory()

    def create_all(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as exc:
            logger.warning("Database ping failed: %s", exc)
            return False

    def dispose(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None


def get_db(request: Request):
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
