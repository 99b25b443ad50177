import threading
from typing import Annotated, AsyncGenerator, Optional

from fastapi import Depends

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from .config import settings

Base = declarative_base()

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None
_lock = threading.Lock()


def _connect_args() -> dict:
    if settings.is_sqlite:
        return {}
    return {"ssl": settings.POSTGRES_SSLMODE == "require"}


def get_engine() -> AsyncEngine:
    """Return the process-wide engine, building it on first use.

    The engine only holds a connection pool, so it is safe to share across
    requests. Construction happens under a lock so that concurrent first
    callers end up with the same instance.
    """
    global _engine, _session_factory
    if _engine is None:
        with _lock:
            if _engine is None:
                kwargs = {"echo": settings.DB_ECHO, "connect_args": _connect_args()}
                if not settings.is_sqlite:
                    kwargs.update(pool_pre_ping=True, pool_recycle=1800)
                engine = create_async_engine(settings.DATABASE_URL, **kwargs)
                _session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
                _engine = engine
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    get_engine()
    return _session_factory


async def dispose_engine() -> None:
    global _engine, _session_factory
    with _lock:
        engine, _engine, _session_factory = _engine, None, None
    if engine is not None:
        await engine.dispose()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with get_session_factory()() as sess:
        yield sess

# Annotated alias: routes just declare `db: SessionDep`.
SessionDep = Annotated[AsyncSession, Depends(get_db)]
