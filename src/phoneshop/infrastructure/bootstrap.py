"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.  The engine is built on
first use from the environment settings; ``reset()`` drops it so tests
can point the CLI at a fresh database.
"""

from __future__ import annotations

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from phoneshop.infrastructure.config import Settings
from phoneshop.infrastructure.persistence.engine import (
    build_engine,
    create_tables,
    session_factory,
)
from phoneshop.infrastructure.persistence.sql_unit_of_work import SqlAlchemyUnitOfWork

_settings: Settings | None = None
_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


def settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def unit_of_work() -> SqlAlchemyUnitOfWork:
    global _engine, _session_factory
    if _session_factory is None:
        cfg = settings()
        _engine = build_engine(cfg.database_url, echo=cfg.sql_echo)
        create_tables(_engine)
        _session_factory = session_factory(_engine)
    return SqlAlchemyUnitOfWork(_session_factory)


def currency() -> str:
    return settings().currency


def reset() -> None:
    """Forget settings and dispose the engine. FOR TESTING ONLY."""
    global _settings, _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
    _settings = None
    _engine = None
    _session_factory = None
