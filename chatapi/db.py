"""Creation of the PostgreSQL engine."""

from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool

from chatapi.config import DBConfig


def build_dsn(cfg: DBConfig) -> str:
    """Return the libpq connection string for ``cfg``."""
    return (
        f"host={cfg.host} port={cfg.port} user={cfg.user} "
        f"password={cfg.password} dbname={cfg.name} sslmode={cfg.sslmode}"
    )


def new_postgres(cfg: DBConfig) -> Engine:
    """Create an engine for ``cfg`` and check that the database answers."""
    max_open = cfg.max_open_conns
    idle = max(cfg.max_idle_conns, 0)
    if max_open > 0:
        idle = min(idle, max_open)
    overflow = max_open - idle if max_open > 0 else -1
    pool = {"poolclass": NullPool} if idle == 0 else {"pool_size": idle, "max_overflow": overflow}
    lifetime = int(cfg.conn_max_lifetime.total_seconds())
    try:
        engine = create_engine(
            "postgresql://",
            connect_args={"dsn": build_dsn(cfg)},
            pool_recycle=lifetime if lifetime > 0 else -1,
            **pool,
        )
        with engine.connect():
            pass
    except (ImportError, SQLAlchemyError) as exc:
        raise ConnectionError(f"failed to connect to db: {exc}") from exc
    return engine