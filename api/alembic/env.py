"""
Migraciones del esquema del sitio (users, posts).

La URL sale de Settings; el driver async se cambia por psycopg porque
Alembic corre sincrono.
"""
import sys
from logging.config import fileConfig
from pathlib import Path

from alembic import context
from sqlalchemy import create_engine, pool

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from horrorsite.core.config import settings  # noqa: E402
from horrorsite.infrastructure.database import Base  # noqa: E402

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)


def _sync_url() -> str:
    return settings.effective_database_url.replace("+asyncpg", "+psycopg")


def _configure(**kwargs) -> None:
    context.configure(target_metadata=Base.metadata, compare_type=True, **kwargs)
    with context.begin_transaction():
        context.run_migrations()


if context.is_offline_mode():
    _configure(url=_sync_url(), literal_binds=True, dialect_opts={"paramstyle": "named"})
else:
    engine = create_engine(_sync_url(), poolclass=pool.NullPool)
    with engine.connect() as connection:
        _configure(connection=connection)
    engine.dispose()
