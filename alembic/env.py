from logging.config import fileConfig
import os
from sqlalchemy import engine_from_config, pool
from alembic import context

from uniformops.config import normalize_database_url

config = context.config
if config.config_file_name:
    fileConfig(config.config_file_name)

target_metadata = None  # migrations are written by hand

def get_url() -> str:
    # DATABASE_URL wins over alembic.ini; both empty means the local sqlite file
    env_url = os.getenv("DATABASE_URL")
    if env_url and env_url.strip():
        return normalize_database_url(env_url)
    return normalize_database_url(config.get_main_option("sqlalchemy.url") or "")

def run_migrations_offline() -> None:
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()

def run_migrations_online() -> None:
    connectable = engine_from_config(
        {"url": get_url()},
        prefix="",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=connection.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()

if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
