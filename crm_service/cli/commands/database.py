"""Database management commands.

Example:bash
    # Verify connectivity and create missing tables
    crm-service db init

    # Apply migrations instead of create_all
    alembic upgrade head
"""

import sys

import click
from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError

from crm_service.cli.utils import coro, error, info, success
from crm_service.core.settings import get_db_settings


@click.group(name="db")
def db() -> None:
    """Database management commands."""


@db.command()
@coro
async def init() -> None:
    """Verify the database connection and create every missing table."""
    from crm_service.infra.database import close_database, create_tables, engine

    db_settings = get_db_settings()
    info(f"Connecting to: {engine.url.render_as_string(hide_password=True)}")

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        success("Database connected successfully!")

        await create_tables()

        async with engine.connect() as conn:
            tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
        info(f"Tables: {', '.join(sorted(tables)) or '(none)'}")
        if db_settings.is_sqlite:
            info("SQLite database; migrations are optional for local use")
    except SQLAlchemyError as e:
        error(f"Failed to initialize database: {e}")
        sys.exit(1)
    finally:
        await close_database()
