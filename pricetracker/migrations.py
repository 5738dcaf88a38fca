"""
Startup schema upgrades.

Base.metadata.create_all only creates missing tables, so columns added after
a database was first created are added here.
"""
import logging

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from pricetracker.exceptions import MigrationError

logger = logging.getLogger(__name__)

HISTORY_TABLE = "price_history"
OBSERVED_PRICE_COLUMN = "observed_price"


def has_column(engine: Engine, table: str, column: str) -> bool:
    """Check whether a table exists and has the given column."""
    inspector = inspect(engine)
    if not inspector.has_table(table):
        return False
    return any(col["name"] == column for col in inspector.get_columns(table))


def add_observed_price_column(engine: Engine) -> bool:
    """
    Add the observed_price column to price_history if it is missing.

    Existing rows keep their values and get NULL in the new column.

    Returns:
        True if the column was added, False if there was nothing to do
    """
    try:
        if not inspect(engine).has_table(HISTORY_TABLE):
            logger.info(f"Table {HISTORY_TABLE} does not exist yet, nothing to migrate")
            return False

        if has_column(engine, HISTORY_TABLE, OBSERVED_PRICE_COLUMN):
            logger.info(f"Column {OBSERVED_PRICE_COLUMN} already exists")
            return False

        logger.info(f"Adding column {OBSERVED_PRICE_COLUMN} to {HISTORY_TABLE}...")
        with engine.begin() as conn:
            conn.execute(
                text(f"ALTER TABLE {HISTORY_TABLE} ADD COLUMN {OBSERVED_PRICE_COLUMN} FLOAT")
            )
        logger.info("Column added successfully")
        return True
    except SQLAlchemyError as e:
        logger.error(f"Error migrating {HISTORY_TABLE}: {e}")
        raise MigrationError(f"Could not add {OBSERVED_PRICE_COLUMN} to {HISTORY_TABLE}: {e}") from e


def run_migrations(engine: Engine) -> None:
    """
    Run every startup migration in order.

    Raises:
        MigrationError: If a migration fails; the application must not start
    """
    add_observed_price_column(engine)
