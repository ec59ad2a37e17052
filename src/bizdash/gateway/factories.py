"""Gateway factory functions for creating gateway instances."""

import os
from pathlib import Path
from typing import Optional

from bizdash.gateway.sqlalchemy_gateway import SQLAlchemyGateway


def create_sqlite_gateway(database_path: Optional[str] = None) -> SQLAlchemyGateway:
    """Create a SQLite-backed gateway.

    Args:
        database_path: Path to SQLite database file. If None, checks BIZDASH_DB_PATH
            environment variable, then defaults to ~/.bizdash/bizdash.db

    Returns:
        SQLAlchemyGateway instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get("BIZDASH_DB_PATH")

    if database_path is None:
        db_dir = Path.home() / ".bizdash"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "bizdash.db")

    return SQLAlchemyGateway(f"sqlite:///{database_path}")
