"""Database connection and session management."""

import logging
import os

from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    metadata = MetaData(
        naming_convention={
            "ix": "ix_%(column_0_label)s",
            "uq": "uq_%(table_name)s_%(column_0_name)s",
            "ck": "ck_%(table_name)s_%(constraint_name)s",
            "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
            "pk": "pk_%(table_name)s",
        }
    )


class Database:
    def __init__(self, app=None):
        self.engine = None
        self.session_factory = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        """Initialize database with Quart app."""
        database_url = app.config.get("DATABASE_URL")
        if not database_url:
            raise ValueError("DATABASE_URL must be configured")

        # Only echo if SQLAlchemy logging is explicitly set to DEBUG/INFO
        sqlalchemy_logger = logging.getLogger("sqlalchemy.engine")
        should_echo = sqlalchemy_logger.isEnabledFor(logging.INFO)

        if app.config.get("DEBUG", False):
            app.logger.debug(
                f"Debug mode: SQLAlchemy echo={should_echo} (based on logger level)"
            )

        data_dir = app.config.get("DATA_DIR")
        if data_dir and database_url.startswith("sqlite"):
            os.makedirs(data_dir, exist_ok=True)

        self.engine = create_async_engine(database_url, echo=should_echo)
        self.session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

        app.extensions["database"] = self

        @app.before_serving
        async def create_tables():
            await self.create_tables()

        @app.after_serving
        async def close_database():
            await self.close()

    async def create_tables(self):
        """Create all tables that don't exist yet."""
        # Register models on the metadata before create_all
        import src.models.todo  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self):
        """Close database connection."""
        if self.engine:
            await self.engine.dispose()
