import os
import tempfile

import pytest_asyncio

from src import create_app


@pytest_asyncio.fixture
async def app():
    """Create an application backed by a temporary SQLite database."""
    db_fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(db_fd)

    test_config = {
        "TESTING": True,
        "DEBUG": True,
        "SERVER_NAME": "localhost",
        "SECRET_KEY": "test_key",
        "LOG_LEVEL": "DEBUG",
        "DATABASE_URL": f"sqlite+aiosqlite:///{db_path}",
        "DATA_DIR": os.path.dirname(db_path),
        "MUTATION_LATENCY": 0.0,
        "WTF_CSRF_ENABLED": False,
    }
    app = create_app(test_config)
    database = app.extensions["database"]
    await database.create_tables()

    try:
        async with app.app_context():
            yield app
    finally:
        await app.extensions["session_manager"].wait_settled()
        await database.close()
        os.unlink(db_path)


@pytest_asyncio.fixture
async def client(app):
    """Create a test client for the app."""
    return app.test_client()


@pytest_asyncio.fixture
async def todo_service(app):
    return app.extensions["todo_service"]
