from quart_compress import Compress

from src.modules.database import Database
from src.modules.logging_helper import LoggingHelper
from src.modules.query_cache import QueryCache
from src.modules.session_manager import SessionManager
from src.modules.todo_service import TodoService

# Create instances without initializing
compress = Compress()
logging_helper = LoggingHelper()
database = Database()
query_cache = QueryCache()
session_manager = SessionManager()
todo_service = TodoService()


def init_extensions(app):
    """Initialize all extensions with the application."""
    # Initialise in a specific order to handle dependencies
    compress.init_app(app)
    logging_helper.init_app(app)
    database.init_app(app)  # Database must come early
    query_cache.init_app(app)
    session_manager.init_app(app)
    todo_service.init_app(app)  # Depends on database and query cache
