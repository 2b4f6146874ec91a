from quart import current_app

from src.exceptions import TodoError


def register_error_handlers(app):
    """Register error handlers with the application."""

    @app.errorhandler(TodoError)
    async def handle_todo_error(e):
        if e.status_code >= 500:
            current_app.logger.error(f"Todo store error: {e.message}", exc_info=True)
        else:
            current_app.logger.info(f"Rejected request: {e.message}")
        return e.message, e.status_code

    @app.errorhandler(Exception)
    async def handle_exception(e):
        current_app.logger.error(f"Unhandled exception: {str(e)}", exc_info=True)
        return "An unexpected error occurred", 500

    @app.errorhandler(404)
    async def handle_not_found(e):
        return "Not found", 404

    @app.errorhandler(400)
    async def handle_bad_request(e):
        return "Bad request", 400
