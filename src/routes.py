"""Routes.py."""

import asyncio
import re

from quart import Blueprint
from quart import current_app
from quart import g
from quart import jsonify
from quart import make_response
from quart import render_template
from quart import request
from quart import stream_with_context

from src.exceptions import NotFoundError
from src.forms import CompletedForm
from src.forms import TodoForm
from src.modules.optimistic import compute_view
from src.modules.optimistic import pending_for
from src.modules.todo_service import TODOS_KEY

main_bp = Blueprint("main", __name__)

# SSE treats CRLF, lone CR and lone LF alike as line terminators
SSE_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def sse_event(event: str, data: str) -> str:
    """Format one SSE message, one `data:` field per line of ``data``."""
    lines = SSE_LINE_BREAK.split(data)
    fields = "".join(f"data: {line}\n" for line in lines)
    return f"event: {event}\n{fields}\n"


async def _view_context(ui_session) -> dict:
    """Build the template context for the optimistic todo list."""
    todo_service = current_app.extensions["todo_service"]
    tracker = ui_session.tracker

    todos = await todo_service.list_todos()
    update_submissions = tracker.submissions(todo_service.update_action)
    create_submissions = tracker.submissions(todo_service.create_action)

    return {
        "todos": compute_view(todos, update_submissions),
        "update_submissions": update_submissions,
        "create_submissions": create_submissions,
        "failed_submissions": [s for s in tracker.submissions() if s.failed],
        "pending_for": pending_for,
        "completed_form": CompletedForm(formdata=None),
    }


async def _render_list(status: int = 200):
    context = await _view_context(g.ui_session)
    return await render_template("partials/todo_list.html", **context), status


@main_bp.route("/health")
async def healthcheck():
    """Healthcheck endpoint."""
    return "ok", 200


@main_bp.route("/")
async def index():
    """Render the todo page."""
    context = await _view_context(g.ui_session)
    return await render_template("index.html", form=TodoForm(formdata=None), **context)


@main_bp.route("/todos")
async def todo_list():
    """Render the todo list partial."""
    return await _render_list()


@main_bp.route("/todos.json")
async def todo_list_json():
    """Return the optimistic todo list as JSON."""
    context = await _view_context(g.ui_session)
    return jsonify([todo.to_dict() for todo in context["todos"]])


@main_bp.route("/todos", methods=["POST"])
async def create_todo():
    """Submit the createToDo action."""
    form = TodoForm(formdata=await request.form)
    if not form.validate():
        current_app.logger.debug(form.errors)
        if "text" in form.errors:
            return "Missing Text", 400
        return "Invalid form", 400

    todo_service = current_app.extensions["todo_service"]
    g.ui_session.tracker.submit(todo_service.create_action, form.text.data)
    return await _render_list(202)


@main_bp.route("/todos/<todo_id>/completed", methods=["POST"])
async def set_completed(todo_id: str):
    """Submit the updateToDo action for one todo."""
    form = CompletedForm(formdata=await request.form)
    if not form.validate():
        current_app.logger.debug(form.errors)
        return "Invalid form", 400

    todo_service = current_app.extensions["todo_service"]
    if not await todo_service.todo_exists(todo_id):
        raise NotFoundError(todo_id)

    g.ui_session.tracker.submit(
        todo_service.update_action, form.completed.data, todo_id
    )
    return await _render_list(202)


@main_bp.route("/submissions/<submission_id>/retry", methods=["POST"])
async def retry_submission(submission_id: str):
    """Re-submit a failed action with its original input."""
    if g.ui_session.tracker.retry(submission_id) is None:
        return "Not found", 404
    return await _render_list(202)


@main_bp.route("/submissions/<submission_id>/clear", methods=["POST"])
async def clear_submission(submission_id: str):
    """Dismiss a failed submission."""
    if not g.ui_session.tracker.clear(submission_id):
        return "Not found", 404
    return await _render_list()


@main_bp.route("/todos/events")
async def todo_events():
    """SSE endpoint pushing the re-rendered todo list on every change."""
    ui_session = g.ui_session
    query_cache = current_app.extensions["query_cache"]

    @stream_with_context
    async def event_stream():
        client_queue = asyncio.Queue()

        def on_tracker_change(_tracker):
            client_queue.put_nowait("submissions")

        def on_invalidate(key):
            if key == TODOS_KEY:
                client_queue.put_nowait("invalidated")

        unsubscribe_tracker = ui_session.tracker.subscribe(on_tracker_change)
        unsubscribe_cache = query_cache.subscribe(on_invalidate)
        current_app.logger.info(f"SSE client for session {ui_session.id} connected")

        try:
            yield sse_event("connected", "Connected to todo events")

            while True:
                try:
                    await asyncio.wait_for(client_queue.get(), timeout=30.0)
                except asyncio.TimeoutError:
                    ui_session.touch()
                    yield sse_event("heartbeat", "ping")
                    continue

                # Collapse bursts of changes into one render
                while not client_queue.empty():
                    client_queue.get_nowait()

                context = await _view_context(ui_session)
                html = await render_template("partials/todo_list.html", **context)
                ui_session.touch()
                yield sse_event("todos", html)

        except asyncio.CancelledError:
            current_app.logger.info(f"SSE client for session {ui_session.id} gone")
            raise
        finally:
            unsubscribe_tracker()
            unsubscribe_cache()

    response = await make_response(
        event_stream(),
        {
            "Content-Type": "text/event-stream",
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable nginx buffering
        },
    )
    response.timeout = None
    return response


def register_blueprints(app):
    """Register all blueprints with the application."""
    app.register_blueprint(main_bp)
