"""Per-browser UI sessions, each owning its own submission tracker."""

from dataclasses import dataclass
from dataclasses import field
from datetime import datetime
from datetime import timedelta
from datetime import timezone
from typing import Dict
from typing import Optional
from uuid import uuid4

from src.modules.actions import SubmissionTracker


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class UiSession:
    """State kept for one browser session."""

    id: str = field(default_factory=lambda: uuid4().hex)
    tracker: SubmissionTracker = field(default_factory=SubmissionTracker)
    created_at: datetime = field(default_factory=_utcnow)
    last_seen: datetime = field(default_factory=_utcnow)
    ended_at: Optional[datetime] = None

    def touch(self):
        self.last_seen = _utcnow()

    @property
    def busy(self) -> bool:
        return self.tracker.submissions().pending


class SessionManager:
    """Manages UI sessions as a Quart extension.

    Sessions idle for longer than ``idle_ttl`` seconds with nothing pending
    are dropped whenever a new session is created.
    """

    def __init__(self, app=None, idle_ttl: float = 3600.0):
        self.sessions: Dict[str, UiSession] = {}
        self.idle_ttl = idle_ttl
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.sessions.clear()
        self.idle_ttl = float(app.config.get("SESSION_IDLE_TTL", self.idle_ttl))
        app.extensions["session_manager"] = self

        @app.after_serving
        async def settle_submissions():
            await self.wait_settled()

    def get(self, session_id: Optional[str]) -> Optional[UiSession]:
        if session_id is None:
            return None
        ui_session = self.sessions.get(session_id)
        if ui_session is not None:
            ui_session.touch()
        return ui_session

    def get_or_create(self, session_id: Optional[str] = None) -> UiSession:
        """Return the session for ``session_id``, creating it if unknown."""
        ui_session = self.get(session_id)
        if ui_session is None:
            self.evict_idle()
            ui_session = UiSession() if session_id is None else UiSession(id=session_id)
            self.sessions[ui_session.id] = ui_session
        return ui_session

    def evict_idle(self, now: Optional[datetime] = None) -> int:
        """Drop idle sessions without pending submissions; returns how many."""
        cutoff = (now or _utcnow()) - timedelta(seconds=self.idle_ttl)
        evicted = 0
        for session_id, ui_session in list(self.sessions.items()):
            if ui_session.last_seen < cutoff and not ui_session.busy:
                del self.sessions[session_id]
                ui_session.ended_at = _utcnow()
                evicted += 1
        return evicted

    async def end(self, session_id: str):
        """End a session after its in-flight submissions have settled."""
        ui_session = self.sessions.pop(session_id, None)
        if ui_session and not ui_session.ended_at:
            await ui_session.tracker.wait_settled()
            ui_session.ended_at = _utcnow()

    async def wait_settled(self):
        for ui_session in list(self.sessions.values()):
            await ui_session.tracker.wait_settled()
