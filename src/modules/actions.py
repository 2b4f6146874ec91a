"""Server actions and the per-session registry of their submissions.

An ``Action`` is a named mutation. Submitting it through a
``SubmissionTracker`` records a ``Submission`` before the mutation starts
running, so views can render the predicted outcome straight away. A
submission that succeeds is dropped from the tracker once it settles. One
that fails stays, no longer pending and with ``error`` set, until it is
cleared or retried.
"""

import asyncio
import logging
from dataclasses import dataclass
from dataclasses import field
from datetime import datetime
from datetime import timezone
from typing import Any
from typing import Awaitable
from typing import Callable
from typing import Dict
from typing import List
from typing import Optional
from typing import Tuple
from uuid import uuid4

logger = logging.getLogger(__name__)


class Action:
    """A named async mutation that can be submitted through a tracker."""

    def __init__(self, fn: Callable[..., Awaitable[Any]], name: str):
        self.fn = fn
        self.name = name

    def __repr__(self):
        return f"<Action({self.name})>"

    async def __call__(self, *args):
        return await self.fn(*args)


@dataclass(slots=True, eq=False)
class Submission:
    """One tracked invocation of an action."""

    action: Action
    input: Tuple[Any, ...]
    id: str = field(default_factory=lambda: uuid4().hex)
    pending: bool = True
    result: Any = None
    error: Optional[BaseException] = None
    submitted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    settled_at: Optional[datetime] = None
    task: Optional[asyncio.Task] = None

    @property
    def failed(self) -> bool:
        return not self.pending and self.error is not None

    async def wait(self) -> Any:
        """Wait for the submission to settle and return its result.

        Re-raises the action's exception if it failed.
        """
        if self.task is not None:
            await asyncio.shield(self.task)
        if self.error is not None:
            raise self.error
        return self.result


class SubmissionList(list):
    """Submissions of one action, in the order they were submitted."""

    @property
    def pending(self) -> bool:
        return any(submission.pending for submission in self)


Listener = Callable[["SubmissionTracker"], None]


class SubmissionTracker:
    """Ordered registry of in-flight and failed action submissions."""

    def __init__(self):
        self._submissions: Dict[str, Submission] = {}
        self._listeners: List[Listener] = []

    def __len__(self):
        return len(self._submissions)

    def submit(self, action: Action, *args) -> Submission:
        """Record a pending submission, then start running the action.

        Must be called from within a running event loop.
        """
        submission = Submission(action=action, input=tuple(args))
        self._submissions[submission.id] = submission
        self._notify()
        submission.task = asyncio.create_task(self._run(submission))
        logger.debug(f"Submitted {action.name} {submission.id} with input {args}")
        return submission

    async def _run(self, submission: Submission):
        try:
            submission.result = await submission.action(*submission.input)
        except asyncio.CancelledError as e:
            self._settle(submission, error=e)
            raise
        except Exception as e:
            logger.warning(
                f"{submission.action.name} submission {submission.id} failed: {e}"
            )
            self._settle(submission, error=e)
        else:
            self._settle(submission)
            self._submissions.pop(submission.id, None)
        self._notify()

    def _settle(self, submission: Submission, error: Optional[BaseException] = None):
        submission.pending = False
        submission.error = error
        submission.settled_at = datetime.now(timezone.utc)

    def get(self, submission_id: str) -> Optional[Submission]:
        return self._submissions.get(submission_id)

    def submissions(self, action: Optional[Action] = None) -> SubmissionList:
        """Return a snapshot of tracked submissions, optionally for one action."""
        return SubmissionList(
            submission
            for submission in self._submissions.values()
            if action is None or submission.action.name == action.name
        )

    def clear(self, submission_id: str) -> bool:
        """Forget a settled submission. Pending ones can't be cleared."""
        submission = self._submissions.get(submission_id)
        if submission is None or submission.pending:
            return False
        del self._submissions[submission_id]
        self._notify()
        return True

    def retry(self, submission_id: str) -> Optional[Submission]:
        """Re-submit a failed submission with its original input."""
        submission = self._submissions.get(submission_id)
        if submission is None or submission.pending:
            return None
        del self._submissions[submission_id]
        logger.info(f"Retrying {submission.action.name} submission {submission_id}")
        return self.submit(submission.action, *submission.input)

    async def wait_settled(self):
        """Wait until every submitted action has finished running."""
        tasks = [
            submission.task
            for submission in self._submissions.values()
            if submission.pending and submission.task is not None
        ]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` on every change; returns an unsubscribe."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self):
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Submission tracker listener failed")
