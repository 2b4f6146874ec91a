"""Overlay pending completed-state changes onto the last todo snapshot."""

from dataclasses import replace
from typing import List
from typing import Optional
from typing import Sequence

from src.models.todo import Todo
from src.modules.actions import Submission


def _target_id(submission: Submission) -> str:
    # updateToDo input is (completed, todo_id)
    return submission.input[1]


def pending_for(
    todo_id: str, submissions: Sequence[Submission]
) -> Optional[Submission]:
    """Return the first pending submission targeting ``todo_id``, if any."""
    for submission in submissions:
        if submission.pending and _target_id(submission) == todo_id:
            return submission
    return None


def compute_view(
    snapshot: Optional[Sequence[Todo]], pending_set_completed: Sequence[Submission]
) -> Optional[List[Todo]]:
    """Return the todos to render while set-completed submissions are in flight.

    Each todo with a pending submission is replaced by a copy carrying the
    submitted completed flag. Settled submissions, including failed ones, are
    ignored so their todos fall back to the snapshot. Neither argument is
    modified.
    """
    if snapshot is None:
        return None
    if not any(submission.pending for submission in pending_set_completed):
        return list(snapshot)

    view = []
    for todo in snapshot:
        submission = pending_for(todo.id, pending_set_completed)
        if submission is not None:
            view.append(replace(todo, completed=submission.input[0]))
        else:
            view.append(todo)
    return view
