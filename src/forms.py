"""Forms for creating todos and toggling their completed flag."""

from flask_wtf import FlaskForm
from wtforms import BooleanField
from wtforms import StringField
from wtforms import validators


def _strip(value):
    return value.strip() if isinstance(value, str) else value


class TodoForm(FlaskForm):
    """Create form for a new todo."""

    text = StringField(
        "Text",
        filters=[_strip],
        validators=[validators.DataRequired(message="Missing Text")],
    )


class CompletedForm(FlaskForm):
    """Checkbox form for one todo.

    ``completed`` carries the state the todo should move to.
    """

    completed = BooleanField(
        "Completed", false_values=("false", "", "0", "off", "no")
    )
