"""
Errors raised while turning a form submission into an executed INSERT.

Every error carries a human-readable message; the HTTP layer logs it in full
and sends ``shorten_message(str(e))`` to the client.
"""

from typing import Any


class SubmissionError(Exception):
    """Base class for all submission failures."""

    pass


class UnsupportedSchemaTypeError(SubmissionError):
    """Form schema is not ``type: object``."""

    def __init__(self, schema_type: Any) -> None:
        self.schema_type = schema_type
        super().__init__(
            f'Form data with schema.type of "{schema_type}" is not allowed '
            "to write to database."
        )


class UnsupportedDestinationError(SubmissionError):
    """No connector is registered for the destination URL."""

    def __init__(self, url: Any) -> None:
        self.url = url
        super().__init__(f"not supported destination URL: {url}")


class StatementBindError(SubmissionError):
    """A placeholder could not be bound; the statement is never executed."""

    pass


class MissingParameterError(StatementBindError):
    def __init__(self, name: str, template: str | None = None) -> None:
        self.name = name
        self.template = template
        super().__init__(
            f"Parameter {name} is not supplied. SQL template: {template}."
        )


class UnsupportedTypeError(StatementBindError):
    def __init__(self, name: str, type_: str, template: str | None = None) -> None:
        self.name = name
        self.type = type_
        self.template = template
        super().__init__(
            f"Parameter {name} is of unexpected type ({type_}). "
            f"SQL template: {template}."
        )


class ParameterCoercionError(StatementBindError):
    def __init__(
        self, name: str, type_: str, value: Any, template: str | None = None
    ) -> None:
        self.name = name
        self.type = type_
        self.value = value
        self.template = template
        super().__init__(
            f"Parameter {name} value {value!r} cannot be converted to {type_}. "
            f"SQL template: {template}."
        )


class StatementExecutionError(SubmissionError):
    """Driver failure while connecting, preparing or executing."""

    pass


def shorten_message(message: str, max_lines: int = 2) -> str:
    """
    Keep only the first ``max_lines`` lines of *message*.

    Driver errors often carry a full stack trace, e.g.::

        Error: Error running instance method
        MySQLSyntaxErrorException: Table 'forms.todox' doesn't exist
            at ...
            at ...

    which becomes the first two lines. Shorter messages are returned unchanged.
    """
    lines = message.split("\n")
    if len(lines) <= max_lines:
        return message
    return "\n".join(lines[:max_lines])
