"""Error kinds raised by the Experiences domain beyond Protean's own.

Missing records surface as ``protean.exceptions.ObjectNotFoundError`` and bad
arguments as ``protean.exceptions.ValidationError``; the two classes below
complete the taxonomy.
"""

from protean.exceptions import InvalidOperationError, ValidationError


class InvalidStateError(InvalidOperationError):
    """A transition or ownership rule forbids the operation in the current state."""


class ContentRejectedError(ValidationError):
    """Free text failed content screening; nothing was persisted."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__({field: [message]})
