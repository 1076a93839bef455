"""Exception types raised by the punchcard pipeline.

Every failure in the core is deterministic for a given input and is
reported to the caller rather than recovered from, so each error kind
gets its own class that callers can branch on.
"""


class PunchcardError(Exception):
    """Base exception for punchcard processing errors."""

    pass


class InputError(PunchcardError):
    """Exception raised when an option selector is invalid."""

    pass


class DecodeError(PunchcardError):
    """Exception raised when image bytes cannot be decoded."""

    pass


class DimensionError(PunchcardError):
    """Exception raised when grid or card geometry does not match."""

    pass


class CardValidationError(PunchcardError):
    """Exception raised when a card's shape or cell values are invalid."""

    pass


class ParseFormatError(PunchcardError):
    """Exception raised when punchcard text violates the file grammar."""

    pass


class EmptyInputError(PunchcardError):
    """Exception raised when there is nothing to process or export."""

    pass
