"""Domain errors raised by the forum services."""


class ForumValidationError(ValueError):
    """Raised when a request is malformed; the message is shown to the caller."""


class ForumNotFoundError(LookupError):
    """Raised when a referenced post or comment does not exist."""
