"""Exceptions raised by ProbNet."""


class ValidationError(ValueError):
    """Raised when network input or a textual description is invalid."""


class QueryError(ValidationError):
    """Raised when a query cannot be answered as written."""
