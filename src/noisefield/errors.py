"""Exceptions raised by noisefield."""


class InvalidParameterError(ValueError):
    """Raised when a construction or evaluation parameter is out of range.

    Subclasses ValueError so callers that already guard numeric input with
    ``except ValueError`` keep working.
    """
