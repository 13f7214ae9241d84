"""Exceptions raised by rummage."""


class RummageError(Exception):
    """Base class for rummage errors."""

    pass


class RevisionUnavailableError(RummageError):
    """Raised by strict revision lookup when no commit can be described."""

    pass
