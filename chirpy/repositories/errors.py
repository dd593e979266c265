"""Errors raised by the persistence layer.

Callers translate these into transport responses; the repository itself never
retries or swallows them.
"""

from __future__ import annotations


class RepositoryError(Exception):
    """Base class for repository failures and outcomes."""


class StorageUnavailableError(RepositoryError):
    """The document file could not be read or written."""


class CorruptDocumentError(RepositoryError):
    """The document bytes do not decode into the expected shape."""


class NotFoundError(RepositoryError):
    pass


class ForbiddenError(RepositoryError):
    pass


class AuthFailedError(RepositoryError):
    pass
