"""Catalog persistence errors and SQLAlchemy translation."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, TypeVar

from sqlalchemy import exc as sa_exc

__all__ = [
    "RepositoryError",
    "NotFoundError",
    "IntegrityConstraintViolation",
    "DatabaseOperationError",
    "ensure_found",
    "handle_sqlalchemy_errors",
]

T = TypeVar("T")


class RepositoryError(Exception):
    """Catalog storage failed; the upload pipeline reports it as an attachment error."""


class NotFoundError(RepositoryError):
    """Raised when an attachment id does not exist."""


class IntegrityConstraintViolation(RepositoryError):
    """Raised when an insert or update breaks a table constraint."""


class DatabaseOperationError(RepositoryError):
    """Raised for connection, locking and other driver level failures."""


def ensure_found(record: T | None, *, entity: str, identifier: object) -> T:
    if record is None:
        raise NotFoundError(f"{entity} '{identifier}' not found")
    return record


@contextmanager
def handle_sqlalchemy_errors(*, entity: str) -> Iterator[None]:
    """Re-raise SQLAlchemy errors as :class:`RepositoryError` subclasses."""
    try:
        yield
    except sa_exc.IntegrityError as exc:
        raise IntegrityConstraintViolation(f"{entity}: integrity constraint violated") from exc
    except sa_exc.DBAPIError as exc:
        raise DatabaseOperationError(f"{entity}: database operation failed") from exc
    except sa_exc.SQLAlchemyError as exc:
        raise DatabaseOperationError(f"{entity}: {exc}") from exc
