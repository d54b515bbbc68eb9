"""Shared error translation for the data-access helpers."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.errors import BackendError

logger = logging.getLogger("serenity.crud")


def utcnow() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


@contextmanager
def backend_errors(db: Session, message: str):
    """Log any database failure in full and re-raise it as a generic ``BackendError``."""

    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("%s: %s", message, exc)
        raise BackendError(message) from exc
