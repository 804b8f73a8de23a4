"""Translate storage-level conflicts into the domain's ConcurrencyConflictError.

A stale version, a lock that could not be taken or a unique constraint
lost to a concurrent writer all mean the same thing to the caller: the
data changed underneath this unit of work and the event was not applied.
Nothing is retried here.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm.exc import StaleDataError

from phoneshop.domain.exceptions import ConcurrencyConflictError
from phoneshop.logging_config import get_logger

logger = get_logger("persistence.conflicts")


@contextmanager
def translating_conflicts(action: str) -> Iterator[None]:
    try:
        yield
    except StaleDataError as exc:
        logger.warning("stale_write", extra={"action": action})
        raise ConcurrencyConflictError(
            f"Could not {action}: the record was changed by another transaction"
        ) from exc
    except OperationalError as exc:
        logger.warning("lock_failed", extra={"action": action, "error": str(exc.orig)})
        raise ConcurrencyConflictError(
            f"Could not {action}: the database is busy, try again"
        ) from exc
    except IntegrityError as exc:
        logger.warning("constraint_conflict", extra={"action": action, "error": str(exc.orig)})
        raise ConcurrencyConflictError(
            f"Could not {action}: it conflicts with data written concurrently"
        ) from exc
