# Overview: Service-layer helpers for concurrent writers; row locks and retry.

from __future__ import annotations

import time

from flask import current_app
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm.exc import StaleDataError

from ..extensions import db


def lock_for_update(query):
    """
    Apply row-level locking to a query that reads state it is about to change.

    NOTE: SQLite ignores SELECT ... FOR UPDATE, but other DBs will honor it.
    """
    return query.with_for_update()


def run_with_retry(func, *, attempts: int = 3, backoff_base: float = 0.05):
    """
    Execute a DB operation with retry on concurrency-related failures.

    Retries on OperationalError (database locked, deadlock) and
    StaleDataError (version_id mismatch). `func` must re-read whatever state
    it depends on, since each retry starts from a rolled-back session.
    Domain errors are never retried.
    """
    for attempt in range(attempts):
        try:
            return func()
        except (OperationalError, StaleDataError) as exc:
            db.session.rollback()
            if attempt >= attempts - 1:
                raise
            current_app.logger.warning(
                "Concurrent update conflict (%s), retry %d of %d",
                type(exc).__name__, attempt + 1, attempts - 1,
            )
            time.sleep(backoff_base * (2 ** attempt))
