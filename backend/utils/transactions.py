"""
Unit-of-work helper for ledger writes.

`run_atomic` executes a callable against the session and commits once. The
whole callable is re-run after transient storage contention, so a retried
posting is never applied twice; every other storage error aborts with
PostingIntegrityFailure after rolling back.
"""

import logging
import os
import time
from typing import Callable, TypeVar

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from exceptions import PostingIntegrityFailure

logger = logging.getLogger(__name__)

POSTING_MAX_RETRIES = int(os.getenv("LEDGER_POSTING_MAX_RETRIES", "3"))
POSTING_RETRY_BACKOFF = float(os.getenv("LEDGER_POSTING_RETRY_BACKOFF", "0.05"))

T = TypeVar("T")


def run_atomic(db: Session, work: Callable[[], T], retries: int = None, backoff: float = None) -> T:
    retries = POSTING_MAX_RETRIES if retries is None else retries
    backoff = POSTING_RETRY_BACKOFF if backoff is None else backoff
    attempt = 0
    while True:
        attempt += 1
        try:
            result = work()
            db.commit()
            return result
        except OperationalError as e:
            db.rollback()
            if attempt >= retries:
                logger.error(f"Ledger transaction failed after {attempt} attempts: {e}")
                raise PostingIntegrityFailure("Ledger transaction could not be committed; retry later") from e
            logger.warning(f"Transient storage error on attempt {attempt}/{retries}, retrying: {e}")
            time.sleep(backoff * attempt)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Ledger transaction aborted: {e}")
            raise PostingIntegrityFailure("Ledger transaction could not be committed") from e
        except Exception:
            db.rollback()
            raise
