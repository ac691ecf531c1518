"""
Transaction helpers for scheduling writes.

Every scheduling operation runs as one atomic unit. Lock timeouts,
deadlocks and lost conditional writes are retried a bounded number
of times, re-reading state on each attempt.
"""

import logging

from django.conf import settings
from django.db import transaction, OperationalError

from .exceptions import ConcurrentUpdateError, StaleWriteError

logger = logging.getLogger(__name__)


def run_with_retries(operation, *args, attempts=None, **kwargs):
    """
    Run ``operation`` inside ``transaction.atomic()`` with bounded retries.

    Args:
        operation: Callable performing reads, checks and writes
        attempts: Maximum attempts (default ``settings.ROTATION_CONFLICT_RETRIES``)

    Returns:
        Whatever ``operation`` returns

    Raises:
        ConcurrentUpdateError: If every attempt lost a conflict
    """
    attempts = attempts or settings.ROTATION_CONFLICT_RETRIES

    for attempt in range(1, attempts + 1):
        try:
            with transaction.atomic():
                return operation(*args, **kwargs)
        except (OperationalError, StaleWriteError) as e:
            if attempt == attempts:
                logger.warning(
                    "%s gave up after %d attempts: %s",
                    operation.__name__, attempts, e
                )
                raise ConcurrentUpdateError() from e
            logger.info(
                "%s conflicted (attempt %d/%d), retrying: %s",
                operation.__name__, attempt, attempts, e
            )

    # Should never reach here
    raise ConcurrentUpdateError()
