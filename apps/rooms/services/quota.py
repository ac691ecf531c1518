"""
Monthly bypass quota reconciliation.

Each member's bypass quota refills to its maximum once per calendar
month. The stored ``last_quota_reset_period`` records which month was
last applied, so running reconciliation twice in a month is a no-op.
"""

import logging
from datetime import date
from typing import Optional

from django.db.models import F, Q
from django.utils import timezone

from apps.rooms.models import Member

logger = logging.getLogger(__name__)


def current_quota_period(today: Optional[date] = None) -> str:
    """Year-month string (``YYYY-MM``) for the given or current local date."""
    today = today or timezone.localdate()
    return today.strftime('%Y-%m')


def reconcile_bypass_quota(*, member: Member, today: Optional[date] = None) -> bool:
    """
    Refill one member's bypass quota if the month changed.

    Args:
        member: Roster member to reconcile
        today: Reference date (defaults to today in the configured timezone)

    Returns:
        True if the quota was reset, False if the member was already current
    """
    period = current_quota_period(today)
    if member.last_quota_reset_period == period:
        return False

    updated = (
        Member.objects
        .filter(id=member.id)
        .exclude(last_quota_reset_period=period)
        .update(
            bypass_quota=F('max_bypass_quota'),
            last_quota_reset_period=period,
            updated_at=timezone.now(),
        )
    )
    member.refresh_from_db(fields=['bypass_quota', 'last_quota_reset_period'])

    if updated:
        logger.info("Bypass quota of member %s reset for %s", member.id, period)
    return bool(updated)


def reconcile_all_quotas(*, today: Optional[date] = None, dry_run: bool = False) -> int:
    """
    Refill bypass quotas for every member whose last reset is stale.

    Args:
        today: Reference date (defaults to today in the configured timezone)
        dry_run: Only count the members that would be reset

    Returns:
        Number of members reset (or that would be reset)
    """
    period = current_quota_period(today)
    stale = Member.objects.filter(
        ~Q(last_quota_reset_period=period)
    )

    if dry_run:
        return stale.count()

    count = stale.update(
        bypass_quota=F('max_bypass_quota'),
        last_quota_reset_period=period,
        updated_at=timezone.now(),
    )
    logger.info("Reset bypass quota of %d member(s) for %s", count, period)
    return count
