"""
Order fulfillment service.

Drives delivery orders through their state machine:

    pending -> processing -> delivered
    pending | processing -> cancelled

Claiming is a compare-and-swap on the order row, so when several
couriers race for a broadcast order exactly one of them wins.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional
from uuid import UUID

from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from apps.accounts.models import User
from apps.accounts.services import NotCourierError
from apps.deliveries.models import DeliveryOrder, DeliveryStatus
from apps.purchases.models import Purchase
from apps.notifications.services import (
    notify_order_claimed,
    notify_order_delivered,
    notify_order_cancelled,
)

from .exceptions import (
    DeliveryOrderNotFoundError,
    OrderAlreadyClaimedError,
    NotAssignedCourierError,
    InvalidOrderTransitionError,
    MissingDeliveryProofError,
    CancellationNotAllowedError,
    DataIntegrityError,
)

logger = logging.getLogger(__name__)


def _lock_order(order_id: UUID) -> DeliveryOrder:
    try:
        return (
            DeliveryOrder.objects
            .select_for_update()
            .select_related('room', 'buyer')
            .get(id=order_id)
        )
    except DeliveryOrder.DoesNotExist:
        raise DeliveryOrderNotFoundError(f"Delivery order with ID {order_id} not found")


@transaction.atomic
def claim_delivery_order(*, order_id: UUID, courier: User) -> DeliveryOrder:
    """
    Claim a pending order for a courier.

    Only the first successful claim wins; later claims fail without
    touching the order.

    Args:
        order_id: UUID of the delivery order
        courier: Courier claiming the order

    Returns:
        Updated DeliveryOrder instance

    Raises:
        NotCourierError: If the user is not a courier
        DeliveryOrderNotFoundError: If order doesn't exist
        NotAssignedCourierError: If the order is pinned to another courier
        OrderAlreadyClaimedError: If another courier claimed it first
        InvalidOrderTransitionError: If the order is already closed
    """
    if not courier.is_courier:
        raise NotCourierError("Only couriers can claim delivery orders")

    now = timezone.now()
    claimed = (
        DeliveryOrder.objects
        .filter(id=order_id, status=DeliveryStatus.PENDING)
        .filter(Q(courier__isnull=True) | Q(courier=courier))
        .update(
            status=DeliveryStatus.PROCESSING,
            courier=courier,
            courier_name=courier.get_display_name(),
            claimed_at=now,
            updated_at=now,
        )
    )

    try:
        order = DeliveryOrder.objects.select_related('room', 'buyer').get(id=order_id)
    except DeliveryOrder.DoesNotExist:
        raise DeliveryOrderNotFoundError(f"Delivery order with ID {order_id} not found")

    if not claimed:
        if order.status == DeliveryStatus.PENDING:
            raise NotAssignedCourierError("This order is assigned to another courier")
        if order.status == DeliveryStatus.PROCESSING:
            raise OrderAlreadyClaimedError(
                f"Order was already claimed by {order.courier_name}"
            )
        raise InvalidOrderTransitionError(f"Order is already {order.status}")

    notify_order_claimed(order=order)

    logger.info("Delivery order %s claimed by courier %s", order.id, courier.id)
    return order


@transaction.atomic
def complete_delivery_order(
    *,
    order_id: UUID,
    courier: User,
    proof_refs: List[str],
) -> DeliveryOrder:
    """
    Mark an order delivered and attach proof to it and its purchase.

    The order and the purchase are written in one transaction; neither
    carries the proof unless both do.

    Args:
        order_id: UUID of the delivery order
        courier: Courier who claimed the order
        proof_refs: Delivery proof photo references

    Returns:
        Updated DeliveryOrder instance

    Raises:
        MissingDeliveryProofError: If no proof references were given
        DeliveryOrderNotFoundError: If order doesn't exist
        NotAssignedCourierError: If the order belongs to another courier
        InvalidOrderTransitionError: If the order is not being processed
        DataIntegrityError: If the linked purchase is missing
    """
    if not proof_refs:
        raise MissingDeliveryProofError("Upload at least one delivery photo")

    order = _lock_order(order_id)

    if order.courier_id != courier.id:
        raise NotAssignedCourierError("This order is handled by another courier")

    if not order.can_transition_to(DeliveryStatus.DELIVERED):
        raise InvalidOrderTransitionError(
            f"Cannot complete an order that is {order.status}"
        )

    purchase = (
        Purchase.objects
        .select_for_update()
        .filter(id=order.purchase_id)
        .first()
    ) if order.purchase_id else None

    if purchase is None:
        logger.error(
            "Delivery order %s has no purchase (purchase_id=%s); needs manual reconciliation",
            order.id, order.purchase_id
        )
        raise DataIntegrityError(f"Purchase for delivery order {order.id} is missing")

    proof_refs = list(proof_refs)

    order.status = DeliveryStatus.DELIVERED
    order.delivered_at = timezone.now()
    order.delivery_proof_refs = proof_refs
    order.save(update_fields=['status', 'delivered_at', 'delivery_proof_refs', 'updated_at'])

    purchase.delivery_proof_refs = proof_refs
    purchase.save(update_fields=['delivery_proof_refs'])

    notify_order_delivered(order=order)

    logger.info("Delivery order %s delivered by courier %s", order.id, courier.id)
    return order


def _cancel(order: DeliveryOrder, reason: str) -> DeliveryOrder:
    if not order.can_transition_to(DeliveryStatus.CANCELLED):
        raise InvalidOrderTransitionError(f"Cannot cancel an order that is {order.status}")

    order.status = DeliveryStatus.CANCELLED
    order.cancelled_at = timezone.now()
    order.cancel_reason = reason
    order.save(update_fields=['status', 'cancelled_at', 'cancel_reason', 'updated_at'])

    notify_order_cancelled(order=order)

    logger.info("Delivery order %s cancelled: %s", order.id, reason or 'no reason given')
    return order


@transaction.atomic
def cancel_delivery_order(
    *,
    order_id: UUID,
    cancelled_by: User,
    reason: str = '',
) -> DeliveryOrder:
    """
    Cancel an open order.

    Raises:
        CancellationNotAllowedError: If the user is not an administrator
        DeliveryOrderNotFoundError: If order doesn't exist
        InvalidOrderTransitionError: If the order is already closed
    """
    if not cancelled_by.is_dorm_admin:
        raise CancellationNotAllowedError("Only administrators can cancel delivery orders")

    return _cancel(_lock_order(order_id), reason)


def cancel_stale_orders(
    *,
    older_than: timedelta,
    reason: str = 'Timed out',
    dry_run: bool = False,
    now: Optional[datetime] = None,
) -> List[DeliveryOrder]:
    """
    Cancel orders left open longer than ``older_than``.

    Each order is cancelled in its own transaction; an order that closed
    in the meantime is skipped.

    Returns:
        Orders cancelled (or that would be cancelled)
    """
    cutoff = (now or timezone.now()) - older_than
    stale = list(
        DeliveryOrder.objects
        .select_related('room')
        .filter(
            status__in=[DeliveryStatus.PENDING, DeliveryStatus.PROCESSING],
            created_at__lt=cutoff,
        )
        .order_by('created_at')
    )

    if dry_run:
        return stale

    cancelled = []
    for candidate in stale:
        try:
            with transaction.atomic():
                cancelled.append(_cancel(_lock_order(candidate.id), reason))
        except InvalidOrderTransitionError:
            logger.info("Delivery order %s closed before timeout cancel", candidate.id)
    return cancelled
