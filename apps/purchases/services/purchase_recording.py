"""
Purchase recording service.

Filing a purchase discharges the current turn: the purchase is stored,
the rotation advances exactly once and, when requested, a delivery
order is opened. All of it commits together or not at all.
"""

import logging
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from django.db import IntegrityError

from apps.accounts.models import User
from apps.purchases.models import Purchase, Fulfillment
from apps.rooms.services import (
    TurnOutcome,
    advance_turn,
    apply_turn_advance,
    find_member,
    lock_room,
    lock_roster,
    normalize_turn_index,
    run_with_retries,
    NotRoomMemberError,
    NotYourTurnError,
)
from apps.deliveries.services import DeliveryRequest, create_delivery_order
from apps.notifications.services import notify_turn_handoff

from .exceptions import MissingProofError, DuplicateSubmissionError

logger = logging.getLogger(__name__)


def record_purchase(
    *,
    room_id: UUID,
    buyer: User,
    cost: Decimal,
    photo_refs: List[str],
    submission_key: str,
    description: str = '',
    delivery: Optional[DeliveryRequest] = None,
    expected_version: Optional[int] = None,
) -> Purchase:
    """
    Record a purchase and hand the turn to the next member.

    A submission key identifies one filing. Retrying with the same key
    never advances the rotation a second time.

    Args:
        room_id: UUID of the room
        buyer: User filing the purchase; must hold the turn
        cost: Amount paid
        photo_refs: Purchase proof photo references
        submission_key: Client-generated idempotency key
        description: Optional note
        delivery: Courier target, or None for self pickup
        expected_version: Room version the caller last saw

    Returns:
        Created Purchase instance

    Raises:
        MissingProofError: If no proof photos were given
        DuplicateSubmissionError: If the submission key was already used
        RoomNotFoundError: If room doesn't exist
        NotRoomMemberError: If buyer isn't in this room
        NotYourTurnError: If buyer isn't the responsible member
        InvalidCourierError: If the targeted courier is invalid
        ConcurrentUpdateError: If the room changed since ``expected_version``
    """
    if not photo_refs:
        raise MissingProofError("Upload at least one photo of the purchase")

    existing = Purchase.objects.filter(submission_key=submission_key).first()
    if existing:
        raise DuplicateSubmissionError(existing)

    try:
        return run_with_retries(
            _record_purchase,
            room_id=room_id,
            buyer=buyer,
            cost=cost,
            photo_refs=list(photo_refs),
            submission_key=submission_key,
            description=description,
            delivery=delivery,
            expected_version=expected_version,
        )
    except IntegrityError:
        # A concurrent request stored the same key first
        existing = Purchase.objects.filter(submission_key=submission_key).first()
        if existing:
            raise DuplicateSubmissionError(existing)
        raise


def _record_purchase(*, room_id, buyer, cost, photo_refs, submission_key,
                     description, delivery, expected_version):
    room = lock_room(room_id=room_id, expected_version=expected_version)
    roster = lock_roster(room=room)
    current_index = normalize_turn_index(room, roster)

    buyer_member = find_member(roster, user=buyer)
    if buyer_member is None:
        raise NotRoomMemberError(f"User is not a member of {room.name}")

    if buyer_member.id != roster[current_index].id:
        raise NotYourTurnError(
            f"It is {roster[current_index].display_name}'s turn, not yours"
        )

    purchase = Purchase.objects.create(
        room=room,
        buyer=buyer,
        buyer_name=buyer.get_display_name(),
        cost=cost,
        description=description,
        photo_refs=photo_refs,
        is_bypass_task=room.has_pending_bypass,
        is_debt_payment=buyer_member.bypass_debt > 0,
        fulfillment=Fulfillment.COURIER if delivery else Fulfillment.SELF_PICKUP,
        submission_key=submission_key,
    )

    advance = advance_turn(
        roster=roster,
        current_index=current_index,
        buyer_debt=buyer_member.bypass_debt,
    )
    room = apply_turn_advance(room=room, buyer=buyer_member, advance=advance)

    if delivery is not None:
        create_delivery_order(purchase=purchase, request=delivery)

    remaining_debt = 0
    if advance.outcome == TurnOutcome.DEBT_CONTINUES:
        remaining_debt = buyer_member.bypass_debt - advance.debt_decrement
    notify_turn_handoff(
        room=room,
        member=roster[advance.next_index],
        remaining_debt=remaining_debt,
    )

    logger.info(
        "Purchase %s recorded in room %s by %s (debt payment: %s, bypass task: %s)",
        purchase.id, room.id, buyer.id, purchase.is_debt_payment, purchase.is_bypass_task
    )
    return purchase
