"""
Bypass service.

Lets the responsible member hand their turn to another member. The
helpee spends one unit of quota and owes one turn; the helper earns a
skip credit for their own next turn.
"""

import logging
from typing import Optional
from uuid import UUID

from django.db.models import F
from django.utils import timezone

from apps.accounts.models import User
from apps.rooms.models import Room, Member, BypassRecord
from apps.notifications.services import notify_bypass

from .exceptions import (
    NotRoomMemberError,
    MemberNotFoundError,
    NotYourTurnError,
    BypassQuotaExhaustedError,
    BypassAlreadyActiveError,
    OutstandingDebtError,
    InvalidHelperError,
    StaleWriteError,
)
from .roster import (
    lock_room,
    lock_roster,
    normalize_turn_index,
    find_member,
    save_room_state,
)
from .quota import current_quota_period, reconcile_bypass_quota
from .transactions import run_with_retries

logger = logging.getLogger(__name__)


def bypass_turn(
    *,
    room_id: UUID,
    helpee: User,
    helper_member_id: UUID,
    expected_version: Optional[int] = None,
) -> Room:
    """
    Hand the current turn to another member.

    Preconditions are checked against locked rows; either every ledger
    and room change is applied or none is.

    Args:
        room_id: UUID of the room
        helpee: User currently responsible for buying
        helper_member_id: Member taking over the turn
        expected_version: Room version the caller last saw

    Returns:
        Updated Room instance

    Raises:
        RoomNotFoundError: If room doesn't exist
        NotRoomMemberError: If helpee isn't in this room
        NotYourTurnError: If helpee isn't the responsible member
        BypassAlreadyActiveError: If a bypass is still unresolved
        OutstandingDebtError: If helpee still owes turns
        BypassQuotaExhaustedError: If helpee has no quota left
        MemberNotFoundError: If helper isn't in this room
        InvalidHelperError: If helper is the helpee, on leave or in debt
        ConcurrentUpdateError: If the room changed since ``expected_version``
    """
    return run_with_retries(
        _bypass_turn,
        room_id=room_id,
        helpee=helpee,
        helper_member_id=helper_member_id,
        expected_version=expected_version,
    )


def _bypass_turn(*, room_id, helpee, helper_member_id, expected_version):
    room = lock_room(room_id=room_id, expected_version=expected_version)
    roster = lock_roster(room=room)
    current = roster[normalize_turn_index(room, roster)]

    helpee_member = find_member(roster, user=helpee)
    if helpee_member is None:
        raise NotRoomMemberError(f"User is not a member of {room.name}")

    if helpee_member.id != current.id:
        raise NotYourTurnError("Only the responsible member can bypass the turn")

    if room.has_pending_bypass:
        raise BypassAlreadyActiveError(
            "A bypass is already active in this room. It must be paid off first."
        )

    if helpee_member.bypass_debt > 0:
        raise OutstandingDebtError(
            f"You still owe {helpee_member.bypass_debt} turn(s) and cannot bypass"
        )

    if helpee_member.last_quota_reset_period != current_quota_period():
        reconcile_bypass_quota(member=helpee_member)

    if helpee_member.bypass_quota <= 0:
        raise BypassQuotaExhaustedError("No bypass quota left this month")

    helper = find_member(roster, member_id=helper_member_id)
    if helper is None:
        raise MemberNotFoundError(f"Member {helper_member_id} is not in {room.name}")

    if helper.id == helpee_member.id:
        raise InvalidHelperError("You cannot bypass to yourself")
    # At most one member owes turns at a time, and the owed turn must not
    # land on someone who is away.
    if helper.is_on_leave:
        raise InvalidHelperError(f"{helper.display_name} is on leave")
    if helper.bypass_debt > 0:
        raise InvalidHelperError(f"{helper.display_name} still owes turns")

    now = timezone.now()

    updated = (
        Member.objects
        .filter(id=helpee_member.id, bypass_quota__gt=0, bypass_debt=0)
        .update(
            bypass_quota=F('bypass_quota') - 1,
            bypass_debt=F('bypass_debt') + 1,
            updated_at=now,
        )
    )
    if updated != 1:
        raise StaleWriteError(f"Ledger of member {helpee_member.id} changed during bypass")

    Member.objects.filter(id=helper.id).update(
        skip_credits=F('skip_credits') + 1,
        updated_at=now,
    )

    record, _ = BypassRecord.objects.get_or_create(helpee=helpee_member, helper=helper)
    BypassRecord.objects.filter(id=record.id).update(
        count=F('count') + 1,
        last_bypassed_at=now,
    )

    room = save_room_state(
        room,
        current_turn_index=roster.index(helper),
        last_bypasser=helpee_member,
    )

    notify_bypass(room=room, helpee=helpee_member, helper=helper)

    logger.info(
        "Room %s: %s bypassed to %s",
        room.id, helpee_member.id, helper.id
    )
    return room
