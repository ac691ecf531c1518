"""
Member status service.

Members on leave are passed over by the rotation without spending
skip credits.
"""

import logging
from uuid import UUID

from django.utils import timezone

from apps.accounts.models import User
from apps.rooms.models import Member, MemberStatus

from .exceptions import MemberNotFoundError, MemberHoldsTurnError
from .roster import find_member, get_member_for_user, lock_room, lock_roster, normalize_turn_index, save_room_state
from .transactions import run_with_retries

logger = logging.getLogger(__name__)


def set_member_status(*, member_id: UUID, status: str) -> Member:
    """
    Put a member on leave or back to active.

    The responsible member cannot go on leave: the turn never rests on
    someone who is away. Only ``status`` is written on the member.

    Args:
        member_id: UUID of the roster member
        status: A ``MemberStatus`` value

    Returns:
        Updated Member instance

    Raises:
        MemberNotFoundError: If member doesn't exist
        MemberHoldsTurnError: If the member currently holds the turn
        ValueError: If status is not a known value
    """
    if status not in MemberStatus.values:
        raise ValueError(f"Unknown member status: {status}")

    return run_with_retries(_set_member_status, member_id=member_id, status=status)


def _set_member_status(*, member_id, status):
    try:
        room_id = Member.objects.values_list('room_id', flat=True).get(id=member_id)
    except Member.DoesNotExist:
        raise MemberNotFoundError(f"Member with ID {member_id} not found")

    room = lock_room(room_id=room_id)
    roster = lock_roster(room=room)
    member = find_member(roster, member_id=member_id)
    if member is None:
        # Moved to another room between the lookup and the lock.
        raise MemberNotFoundError(f"Member with ID {member_id} not found")

    if member.status == status:
        return member

    if status == MemberStatus.ON_LEAVE and roster[normalize_turn_index(room, roster)].id == member.id:
        raise MemberHoldsTurnError(
            "You are responsible for the current turn. Buy or bypass before going on leave."
        )

    Member.objects.filter(id=member.id).update(status=status, updated_at=timezone.now())

    # Roster eligibility changed; invalidate versions observed by clients
    save_room_state(room)

    member.refresh_from_db()
    logger.info("Member %s is now %s", member.id, status)
    return member


def toggle_leave(*, user: User) -> Member:
    """
    Flip the caller's status between active and on leave.

    Raises:
        NotRoomMemberError: If the user isn't enrolled in a room
        MemberHoldsTurnError: If the user currently holds the turn
    """
    member = get_member_for_user(user=user)
    new_status = MemberStatus.ACTIVE if member.is_on_leave else MemberStatus.ON_LEAVE
    return set_member_status(member_id=member.id, status=new_status)
