"""
Roster service.

Materializes a room's rotation order and provides the locked,
versioned reads and writes the scheduling services build on.
"""

import logging
from typing import List, Optional
from uuid import UUID

from django.db import transaction, IntegrityError
from django.db.models import Max, F
from django.utils import timezone

from apps.accounts.models import User
from apps.rooms.models import Room, Member

from .exceptions import (
    RoomNotFoundError,
    EmptyRosterError,
    NotRoomMemberError,
    DuplicateTurnOrderError,
    ConcurrentUpdateError,
    StaleWriteError,
)
from .quota import current_quota_period

logger = logging.getLogger(__name__)


def get_room(*, room_id: UUID) -> Room:
    try:
        return Room.objects.get(id=room_id)
    except Room.DoesNotExist:
        raise RoomNotFoundError(f"Room with ID {room_id} not found")


def get_sorted_roster(*, room_id: UUID) -> List[Member]:
    """
    Get a room's members in rotation order.

    The roster is always sorted explicitly on ``turn_order`` (ties broken
    by id) before anyone indexes into it.
    """
    return get_room(room_id=room_id).get_roster()


def lock_room(*, room_id: UUID, expected_version: Optional[int] = None) -> Room:
    """
    Lock a room row for the current transaction.

    Args:
        room_id: UUID of the room
        expected_version: Version the caller last observed, if any

    Raises:
        RoomNotFoundError: If room doesn't exist
        ConcurrentUpdateError: If the room moved on since the caller looked
    """
    try:
        room = (
            Room.objects
            .select_for_update()
            .get(id=room_id)
        )
    except Room.DoesNotExist:
        raise RoomNotFoundError(f"Room with ID {room_id} not found")

    if expected_version is not None and room.version != expected_version:
        raise ConcurrentUpdateError()

    return room


def lock_roster(*, room: Room) -> List[Member]:
    """Lock and return the room's members in rotation order."""
    return list(
        Member.objects
        .select_for_update()
        .select_related('user')
        .filter(room=room)
        .order_by('turn_order', 'id')
    )


def normalize_turn_index(room: Room, roster: List[Member]) -> int:
    """
    Clamp a stored turn index into the roster range.

    Members can be removed by administrators between turns; an index
    left past the end wraps back into range.
    """
    if not roster:
        raise EmptyRosterError(f"Room {room.name} has no members")

    index = room.current_turn_index
    if index >= len(roster):
        logger.warning(
            "Room %s turn index %d out of range for %d members, wrapping",
            room.id, index, len(roster)
        )
        index = index % len(roster)
    return index


def get_current_member(*, room: Room, roster: Optional[List[Member]] = None) -> Member:
    """Member currently responsible for buying."""
    if roster is None:
        roster = room.get_roster()
    return roster[normalize_turn_index(room, roster)]


def find_member(roster: List[Member], *, user: Optional[User] = None,
                member_id: Optional[UUID] = None) -> Optional[Member]:
    for member in roster:
        if user is not None and member.user_id == user.id:
            return member
        if member_id is not None and str(member.id) == str(member_id):
            return member
    return None


def get_member_for_user(*, user: User) -> Member:
    try:
        return Member.objects.select_related('room', 'user').get(user=user)
    except Member.DoesNotExist:
        raise NotRoomMemberError("User is not enrolled in any room")


def save_room_state(room: Room, **changes) -> Room:
    """
    Conditionally write scheduling fields and bump the room version.

    The write only applies if the version is still the one read under
    lock; otherwise ``StaleWriteError`` signals the caller to retry.
    """
    updated = (
        Room.objects
        .filter(id=room.id, version=room.version)
        .update(version=F('version') + 1, updated_at=timezone.now(), **changes)
    )
    if updated != 1:
        raise StaleWriteError(f"Room {room.id} changed during update")

    room.refresh_from_db()
    return room


@transaction.atomic
def create_room(*, name: str) -> Room:
    """Create an empty room with rotation at the start of cycle zero."""
    return Room.objects.create(name=name)


@transaction.atomic
def enroll_member(
    *,
    room_id: UUID,
    user: User,
    turn_order: Optional[int] = None,
) -> Member:
    """
    Add a resident to a room's roster.

    Args:
        room_id: UUID of the room
        user: Resident joining the room
        turn_order: Rotation rank; appended after the last member when omitted

    Returns:
        Created Member instance

    Raises:
        RoomNotFoundError: If room doesn't exist
        DuplicateTurnOrderError: If the rank is already taken
    """
    room = lock_room(room_id=room_id)

    if turn_order is None:
        highest = room.members.aggregate(highest=Max('turn_order'))['highest']
        turn_order = 1 if highest is None else highest + 1

    try:
        with transaction.atomic():
            member = Member.objects.create(
                room=room,
                user=user,
                turn_order=turn_order,
                last_quota_reset_period=current_quota_period(),
            )
    except IntegrityError:
        raise DuplicateTurnOrderError(
            f"Turn order {turn_order} is taken in {room.name} or user already has a room"
        )

    logger.info("Enrolled %s in room %s at rank %d", user.id, room.id, turn_order)
    return member
