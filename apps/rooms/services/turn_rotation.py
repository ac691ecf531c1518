"""
Turn rotation service.

``advance_turn`` is the scheduler: given the sorted roster, the index
that discharged the turn and the buyer's outstanding debt, it decides
who buys next. It only reads its inputs. ``apply_turn_advance`` writes
the decision back under the caller's transaction.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Tuple

from django.db.models import F
from django.utils import timezone

from apps.rooms.models import Room, Member

from .exceptions import EmptyRosterError, StaleWriteError
from .roster import save_room_state

logger = logging.getLogger(__name__)


class TurnOutcome(str, Enum):
    # Buyer still owes turns and keeps responsibility
    DEBT_CONTINUES = 'debt_continues'
    # Responsibility moved along the roster
    ROTATED = 'rotated'


@dataclass(frozen=True)
class TurnAdvance:
    outcome: TurnOutcome
    next_index: int
    cycle_completed: bool = False
    consumed_credit_member_ids: Tuple = ()
    skipped_member_ids: Tuple = ()
    debt_decrement: int = 0

    @property
    def cycle_increment(self) -> int:
        return 1 if self.cycle_completed else 0


def advance_turn(*, roster: Sequence, current_index: int, buyer_debt: int) -> TurnAdvance:
    """
    Compute the next responsible member after a completed purchase.

    A buyer paying off debt keeps the turn until the debt reaches zero;
    once it does, rotation continues past them as usual. Rotation
    resumes after ``current_index``, which after a bypass is the helper
    who discharged the turn.

    Members with skip credits spend one credit and are passed over.
    Members on leave are passed over for free. The search visits each
    member at most once; if nobody is eligible, the candidate reached
    after one full pass is accepted anyway so the room never stalls.

    Args:
        roster: Members sorted by turn order (anything with ``id``,
            ``skip_credits`` and ``is_on_leave``)
        current_index: Index of the member who just bought
        buyer_debt: Buyer's bypass debt before this purchase

    Returns:
        TurnAdvance describing the new index and ledger changes

    Raises:
        EmptyRosterError: If the roster is empty
    """
    n = len(roster)
    if n == 0:
        raise EmptyRosterError("Cannot rotate an empty roster")

    current_index = current_index % n
    debt_decrement = 0

    if buyer_debt > 0:
        debt_decrement = 1
        if buyer_debt - debt_decrement > 0:
            return TurnAdvance(
                outcome=TurnOutcome.DEBT_CONTINUES,
                next_index=current_index,
                debt_decrement=debt_decrement,
            )

    wrapped = current_index == n - 1
    candidate = (current_index + 1) % n
    consumed = []
    skipped = []

    for _ in range(n):
        member = roster[candidate]
        if member.is_on_leave:
            skipped.append(member.id)
        elif member.skip_credits > 0:
            consumed.append(member.id)
            skipped.append(member.id)
        else:
            break

        if candidate == n - 1:
            wrapped = True
        candidate = (candidate + 1) % n

    return TurnAdvance(
        outcome=TurnOutcome.ROTATED,
        next_index=candidate,
        cycle_completed=wrapped,
        consumed_credit_member_ids=tuple(consumed),
        skipped_member_ids=tuple(skipped),
        debt_decrement=debt_decrement,
    )


def apply_turn_advance(*, room: Room, buyer: Member, advance: TurnAdvance) -> Room:
    """
    Persist a computed advance: buyer debt, spent credits and room state.

    Must run inside the transaction that locked ``room`` and its roster.
    Every counter update is conditional on the value it decrements, so
    a concurrent change surfaces as ``StaleWriteError`` instead of a
    negative counter.
    """
    now = timezone.now()

    if advance.debt_decrement:
        updated = (
            Member.objects
            .filter(id=buyer.id, bypass_debt__gte=advance.debt_decrement)
            .update(bypass_debt=F('bypass_debt') - advance.debt_decrement, updated_at=now)
        )
        if updated != 1:
            raise StaleWriteError(f"Debt of member {buyer.id} changed during update")

    for member_id in advance.consumed_credit_member_ids:
        updated = (
            Member.objects
            .filter(id=member_id, skip_credits__gt=0)
            .update(skip_credits=F('skip_credits') - 1, updated_at=now)
        )
        if updated != 1:
            raise StaleWriteError(f"Skip credits of member {member_id} changed during update")

    changes = {
        'current_turn_index': advance.next_index,
        'last_bypasser': None,
    }
    if advance.cycle_completed:
        changes['cycle_count'] = F('cycle_count') + 1

    previous_index = room.current_turn_index
    room = save_room_state(room, **changes)

    logger.info(
        "Room %s turn %s: index %d -> %d, cycle %d",
        room.id, advance.outcome.value, previous_index,
        room.current_turn_index, room.cycle_count
    )
    return room
