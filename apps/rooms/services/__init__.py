"""
Rooms app services layer.

Services contain the rotation scheduler and the obligation ledger.
All state-changing operations run in a transaction, lock the rows
they read and write the room through a version-guarded update.
"""

from .exceptions import (
    RoomsServiceError,
    RoomNotFoundError,
    MemberNotFoundError,
    NotRoomMemberError,
    EmptyRosterError,
    NotYourTurnError,
    BypassQuotaExhaustedError,
    BypassAlreadyActiveError,
    OutstandingDebtError,
    InvalidHelperError,
    MemberHoldsTurnError,
    DuplicateTurnOrderError,
    ConcurrentUpdateError,
    StaleWriteError,
)

from .transactions import (
    run_with_retries,
)

from .quota import (
    current_quota_period,
    reconcile_bypass_quota,
    reconcile_all_quotas,
)

from .roster import (
    get_room,
    get_sorted_roster,
    get_current_member,
    get_member_for_user,
    find_member,
    lock_room,
    lock_roster,
    normalize_turn_index,
    save_room_state,
    create_room,
    enroll_member,
)

from .turn_rotation import (
    TurnOutcome,
    TurnAdvance,
    advance_turn,
    apply_turn_advance,
)

from .bypass import (
    bypass_turn,
)

from .member_status import (
    set_member_status,
    toggle_leave,
)

from .statistics import (
    get_room_statistics,
)


__all__ = [
    # Exceptions
    'RoomsServiceError',
    'RoomNotFoundError',
    'MemberNotFoundError',
    'NotRoomMemberError',
    'EmptyRosterError',
    'NotYourTurnError',
    'BypassQuotaExhaustedError',
    'BypassAlreadyActiveError',
    'OutstandingDebtError',
    'InvalidHelperError',
    'MemberHoldsTurnError',
    'DuplicateTurnOrderError',
    'ConcurrentUpdateError',
    'StaleWriteError',

    # Transactions
    'run_with_retries',

    # Quota
    'current_quota_period',
    'reconcile_bypass_quota',
    'reconcile_all_quotas',

    # Roster
    'get_room',
    'get_sorted_roster',
    'get_current_member',
    'get_member_for_user',
    'find_member',
    'lock_room',
    'lock_roster',
    'normalize_turn_index',
    'save_room_state',
    'create_room',
    'enroll_member',

    # Turn rotation
    'TurnOutcome',
    'TurnAdvance',
    'advance_turn',
    'apply_turn_advance',

    # Bypass
    'bypass_turn',

    # Member status
    'set_member_status',
    'toggle_leave',

    # Statistics
    'get_room_statistics',
]
