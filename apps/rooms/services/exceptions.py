"""
Domain-specific exceptions for rooms app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class RoomsServiceError(Exception):
    """Base exception for all rooms service errors."""
    pass


class RoomNotFoundError(RoomsServiceError):
    """Raised when a room does not exist."""
    pass


class MemberNotFoundError(RoomsServiceError):
    """Raised when a roster member does not exist."""
    pass


class NotRoomMemberError(RoomsServiceError):
    """Raised when a user acts on a room they are not enrolled in."""
    pass


class EmptyRosterError(RoomsServiceError):
    """Raised when a rotation operation runs on a room with no members."""
    pass


class NotYourTurnError(RoomsServiceError):
    """Raised when someone other than the responsible member acts on the turn."""
    pass


class BypassQuotaExhaustedError(RoomsServiceError):
    """Raised when a member has no bypass quota left this month."""
    pass


class BypassAlreadyActiveError(RoomsServiceError):
    """Raised when a bypass is requested while another one is unresolved."""
    pass


class OutstandingDebtError(RoomsServiceError):
    """Raised when a member who still owes turns tries to bypass."""
    pass


class InvalidHelperError(RoomsServiceError):
    """Raised when the chosen substitute cannot take the turn."""
    pass


class MemberHoldsTurnError(RoomsServiceError):
    """Raised when the responsible member tries to go on leave."""
    pass


class DuplicateTurnOrderError(RoomsServiceError):
    """Raised when a turn order is already taken in the room."""
    pass


class ConcurrentUpdateError(RoomsServiceError):
    """Raised when another actor changed the room first."""

    default_message = "Someone else already handled this. Refresh and try again."

    def __init__(self, message=None):
        super().__init__(message or self.default_message)


class StaleWriteError(ConcurrentUpdateError):
    """Raised when a conditional write matched no rows; safe to retry."""
    pass
