"""
Domain-specific exceptions for deliveries app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class DeliveriesServiceError(Exception):
    """Base exception for all deliveries service errors."""
    pass


class DeliveryOrderNotFoundError(DeliveriesServiceError):
    """Raised when a delivery order does not exist."""
    pass


class InvalidCourierError(DeliveriesServiceError):
    """Raised when an order is pinned to someone who is not an active courier."""
    pass


class OrderAlreadyClaimedError(DeliveriesServiceError):
    """Raised when another courier claimed the order first."""
    pass


class NotAssignedCourierError(DeliveriesServiceError):
    """Raised when a courier acts on an order assigned to someone else."""
    pass


class InvalidOrderTransitionError(DeliveriesServiceError):
    """Raised when the order's current status does not allow the change."""
    pass


class MissingDeliveryProofError(DeliveriesServiceError):
    """Raised when an order is completed without proof photos."""
    pass


class CancellationNotAllowedError(DeliveriesServiceError):
    """Raised when a non-administrator tries to cancel an order."""
    pass


class DataIntegrityError(DeliveriesServiceError):
    """Raised when linked records are missing; needs manual reconciliation."""
    pass
