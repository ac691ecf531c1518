"""
Deliveries app services layer.

Delivery orders move through pending, processing and delivered, with
cancellation as the escape hatch. Every transition is a conditional
update on the order row.
"""

from .exceptions import (
    DeliveriesServiceError,
    DeliveryOrderNotFoundError,
    InvalidCourierError,
    OrderAlreadyClaimedError,
    NotAssignedCourierError,
    InvalidOrderTransitionError,
    MissingDeliveryProofError,
    CancellationNotAllowedError,
    DataIntegrityError,
)

from .order_creation import (
    DeliveryRequest,
    create_delivery_order,
)

from .order_fulfillment import (
    claim_delivery_order,
    complete_delivery_order,
    cancel_delivery_order,
    cancel_stale_orders,
)

from .queries import (
    get_visible_orders,
    get_order_for_user,
)


__all__ = [
    # Exceptions
    'DeliveriesServiceError',
    'DeliveryOrderNotFoundError',
    'InvalidCourierError',
    'OrderAlreadyClaimedError',
    'NotAssignedCourierError',
    'InvalidOrderTransitionError',
    'MissingDeliveryProofError',
    'CancellationNotAllowedError',
    'DataIntegrityError',

    # Order creation
    'DeliveryRequest',
    'create_delivery_order',

    # Fulfillment
    'claim_delivery_order',
    'complete_delivery_order',
    'cancel_delivery_order',
    'cancel_stale_orders',

    # Queries
    'get_visible_orders',
    'get_order_for_user',
]
