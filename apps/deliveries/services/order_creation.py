"""
Order creation service.

Opens a delivery order for a freshly recorded purchase, either pinned
to one courier or broadcast to every online courier.
"""

import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from apps.accounts.models import User, UserRole
from apps.deliveries.models import DeliveryOrder, DispatchMode
from apps.notifications.services import notify_new_order

from .exceptions import InvalidCourierError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeliveryRequest:
    """Courier to pin the order to; ``None`` broadcasts it."""
    courier_id: Optional[UUID] = None

    @property
    def dispatch(self) -> str:
        return DispatchMode.BROADCAST if self.courier_id is None else DispatchMode.ASSIGNED


def create_delivery_order(*, purchase, request: DeliveryRequest) -> DeliveryOrder:
    """
    Create a pending delivery order for a purchase.

    Runs inside the purchase's transaction so an order never exists
    without its purchase.

    Args:
        purchase: Recorded Purchase instance
        request: Delivery target

    Returns:
        Created DeliveryOrder instance

    Raises:
        InvalidCourierError: If the targeted user is not an active courier
    """
    courier = None
    if request.courier_id is not None:
        try:
            courier = User.objects.get(
                id=request.courier_id,
                role=UserRole.COURIER,
                is_active=True,
            )
        except User.DoesNotExist:
            raise InvalidCourierError(f"{request.courier_id} is not an active courier")

    order = DeliveryOrder.objects.create(
        room=purchase.room,
        purchase=purchase,
        buyer=purchase.buyer,
        buyer_name=purchase.buyer_name,
        cost=purchase.cost,
        description=purchase.description,
        photo_refs=list(purchase.photo_refs),
        dispatch=request.dispatch,
        courier=courier,
        courier_name=courier.get_display_name() if courier else '',
    )

    notify_new_order(order=order)

    logger.info(
        "Delivery order %s opened for purchase %s (%s)",
        order.id, purchase.id, order.dispatch
    )
    return order
