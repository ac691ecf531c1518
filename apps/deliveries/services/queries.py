"""Read-side queries for delivery orders."""

from uuid import UUID

from django.db.models import Q, QuerySet

from apps.accounts.models import User
from apps.deliveries.models import DeliveryOrder, DeliveryStatus

from .exceptions import DeliveryOrderNotFoundError


def get_visible_orders(*, user: User) -> QuerySet:
    """
    Orders a user may see.

    Couriers see open broadcast orders, orders pinned to them and orders
    they handled. Administrators see everything. Residents see their
    room's orders.
    """
    queryset = DeliveryOrder.objects.select_related('room', 'buyer', 'courier', 'purchase')

    if user.is_dorm_admin:
        return queryset

    if user.is_courier:
        return queryset.filter(
            Q(status=DeliveryStatus.PENDING, courier__isnull=True) |
            Q(courier=user)
        )

    membership = getattr(user, 'membership', None)
    if membership is None:
        return queryset.none()
    return queryset.filter(room_id=membership.room_id)


def get_order_for_user(*, order_id: UUID, user: User) -> DeliveryOrder:
    try:
        return get_visible_orders(user=user).get(id=order_id)
    except DeliveryOrder.DoesNotExist:
        raise DeliveryOrderNotFoundError(f"Delivery order with ID {order_id} not found")
