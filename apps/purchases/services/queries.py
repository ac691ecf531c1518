"""Read-side queries for purchases."""

from typing import Optional
from uuid import UUID

from django.db.models import QuerySet

from apps.accounts.models import User
from apps.purchases.models import Purchase

from .exceptions import PurchaseNotFoundError


def get_visible_purchases(*, user: User, room_id: Optional[UUID] = None) -> QuerySet:
    """
    Purchases a user may see, newest first.

    Administrators see every room; residents only their own.
    """
    queryset = Purchase.objects.select_related('room', 'buyer', 'delivery_order')

    if not user.is_dorm_admin:
        membership = getattr(user, 'membership', None)
        if membership is None:
            return queryset.none()
        queryset = queryset.filter(room_id=membership.room_id)

    if room_id:
        queryset = queryset.filter(room_id=room_id)

    return queryset.order_by('-created_at')


def get_purchase_for_user(*, purchase_id: UUID, user: User) -> Purchase:
    try:
        return get_visible_purchases(user=user).get(id=purchase_id)
    except Purchase.DoesNotExist:
        raise PurchaseNotFoundError(f"Purchase with ID {purchase_id} not found")
