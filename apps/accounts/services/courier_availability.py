"""Courier availability service."""

import logging
from typing import Optional

from django.db import transaction
from django.contrib.auth import get_user_model

from apps.accounts.models import UserRole

from .exceptions import NotCourierError

User = get_user_model()
logger = logging.getLogger(__name__)


@transaction.atomic
def set_courier_online(*, user: User, is_online: Optional[bool] = None) -> User:
    """
    Switch a courier between online and offline.

    Online couriers receive broadcast delivery orders.

    Args:
        user: Courier account
        is_online: Target state; toggles the current state when omitted

    Returns:
        Updated User instance

    Raises:
        NotCourierError: If user is not a courier
    """
    courier = (
        User.objects
        .select_for_update()
        .get(id=user.id)
    )

    if courier.role != UserRole.COURIER:
        raise NotCourierError("Only couriers can change availability")

    courier.is_online = (not courier.is_online) if is_online is None else is_online
    courier.save(update_fields=['is_online'])

    logger.info("Courier %s is now %s", courier.id, 'online' if courier.is_online else 'offline')
    return courier
