"""
Notification dispatch.

Each helper renders a message and schedules it with
``transaction.on_commit``: nothing is sent for a rolled-back change,
and a failed send can never undo a committed one.
"""

import logging

from django.db import transaction

from apps.accounts.models import User

from . import messages
from .text_gateway import send_text_notification

logger = logging.getLogger(__name__)


def _send_after_commit(destination, message):
    if not destination:
        logger.debug("No phone number on file, notification skipped")
        return
    transaction.on_commit(lambda: send_text_notification(destination, message))


def notify_bypass(*, room, helpee, helper):
    """Tell the helper they took over the turn."""
    _send_after_commit(
        helper.user.phone_number,
        messages.bypass_message(
            room_name=room.name,
            helpee_name=helpee.display_name,
            helper_name=helper.display_name,
        ),
    )


def notify_turn_handoff(*, room, member, remaining_debt=0):
    """Tell the next responsible member it is their turn."""
    _send_after_commit(
        member.user.phone_number,
        messages.turn_handoff_message(
            room_name=room.name,
            member_name=member.display_name,
            remaining_debt=remaining_debt,
        ),
    )


def notify_new_order(*, order):
    """Tell the targeted courier, or every online courier for a broadcast order."""
    if order.courier_id:
        couriers = [order.courier]
    else:
        couriers = list(User.objects.online_couriers())

    message = messages.new_order_message(
        room_name=order.room.name,
        buyer_name=order.buyer_name,
        cost=order.cost,
        description=order.description,
    )
    for courier in couriers:
        _send_after_commit(courier.phone_number, message)


def _buyer_phone(order):
    return order.buyer.phone_number if order.buyer_id else ''


def notify_order_claimed(*, order):
    _send_after_commit(
        _buyer_phone(order),
        messages.order_claimed_message(
            room_name=order.room.name,
            buyer_name=order.buyer_name,
            courier_name=order.courier_name,
        ),
    )


def notify_order_delivered(*, order):
    _send_after_commit(
        _buyer_phone(order),
        messages.order_delivered_message(
            room_name=order.room.name,
            buyer_name=order.buyer_name,
            courier_name=order.courier_name,
        ),
    )


def notify_order_cancelled(*, order):
    _send_after_commit(
        _buyer_phone(order),
        messages.order_cancelled_message(
            room_name=order.room.name,
            buyer_name=order.buyer_name,
            reason=order.cancel_reason,
        ),
    )
