"""
Notifications app services layer.

Outbound text notifications are best effort and fire only after the
originating transaction commits.
"""

from .text_gateway import (
    normalize_phone_number,
    send_text_notification,
)

from .dispatch import (
    notify_bypass,
    notify_turn_handoff,
    notify_new_order,
    notify_order_claimed,
    notify_order_delivered,
    notify_order_cancelled,
)


__all__ = [
    # Gateway
    'normalize_phone_number',
    'send_text_notification',

    # Dispatch
    'notify_bypass',
    'notify_turn_handoff',
    'notify_new_order',
    'notify_order_claimed',
    'notify_order_delivered',
    'notify_order_cancelled',
]
