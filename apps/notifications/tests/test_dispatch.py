from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from apps.accounts.models import User, UserRole
from apps.notifications.services import (
    notify_turn_handoff,
    notify_new_order,
    notify_order_cancelled,
)
from apps.notifications.services.messages import format_rupiah, turn_handoff_message

SEND = 'apps.notifications.services.dispatch.send_text_notification'


def member(name, phone):
    return SimpleNamespace(display_name=name, user=SimpleNamespace(phone_number=phone))


class TestMessages:

    @pytest.mark.parametrize('amount,expected', [
        (Decimal('18000.00'), 'Rp 18.000'),
        (1250000, 'Rp 1.250.000'),
        (None, 'Rp 0'),
    ])
    def test_format_rupiah(self, amount, expected):
        assert format_rupiah(amount) == expected

    def test_handoff_without_debt(self):
        message = turn_handoff_message(room_name='Kamar A1', member_name='Budi')

        assert '*Budi*' in message
        assert 'Sisa utang' not in message

    def test_handoff_with_debt(self):
        message = turn_handoff_message(room_name='Kamar A1', member_name='Budi', remaining_debt=2)

        assert 'Sisa utang: 2 galon' in message


@pytest.mark.django_db
class TestDispatch:

    def test_sent_after_commit(self, django_capture_on_commit_callbacks):
        room = SimpleNamespace(name='Kamar A1')

        with patch(SEND) as send:
            with django_capture_on_commit_callbacks() as callbacks:
                notify_turn_handoff(room=room, member=member('Budi', '082222222222'))
            send.assert_not_called()

            for callback in callbacks:
                callback()

        send.assert_called_once()
        assert send.call_args[0][0] == '082222222222'

    def test_missing_phone_not_scheduled(self, django_capture_on_commit_callbacks):
        room = SimpleNamespace(name='Kamar A1')

        with django_capture_on_commit_callbacks() as callbacks:
            notify_turn_handoff(room=room, member=member('Budi', ''))

        assert callbacks == []

    def test_broadcast_reaches_online_couriers(self, django_capture_on_commit_callbacks):
        User.objects.create_user(
            email='on@example.com', password='x', display_name='On',
            role=UserRole.COURIER, is_online=True, phone_number='084444444444',
        )
        User.objects.create_user(
            email='off@example.com', password='x', display_name='Off',
            role=UserRole.COURIER, is_online=False, phone_number='085555555555',
        )
        order = SimpleNamespace(
            courier_id=None,
            room=SimpleNamespace(name='Kamar A1'),
            buyer_name='Alice',
            cost=Decimal('18000'),
            description='',
        )

        with patch(SEND) as send:
            with django_capture_on_commit_callbacks(execute=True):
                notify_new_order(order=order)

        send.assert_called_once()
        destination, message = send.call_args[0]
        assert destination == '084444444444'
        assert 'Rp 18.000' in message

    def test_cancelled_order_without_buyer(self, django_capture_on_commit_callbacks):
        order = SimpleNamespace(
            buyer_id=None,
            buyer=None,
            room=SimpleNamespace(name='Kamar A1'),
            buyer_name='Alice',
            cancel_reason='',
        )

        with django_capture_on_commit_callbacks() as callbacks:
            notify_order_cancelled(order=order)

        assert callbacks == []
