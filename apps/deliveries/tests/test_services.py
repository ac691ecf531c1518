from datetime import timedelta
from io import StringIO
from unittest.mock import patch
from uuid import uuid4

import pytest
from django.core.management import call_command
from django.utils import timezone

from apps.accounts.models import User
from apps.accounts.services import NotCourierError
from apps.deliveries.models import DeliveryOrder, DeliveryStatus, can_transition
from apps.deliveries.services import (
    claim_delivery_order,
    complete_delivery_order,
    cancel_delivery_order,
    cancel_stale_orders,
    get_visible_orders,
    get_order_for_user,
    # Exceptions
    DeliveryOrderNotFoundError,
    OrderAlreadyClaimedError,
    NotAssignedCourierError,
    InvalidOrderTransitionError,
    MissingDeliveryProofError,
    CancellationNotAllowedError,
    DataIntegrityError,
)
from apps.purchases.models import Purchase

SEND = 'apps.notifications.services.dispatch.send_text_notification'


class TestTransitions:

    @pytest.mark.parametrize('current,target,allowed', [
        (DeliveryStatus.PENDING, DeliveryStatus.PROCESSING, True),
        (DeliveryStatus.PENDING, DeliveryStatus.CANCELLED, True),
        (DeliveryStatus.PENDING, DeliveryStatus.DELIVERED, False),
        (DeliveryStatus.PROCESSING, DeliveryStatus.DELIVERED, True),
        (DeliveryStatus.PROCESSING, DeliveryStatus.CANCELLED, True),
        (DeliveryStatus.PROCESSING, DeliveryStatus.PENDING, False),
        (DeliveryStatus.DELIVERED, DeliveryStatus.CANCELLED, False),
        (DeliveryStatus.CANCELLED, DeliveryStatus.PENDING, False),
    ])
    def test_can_transition(self, current, target, allowed):
        assert can_transition(current, target) is allowed

    def test_order_checks_its_own_status(self):
        order = DeliveryOrder(status=DeliveryStatus.PROCESSING)

        assert order.can_transition_to(DeliveryStatus.DELIVERED)
        assert not order.can_transition_to(DeliveryStatus.PENDING)


@pytest.mark.django_db
class TestClaimOrder:

    def test_first_claim_wins(self, broadcast_order, courier, other_courier):
        order = claim_delivery_order(order_id=broadcast_order.id, courier=courier)

        assert order.status == DeliveryStatus.PROCESSING
        assert order.courier == courier
        assert order.courier_name == 'Kurir Satu'
        assert order.claimed_at is not None

        with pytest.raises(OrderAlreadyClaimedError):
            claim_delivery_order(order_id=broadcast_order.id, courier=other_courier)

        order.refresh_from_db()
        assert order.courier == courier

    def test_assigned_order_only_for_its_courier(self, place_order, courier, other_courier):
        order = place_order(courier=courier)

        with pytest.raises(NotAssignedCourierError):
            claim_delivery_order(order_id=order.id, courier=other_courier)

        order = claim_delivery_order(order_id=order.id, courier=courier)
        assert order.status == DeliveryStatus.PROCESSING

    def test_resident_cannot_claim(self, broadcast_order, resident):
        with pytest.raises(NotCourierError):
            claim_delivery_order(order_id=broadcast_order.id, courier=resident)

    def test_unknown_order(self, courier):
        with pytest.raises(DeliveryOrderNotFoundError):
            claim_delivery_order(order_id=uuid4(), courier=courier)

    def test_cancelled_order_cannot_be_claimed(self, broadcast_order, courier, dorm_admin):
        cancel_delivery_order(order_id=broadcast_order.id, cancelled_by=dorm_admin)

        with pytest.raises(InvalidOrderTransitionError):
            claim_delivery_order(order_id=broadcast_order.id, courier=courier)

    def test_buyer_notified_of_claim(self, broadcast_order, courier, django_capture_on_commit_callbacks):
        with patch(SEND) as send:
            with django_capture_on_commit_callbacks(execute=True):
                claim_delivery_order(order_id=broadcast_order.id, courier=courier)

        destination, message = send.call_args[0]
        assert destination == '081111111111'
        assert 'Kurir Satu' in message


@pytest.mark.django_db
class TestCompleteOrder:

    def test_proof_reaches_purchase(self, broadcast_order, courier):
        claim_delivery_order(order_id=broadcast_order.id, courier=courier)
        proof = ['uploads/doorstep-1.jpg', 'uploads/doorstep-2.jpg']

        order = complete_delivery_order(order_id=broadcast_order.id, courier=courier, proof_refs=proof)

        assert order.status == DeliveryStatus.DELIVERED
        assert order.delivered_at is not None
        assert order.delivery_proof_refs == proof
        assert Purchase.objects.get(id=order.purchase_id).delivery_proof_refs == proof

    def test_proof_required(self, broadcast_order, courier):
        claim_delivery_order(order_id=broadcast_order.id, courier=courier)

        with pytest.raises(MissingDeliveryProofError):
            complete_delivery_order(order_id=broadcast_order.id, courier=courier, proof_refs=[])

    def test_other_courier_rejected(self, broadcast_order, courier, other_courier):
        claim_delivery_order(order_id=broadcast_order.id, courier=courier)

        with pytest.raises(NotAssignedCourierError):
            complete_delivery_order(order_id=broadcast_order.id, courier=other_courier, proof_refs=['p.jpg'])

    def test_unclaimed_order_cannot_complete(self, place_order, courier):
        order = place_order(courier=courier)

        with pytest.raises(InvalidOrderTransitionError):
            complete_delivery_order(order_id=order.id, courier=courier, proof_refs=['p.jpg'])

    def test_delivered_is_terminal(self, broadcast_order, courier, dorm_admin):
        claim_delivery_order(order_id=broadcast_order.id, courier=courier)
        complete_delivery_order(order_id=broadcast_order.id, courier=courier, proof_refs=['p.jpg'])

        with pytest.raises(InvalidOrderTransitionError):
            complete_delivery_order(order_id=broadcast_order.id, courier=courier, proof_refs=['p.jpg'])
        with pytest.raises(InvalidOrderTransitionError):
            cancel_delivery_order(order_id=broadcast_order.id, cancelled_by=dorm_admin)

    def test_missing_purchase_rolls_back(self, broadcast_order, courier):
        claim_delivery_order(order_id=broadcast_order.id, courier=courier)
        Purchase.objects.filter(id=broadcast_order.purchase_id).delete()

        with pytest.raises(DataIntegrityError):
            complete_delivery_order(order_id=broadcast_order.id, courier=courier, proof_refs=['p.jpg'])

        order = DeliveryOrder.objects.get(id=broadcast_order.id)
        assert order.status == DeliveryStatus.PROCESSING
        assert order.delivery_proof_refs == []


@pytest.mark.django_db
class TestCancelOrder:

    def test_admin_cancels(self, broadcast_order, dorm_admin):
        order = cancel_delivery_order(
            order_id=broadcast_order.id,
            cancelled_by=dorm_admin,
            reason='Stok habis',
        )

        assert order.status == DeliveryStatus.CANCELLED
        assert order.cancel_reason == 'Stok habis'
        assert order.cancelled_at is not None

    def test_processing_order_can_be_cancelled(self, broadcast_order, courier, dorm_admin):
        claim_delivery_order(order_id=broadcast_order.id, courier=courier)

        order = cancel_delivery_order(order_id=broadcast_order.id, cancelled_by=dorm_admin)

        assert order.status == DeliveryStatus.CANCELLED

    def test_resident_cannot_cancel(self, broadcast_order, resident):
        with pytest.raises(CancellationNotAllowedError):
            cancel_delivery_order(order_id=broadcast_order.id, cancelled_by=resident)

        broadcast_order.refresh_from_db()
        assert broadcast_order.status == DeliveryStatus.PENDING


@pytest.mark.django_db
class TestStaleOrders:

    def _age(self, order, hours):
        DeliveryOrder.objects.filter(id=order.id).update(
            created_at=timezone.now() - timedelta(hours=hours)
        )

    def test_only_old_open_orders_cancelled(self, place_order, courier):
        old = place_order(key='k1')
        self._age(old, 30)
        # The roommate holds the turn now, so this one is created directly
        fresh = DeliveryOrder.objects.create(
            room=old.room,
            buyer=old.buyer,
            buyer_name=old.buyer_name,
            cost=old.cost,
        )

        cancelled = cancel_stale_orders(older_than=timedelta(hours=24))

        assert [o.id for o in cancelled] == [old.id]
        assert DeliveryOrder.objects.get(id=old.id).status == DeliveryStatus.CANCELLED
        assert DeliveryOrder.objects.get(id=fresh.id).status == DeliveryStatus.PENDING

    def test_dry_run(self, broadcast_order):
        self._age(broadcast_order, 30)

        orders = cancel_stale_orders(older_than=timedelta(hours=24), dry_run=True)

        assert len(orders) == 1
        assert DeliveryOrder.objects.get(id=broadcast_order.id).status == DeliveryStatus.PENDING

    def test_command(self, broadcast_order):
        self._age(broadcast_order, 48)
        out = StringIO()

        call_command('cancel_stale_orders', '--hours', '24', stdout=out)

        assert 'Cancelled 1 delivery order(s)' in out.getvalue()
        assert DeliveryOrder.objects.get(id=broadcast_order.id).status == DeliveryStatus.CANCELLED

    def test_command_nothing_stale(self, broadcast_order):
        out = StringIO()

        call_command('cancel_stale_orders', stdout=out)

        assert 'No stale delivery orders' in out.getvalue()


@pytest.mark.django_db
class TestVisibleOrders:

    def test_courier_sees_open_broadcast_and_own(self, place_order, courier, other_courier):
        broadcast = place_order(key='k1')
        pinned = DeliveryOrder.objects.create(
            room=broadcast.room,
            buyer_name='Eka',
            cost=broadcast.cost,
            courier=other_courier,
        )

        visible = set(get_visible_orders(user=courier).values_list('id', flat=True))

        assert broadcast.id in visible
        assert pinned.id not in visible

    def test_claimed_order_hidden_from_other_couriers(self, broadcast_order, courier, other_courier):
        claim_delivery_order(order_id=broadcast_order.id, courier=courier)

        assert get_visible_orders(user=other_courier).count() == 0
        assert get_visible_orders(user=courier).count() == 1

    def test_resident_sees_room_orders(self, broadcast_order, roommate):
        assert get_order_for_user(order_id=broadcast_order.id, user=roommate) == broadcast_order

    def test_outsider_gets_not_found(self, broadcast_order):
        outsider = User.objects.create_user(
            email='lain@example.com', password='TestPass123!', display_name='Lain'
        )

        with pytest.raises(DeliveryOrderNotFoundError):
            get_order_for_user(order_id=broadcast_order.id, user=outsider)
