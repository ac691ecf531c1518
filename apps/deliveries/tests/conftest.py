from decimal import Decimal

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserRole
from apps.rooms.services import create_room, enroll_member
from apps.purchases.services import record_purchase
from apps.deliveries.services import DeliveryRequest


@pytest.fixture
def client_for():
    """Return a factory for API clients authenticated as a given user."""
    def _client_for(user):
        client = APIClient()
        refresh = RefreshToken.for_user(user)
        client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return client
    return _client_for


def _user(email, name, **extra):
    return User.objects.create_user(
        email=email,
        password='TestPass123!',
        display_name=name,
        **extra
    )


@pytest.fixture
def resident(db):
    return _user('dewi@example.com', 'Dewi', phone_number='081111111111')


@pytest.fixture
def roommate(db):
    return _user('eka@example.com', 'Eka', phone_number='082222222222')


@pytest.fixture
def courier(db):
    return _user('kurir1@example.com', 'Kurir Satu', role=UserRole.COURIER, is_online=True,
                 phone_number='084444444444')


@pytest.fixture
def other_courier(db):
    return _user('kurir2@example.com', 'Kurir Dua', role=UserRole.COURIER, is_online=True)


@pytest.fixture
def dorm_admin(db):
    return _user('admin@example.com', 'Pengelola', role=UserRole.ADMIN)


@pytest.fixture
def room(resident, roommate):
    room = create_room(name='Kamar C3')
    enroll_member(room_id=room.id, user=resident, turn_order=1)
    enroll_member(room_id=room.id, user=roommate, turn_order=2)
    return room


@pytest.fixture
def place_order(room, resident):
    """Return a factory filing a purchase with a delivery request."""
    def _place_order(courier=None, key='order-1'):
        purchase = record_purchase(
            room_id=room.id,
            buyer=resident,
            cost=Decimal('18000'),
            photo_refs=['uploads/transfer.jpg'],
            submission_key=key,
            description='Galon Aqua 2x',
            delivery=DeliveryRequest(courier_id=courier.id if courier else None),
        )
        return purchase.delivery_order
    return _place_order


@pytest.fixture
def broadcast_order(place_order):
    return place_order()
