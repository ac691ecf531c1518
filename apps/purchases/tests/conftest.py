import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserRole
from apps.rooms.services import create_room, enroll_member


@pytest.fixture
def client_for():
    """Return a factory for API clients authenticated as a given user."""
    def _client_for(user):
        client = APIClient()
        refresh = RefreshToken.for_user(user)
        client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return client
    return _client_for


def _resident(name, phone=''):
    return User.objects.create_user(
        email=f'{name.lower()}@example.com',
        password='TestPass123!',
        display_name=name,
        phone_number=phone,
    )


@pytest.fixture
def alice(db):
    return _resident('Alice', '081111111111')


@pytest.fixture
def budi(db):
    return _resident('Budi', '082222222222')


@pytest.fixture
def citra(db):
    return _resident('Citra', '083333333333')


@pytest.fixture
def courier(db):
    """Online courier."""
    return User.objects.create_user(
        email='kurir@example.com',
        password='TestPass123!',
        display_name='Pak Kurir',
        phone_number='084444444444',
        role=UserRole.COURIER,
        is_online=True,
    )


@pytest.fixture
def offline_courier(db):
    return User.objects.create_user(
        email='kurir2@example.com',
        password='TestPass123!',
        display_name='Kurir Libur',
        phone_number='085555555555',
        role=UserRole.COURIER,
        is_online=False,
    )


@pytest.fixture
def room(db):
    return create_room(name='Kamar B2')


@pytest.fixture
def members(room, alice, budi, citra):
    """Enroll three residents at ranks 1..3; Alice holds the first turn."""
    return [
        enroll_member(room_id=room.id, user=alice, turn_order=1),
        enroll_member(room_id=room.id, user=budi, turn_order=2),
        enroll_member(room_id=room.id, user=citra, turn_order=3),
    ]


@pytest.fixture
def purchase_payload(room):
    """Return a factory for valid purchase request bodies."""
    def _payload(key='key-1', **overrides):
        data = {
            'room': str(room.id),
            'cost': '18000.00',
            'photo_refs': ['uploads/receipt-1.jpg'],
            'submission_key': key,
        }
        data.update(overrides)
        return data
    return _payload


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()
