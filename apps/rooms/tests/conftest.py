import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserRole
from apps.rooms.services import create_room, enroll_member


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def client_for():
    """Return a factory for API clients authenticated as a given user."""
    def _client_for(user):
        client = APIClient()
        refresh = RefreshToken.for_user(user)
        client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return client
    return _client_for


@pytest.fixture
def alice(db):
    return User.objects.create_user(
        email='alice@example.com',
        password='TestPass123!',
        display_name='Alice',
        phone_number='081111111111',
    )


@pytest.fixture
def budi(db):
    return User.objects.create_user(
        email='budi@example.com',
        password='TestPass123!',
        display_name='Budi',
        phone_number='082222222222',
    )


@pytest.fixture
def citra(db):
    return User.objects.create_user(
        email='citra@example.com',
        password='TestPass123!',
        display_name='Citra',
        phone_number='083333333333',
    )


@pytest.fixture
def outsider(db):
    """Resident of another room."""
    return User.objects.create_user(
        email='outsider@example.com',
        password='TestPass123!',
        display_name='Outsider',
    )


@pytest.fixture
def dorm_admin(db):
    return User.objects.create_user(
        email='admin@example.com',
        password='TestPass123!',
        display_name='Pengelola',
        role=UserRole.ADMIN,
    )


@pytest.fixture
def room(db):
    """Create and return an empty room."""
    return create_room(name='Kamar A1')


@pytest.fixture
def members(room, alice, budi, citra):
    """Enroll three residents at ranks 1..3; Alice holds the first turn."""
    return [
        enroll_member(room_id=room.id, user=alice, turn_order=1),
        enroll_member(room_id=room.id, user=budi, turn_order=2),
        enroll_member(room_id=room.id, user=citra, turn_order=3),
    ]
