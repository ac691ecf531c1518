import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserRole


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a test resident."""
    return User.objects.create_user(
        email='testuser@example.com',
        password='TestPass123!',
        display_name='Test User',
        phone_number='081234567890',
    )


@pytest.fixture
def user_inactive(db):
    """Create and return an inactive user."""
    return User.objects.create_user(
        email='inactive@example.com',
        password='TestPass123!',
        display_name='Inactive User',
        is_active=False,
    )


@pytest.fixture
def courier(db):
    """Create and return an offline courier."""
    return User.objects.create_user(
        email='courier@example.com',
        password='TestPass123!',
        display_name='Test Courier',
        role=UserRole.COURIER,
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return API client authenticated as resident."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def courier_client(courier):
    """Return API client authenticated as courier."""
    client = APIClient()
    refresh = RefreshToken.for_user(courier)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client
