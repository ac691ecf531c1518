"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    InvalidCredentialsError,
    InactiveAccountError,
    NotCourierError,
)
from .user_authentication import authenticate_user
from .courier_availability import set_courier_online

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'NotCourierError',
    # Services
    'authenticate_user',
    'set_courier_online',
]
