"""
Login for residents, couriers and administrators.

Accounts are matched case-insensitively on email. A failed attempt
never tells the caller whether the email exists.
"""

import logging

from django.db import transaction
from django.contrib.auth import get_user_model
from django.utils import timezone

from .exceptions import InvalidCredentialsError, InactiveAccountError

User = get_user_model()
logger = logging.getLogger(__name__)


@transaction.atomic
def authenticate_user(*, email: str, password: str) -> User:
    """
    Check credentials and stamp ``last_login``.

    Args:
        email: Login email, any letter case
        password: Plain-text password

    Returns:
        Authenticated User instance

    Raises:
        InvalidCredentialsError: If no account matches the credentials
        InactiveAccountError: If the account was deactivated by an administrator
    """
    email = User.objects.normalize_email(email.strip())
    user = (
        User.objects
        .select_for_update()
        .filter(email__iexact=email)
        .first()
    )

    if user is None or not user.check_password(password):
        logger.info("Failed login for %s", email)
        raise InvalidCredentialsError("Invalid email or password")

    if not user.is_active:
        logger.info("Login refused for deactivated account %s", user.id)
        raise InactiveAccountError("Account is deactivated")

    User.objects.filter(id=user.id).update(last_login=timezone.now())
    user.refresh_from_db(fields=['last_login'])

    logger.info("User %s (%s) logged in", user.id, user.role)
    return user
