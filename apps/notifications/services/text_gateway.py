"""
Text message gateway.

Sends WhatsApp text notifications through the Fonnte HTTP API.
Delivery is best effort: failures are logged and reported as False,
never raised to the caller.
"""

import logging
import re
from typing import Optional

import httpx
from django.conf import settings

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r'\D')


def normalize_phone_number(raw: Optional[str], country_code: Optional[str] = None) -> str:
    """
    Normalize a phone number to international digits.

    Strips everything except digits, replaces a leading ``0`` with the
    country code and prepends the country code when it is missing.

    Returns:
        Normalized number, or an empty string for blank or ``-`` targets

    Example:
        >>> normalize_phone_number('0812-3456-789')
        '628123456789'
        >>> normalize_phone_number('+62 812 3456 789')
        '628123456789'
    """
    if not raw or raw.strip() in ('', '-'):
        return ''

    country_code = country_code or settings.NOTIFICATION_COUNTRY_CODE
    cleaned = _NON_DIGITS.sub('', raw)
    if not cleaned:
        return ''

    if cleaned.startswith('0'):
        return country_code + cleaned[1:]
    if not cleaned.startswith(country_code):
        return country_code + cleaned
    return cleaned


def send_text_notification(destination: Optional[str], message: str) -> bool:
    """
    Send a text message to a phone number.

    Args:
        destination: Phone number in any common format
        message: Message body

    Returns:
        True if the provider accepted the message
    """
    if not settings.NOTIFICATIONS_ENABLED:
        logger.debug("Notifications disabled, not sending to %s", destination)
        return False

    target = normalize_phone_number(destination)
    if not target:
        return False

    payload = {
        'target': target,
        'message': message,
        'countryCode': settings.NOTIFICATION_COUNTRY_CODE,
    }
    headers = {'Content-Type': 'application/json'}
    if settings.FONNTE_API_TOKEN:
        headers['Authorization'] = settings.FONNTE_API_TOKEN

    try:
        response = httpx.post(
            settings.FONNTE_API_URL,
            json=payload,
            headers=headers,
            timeout=httpx.Timeout(max(1, int(settings.NOTIFICATION_TIMEOUT_SECONDS))),
        )
        response.raise_for_status()
        data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Failed to send notification to %s: %s", target, e)
        return False

    if not isinstance(data, dict) or not data.get('status'):
        reason = data.get('reason') if isinstance(data, dict) else data
        logger.warning("Notification provider rejected message to %s: %s", target, reason)
        return False

    logger.info("Notification sent to %s", target)
    return True
