from unittest.mock import patch

import httpx
import pytest

from apps.notifications.services import normalize_phone_number, send_text_notification

POST = 'apps.notifications.services.text_gateway.httpx.post'
URL = 'https://api.fonnte.com/send'


def gateway_response(status_code=200, body=None):
    return httpx.Response(
        status_code,
        json=body if body is not None else {'status': True},
        request=httpx.Request('POST', URL),
    )


@pytest.fixture
def enabled(settings):
    settings.NOTIFICATIONS_ENABLED = True
    settings.FONNTE_API_URL = URL
    settings.FONNTE_API_TOKEN = 'secret-token'
    settings.NOTIFICATION_COUNTRY_CODE = '62'
    return settings


class TestNormalizePhoneNumber:

    @pytest.mark.parametrize('raw,expected', [
        ('081234567890', '6281234567890'),
        ('0812-3456-7890', '6281234567890'),
        ('+62 812 3456 7890', '6281234567890'),
        ('6281234567890', '6281234567890'),
        ('81234567890', '6281234567890'),
        ('', ''),
        ('-', ''),
        (None, ''),
        ('abc', ''),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_phone_number(raw, country_code='62') == expected

    def test_other_country_code(self):
        assert normalize_phone_number('0123', country_code='60') == '60123'


class TestSendTextNotification:

    def test_disabled_sends_nothing(self, settings):
        settings.NOTIFICATIONS_ENABLED = False

        with patch(POST) as post:
            assert send_text_notification('081234567890', 'Halo') is False

        post.assert_not_called()

    def test_blank_destination_skipped(self, enabled):
        with patch(POST) as post:
            assert send_text_notification('-', 'Halo') is False

        post.assert_not_called()

    def test_success(self, enabled):
        with patch(POST, return_value=gateway_response()) as post:
            assert send_text_notification('0812-3456-7890', 'Halo') is True

        args, kwargs = post.call_args
        assert args[0] == URL
        assert kwargs['json'] == {
            'target': '6281234567890',
            'message': 'Halo',
            'countryCode': '62',
        }
        assert kwargs['headers']['Authorization'] == 'secret-token'

    def test_provider_rejection(self, enabled):
        body = {'status': False, 'reason': 'invalid token'}
        with patch(POST, return_value=gateway_response(body=body)):
            assert send_text_notification('081234567890', 'Halo') is False

    def test_http_error_status(self, enabled):
        with patch(POST, return_value=gateway_response(status_code=500)):
            assert send_text_notification('081234567890', 'Halo') is False

    def test_network_error(self, enabled):
        error = httpx.ConnectError('connection refused', request=httpx.Request('POST', URL))
        with patch(POST, side_effect=error):
            assert send_text_notification('081234567890', 'Halo') is False

    def test_non_json_body(self, enabled):
        response = httpx.Response(200, text='<html>', request=httpx.Request('POST', URL))
        with patch(POST, return_value=response):
            assert send_text_notification('081234567890', 'Halo') is False
