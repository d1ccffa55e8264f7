import asyncio
import json
from datetime import date

import httpx
import pytest

from fitness_service.errors import UpstreamVendorError
from fitness_service.services.terra_client import TerraClient


def make_client(handler, **overrides):
    options = {
        "base_url": "https://terra.test/v2",
        "dev_id": "dev-1",
        "api_key": "key-1",
        "app_url": "http://localhost:5173",
        "transport": httpx.MockTransport(handler),
    }
    options.update(overrides)
    return TerraClient(**options)


def test_widget_session_request_and_response():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["headers"] = request.headers
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"url": "https://widget.test/s/abc", "session_id": "abc"})

    result = asyncio.run(make_client(handler).generate_widget_session("42"))

    assert result == {"widget_url": "https://widget.test/s/abc", "session_id": "abc"}
    assert seen["path"] == "/v2/auth/generateWidgetSession"
    assert seen["headers"]["dev-id"] == "dev-1"
    assert seen["headers"]["x-api-key"] == "key-1"
    assert seen["body"]["reference_id"] == "42"
    assert seen["body"]["auth_success_redirect_url"] == "http://localhost:5173/connect-device/success"
    assert "providers" not in seen["body"]


def test_activity_query_parameters():
    seen = {}

    def handler(request):
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"data": [{"metadata": {"type": "running"}}]})

    records = asyncio.run(make_client(handler).get_activity("terra-1", date(2024, 5, 1), date(2024, 5, 7)))

    assert records == [{"metadata": {"type": "running"}}]
    assert seen["params"] == {
        "user_id": "terra-1",
        "start_date": "2024-05-01",
        "end_date": "2024-05-07",
        "to_webhook": "false",
    }


def test_missing_data_field_gives_empty_list():
    client = make_client(lambda request: httpx.Response(200, json={"status": "success"}))
    assert asyncio.run(client.get_sleep("terra-1", date(2024, 5, 1), date(2024, 5, 2))) == []


def test_widget_session_without_url_is_a_vendor_error():
    client = make_client(lambda request: httpx.Response(200, json={"status": "error"}))
    with pytest.raises(UpstreamVendorError) as excinfo:
        asyncio.run(client.generate_widget_session("42"))
    assert excinfo.value.message == "Failed to generate widget session"


def test_vendor_error_message_is_surfaced():
    client = make_client(lambda request: httpx.Response(403, json={"message": "Invalid API key"}))
    with pytest.raises(UpstreamVendorError) as excinfo:
        asyncio.run(client.get_daily("terra-1", date(2024, 5, 1), date(2024, 5, 1)))
    assert excinfo.value.message == "Invalid API key"


def test_error_without_json_body_uses_default_message():
    client = make_client(lambda request: httpx.Response(502, text="Bad Gateway"))
    with pytest.raises(UpstreamVendorError) as excinfo:
        asyncio.run(client.get_user_info("terra-1"))
    assert excinfo.value.message == "Failed to get user devices"


def test_connection_failure_is_wrapped():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamVendorError) as excinfo:
        asyncio.run(make_client(handler).disconnect_user("terra-1"))
    assert excinfo.value.message == "Failed to disconnect user"


def test_unconfigured_client_makes_no_request():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={})

    with pytest.raises(UpstreamVendorError):
        asyncio.run(make_client(handler, api_key=None).generate_widget_session("1"))
    assert calls == []


def test_disconnect_uses_delete():
    seen = {}

    def handler(request):
        seen["method"], seen["path"] = request.method, request.url.path
        return httpx.Response(200)

    asyncio.run(make_client(handler).disconnect_user("terra-9"))
    assert seen == {"method": "DELETE", "path": "/v2/user/terra-9"}
