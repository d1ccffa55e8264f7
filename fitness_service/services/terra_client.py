"""
HTTP client for the Terra wearable aggregation API.

Terra sits in front of Garmin, Fitbit, Oura, Whoop, Apple Health and other
providers. Every call here is made while a user is waiting on the response,
so failures are raised as `UpstreamVendorError` carrying Terra's own message
when it sends one.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

import httpx

from ..core.config import settings
from ..errors import UpstreamVendorError

logger = logging.getLogger(__name__)


def _vendor_message(response: httpx.Response) -> Optional[str]:
    """Extracts the 'message' field from an error body, if the body is JSON."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        return body.get("message")
    return None


class TerraClient:
    """
    Thin async wrapper around the Terra REST endpoints used by this service.

    A fresh `httpx.AsyncClient` is opened per call. `transport` lets tests
    plug in an `httpx.MockTransport`.
    """

    def __init__(
        self,
        base_url: str,
        dev_id: Optional[str],
        api_key: Optional[str],
        app_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.dev_id = dev_id
        self.api_key = api_key
        self.app_url = app_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls, transport: Optional[httpx.AsyncBaseTransport] = None) -> "TerraClient":
        return cls(
            base_url=settings.TERRA_API_URL,
            dev_id=settings.TERRA_DEV_ID,
            api_key=settings.TERRA_API_KEY,
            app_url=settings.APP_URL,
            timeout=settings.TERRA_TIMEOUT_SECONDS,
            transport=transport,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.dev_id and self.api_key)

    def _client(self) -> httpx.AsyncClient:
        headers = {
            "Content-Type": "application/json",
            "dev-id": self.dev_id or "",
            "x-api-key": self.api_key or "",
        }
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=self.timeout,
            transport=self.transport,
        )

    async def _request(self, method: str, path: str, failure_message: str, **kwargs) -> Dict[str, Any]:
        """
        Sends one request and returns the decoded JSON body.

        Raises:
            UpstreamVendorError: If the client is not configured, Terra cannot
                be reached, or Terra answers with an error status.
        """
        if not self.is_configured:
            raise UpstreamVendorError("Wearable integration is not configured")

        async with self._client() as client:
            try:
                response = await client.request(method, path, **kwargs)
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                logger.error("Terra %s %s failed with %s: %s", method, path, e.response.status_code, e.response.text)
                raise UpstreamVendorError(_vendor_message(e.response) or failure_message)
            except httpx.RequestError as e:
                logger.error("Terra %s %s could not be reached: %s", method, path, e)
                raise UpstreamVendorError(failure_message)

        if not response.content:
            return {}
        try:
            body = response.json()
        except ValueError:
            logger.error("Terra %s %s returned a non-JSON body", method, path)
            raise UpstreamVendorError(failure_message)
        return body if isinstance(body, dict) else {"data": body}

    async def _fetch_records(self, path: str, terra_user_id: str, start_date: date, end_date: date,
                             failure_message: str) -> List[Dict[str, Any]]:
        params = {
            "user_id": terra_user_id,
            "start_date": start_date.isoformat(),
            "end_date": end_date.isoformat(),
            "to_webhook": "false",
        }
        body = await self._request("GET", path, failure_message, params=params)
        return body.get("data") or []

    # --- Endpoints ---

    async def generate_widget_session(self, reference_id: str, providers: Sequence[str] = ()) -> Dict[str, Any]:
        """
        Creates a Terra widget session the user opens to authorize a device.

        Args:
            reference_id (str): Our user id; Terra echoes it back in webhooks.
            providers (Sequence[str]): Optional provider whitelist, e.g. ("GARMIN",).

        Returns:
            dict: `widget_url` and `session_id`.
        """
        payload = {
            "reference_id": reference_id,
            "language": "en",
            "auth_success_redirect_url": f"{self.app_url}/connect-device/success",
            "auth_failure_redirect_url": f"{self.app_url}/connect-device/failure",
        }
        if providers:
            payload["providers"] = ",".join(providers)

        body = await self._request(
            "POST", "/auth/generateWidgetSession", "Failed to generate widget session", json=payload
        )
        if not body.get("url"):
            raise UpstreamVendorError("Failed to generate widget session")
        return {"widget_url": body["url"], "session_id": body.get("session_id")}

    async def get_user_info(self, terra_user_id: str) -> Dict[str, Any]:
        """Returns Terra's record of the user and their connected provider."""
        return await self._request(
            "GET", "/userInfo", "Failed to get user devices", params={"user_id": terra_user_id}
        )

    async def get_activity(self, terra_user_id: str, start_date: date, end_date: date) -> List[Dict[str, Any]]:
        return await self._fetch_records("/activity", terra_user_id, start_date, end_date,
                                         "Failed to get activity data")

    async def get_sleep(self, terra_user_id: str, start_date: date, end_date: date) -> List[Dict[str, Any]]:
        return await self._fetch_records("/sleep", terra_user_id, start_date, end_date,
                                         "Failed to get sleep data")

    async def get_daily(self, terra_user_id: str, start_date: date, end_date: date) -> List[Dict[str, Any]]:
        return await self._fetch_records("/daily", terra_user_id, start_date, end_date,
                                         "Failed to get daily data")

    async def disconnect_user(self, terra_user_id: str) -> None:
        """Revokes Terra's authorization for the user's device."""
        await self._request("DELETE", f"/user/{terra_user_id}", "Failed to disconnect user")


def get_terra_client() -> TerraClient:
    """FastAPI dependency returning a client built from the current settings."""
    return TerraClient.from_settings()
