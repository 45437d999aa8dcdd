"""
Flick Electric API clients.

FlickAndroidClient talks to the mobile API with an OAuth password-grant token
and serves user info and price forecasts. FlickWebClient logs in to the
customer website with a cookie session and serves usage history.

Both clients are async context managers owning one httpx.AsyncClient:

    async with FlickAndroidClient(username, password) as client:
        user_info = await client.get_user_info()
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Any, List, Optional

import httpx
from pydantic import ValidationError

from flick2influx.config import settings
from flick2influx.exceptions import AuthenticationError, DataFetchError
from flick2influx.logging_config import get_logger
from flick2influx.models.flick import (
    DetailedUsageInterval,
    PriceForecast,
    UsageBucket,
    UserInfo,
)

logger = get_logger(__name__)

TOKEN_PATH = "identity/oauth/token"
USER_INFO_PATH = "customer/user_info"
FORECAST_PATH = "rating/forecast_prices"

SIGN_IN_PATH = "identity/users/sign_in"
USAGE_PATH = "dashboard/usage.json"
DAY_USAGE_PATH = "dashboard/day/{day}.json"


class _FlickClient(ABC):
    """Shared HTTP plumbing for both Flick APIs."""
    
    def __init__(self, username: str, password: str, base_url: str,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.username = username
        self.password = password
        self.base_url = base_url
        self.timeout = settings.request_timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
    
    async def __aenter__(self):
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            follow_redirects=True,
            transport=self._transport,
        )
        try:
            await self.login()
        except Exception:
            await self.close()
            raise
        return self
    
    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
    
    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
    
    @abstractmethod
    async def login(self) -> None:
        """Authenticate the session. Called on entering the client; a failure closes it again."""
    
    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Send a request, mapping HTTP failures to domain exceptions."""
        if self._client is None:
            raise DataFetchError(f"{type(self).__name__} used outside 'async with'")
        
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise DataFetchError(f"HTTP error: {e}")
        
        if response.status_code in (401, 403):
            raise AuthenticationError(f"Flick rejected the request to {path} ({response.status_code})")
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise DataFetchError(f"HTTP error: {e}")
        return response
    
    async def _get_json(self, path: str, **kwargs) -> Any:
        response = await self._request("GET", path, **kwargs)
        try:
            return response.json()
        except ValueError as e:
            raise DataFetchError(f"Invalid JSON from {path}: {e}")


def _parse(model, payload: Any, what: str):
    """Validate a payload against a model, mapping validation errors to DataFetchError."""
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise DataFetchError(f"Malformed {what} response: {e}")


def _parse_list(model, payload: Any, what: str) -> list:
    """Validate a list payload item by item."""
    if not isinstance(payload, list):
        raise DataFetchError(f"Malformed {what} response: expected a list, got {type(payload).__name__}")
    return [_parse(model, item, what) for item in payload]


def _unwrap(payload: Any, key: str) -> Any:
    """Flick wraps some payloads in an object, e.g. {"data": [...]}."""
    if isinstance(payload, dict) and key in payload:
        return payload[key]
    return payload


class FlickAndroidClient(_FlickClient):
    """Client for the Flick mobile API."""
    
    def __init__(self, username: str, password: str,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        super().__init__(username, password, settings.flick_api_base_url, transport)
        self._token: Optional[str] = None
    
    async def login(self) -> None:
        """Exchange the account credentials for a bearer token."""
        response = await self._request("POST", TOKEN_PATH, data={
            "grant_type": "password",
            "client_id": settings.flick_client_id,
            "client_secret": settings.flick_client_secret,
            "username": self.username,
            "password": self.password,
        })
        try:
            body = response.json()
        except ValueError as e:
            raise AuthenticationError(f"Invalid token response: {e}")
        
        token = None
        if isinstance(body, dict):
            token = body.get("id_token") or body.get("access_token")
        if not token:
            raise AuthenticationError("Token response did not contain a token")
        
        self._token = token
        self._client.headers["Authorization"] = f"Bearer {token}"
        logger.debug("Authenticated with Flick mobile API", username=self.username)
    
    async def get_user_info(self) -> UserInfo:
        """Get the user's info, including authorized supply nodes."""
        payload = await self._get_json(USER_INFO_PATH)
        return _parse(UserInfo, _unwrap(payload, "data"), "user info")
    
    async def get_price_forecast(self, supply_node: str) -> PriceForecast:
        """Get the predicted prices for a supply node."""
        payload = await self._get_json(FORECAST_PATH, params={"supply_node": supply_node})
        forecast = _parse(PriceForecast, _unwrap(payload, "data"), "price forecast")
        logger.debug("Fetched price forecast", supply_node=supply_node, count=len(forecast.prices))
        return forecast


class FlickWebClient(_FlickClient):
    """Client for the Flick customer website."""
    
    def __init__(self, username: str, password: str,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        super().__init__(username, password, settings.flick_web_base_url, transport)
    
    async def login(self) -> None:
        """Sign in and keep the session cookie on the client."""
        await self._request("POST", SIGN_IN_PATH, data={
            "user[email]": self.username,
            "user[password]": self.password,
        })
        if not self._client.cookies:
            raise AuthenticationError("Sign in did not start a session")
        logger.debug("Signed in to Flick website", username=self.username)
    
    async def get_power_usage(self, start: datetime, end: datetime) -> List[UsageBucket]:
        """Get usage buckets between start and end."""
        payload = await self._get_json(USAGE_PATH, params={
            "start_at": start.isoformat(),
            "end_at": end.isoformat(),
        })
        buckets = _parse_list(UsageBucket, _unwrap(payload, "data"), "power usage")
        logger.debug("Fetched power usage", start=start.isoformat(), end=end.isoformat(), count=len(buckets))
        return buckets
    
    async def fetch_detailed_usage_for_day(self, day: date) -> List[DetailedUsageInterval]:
        """Get the usage and price paid for each interval of a day."""
        payload = await self._get_json(DAY_USAGE_PATH.format(day=day.isoformat()))
        return _parse_list(DetailedUsageInterval, _unwrap(payload, "data"), "detailed usage")
