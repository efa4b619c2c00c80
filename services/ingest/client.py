"""
TDX API Client
Authenticated access to the TeamDynamix ticketing REST API, throttled by a token bucket
"""

from typing import Any, Callable, Optional

import httpx
import structlog

from services.normalize.normalizer import TicketNormalizer
from shared.config import DEFAULT_API_URL, DEFAULT_APP_ID, Settings
from shared.errors import AuthError, HttpError
from shared.schemas.ticket import NormalizedRow

from .rate_limiter import TokenBucket

logger = structlog.get_logger()


class TDXClient:
    """
    Client for the TDX ticketing API.

    Every GET and POST takes one token from the bucket first, so the
    client never issues more than `capacity` requests per refill window.

    Endpoints (relative to the API base URL):
    - GET  {app_id}/tickets/{id}
    - GET  {app_id}/tickets/{id}/feed
    - POST {app_id}/tickets/search
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = DEFAULT_API_URL,
        app_id: str = DEFAULT_APP_ID,
        bucket: Optional[TokenBucket] = None,
        normalizer: Optional[TicketNormalizer] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        if not api_key:
            raise AuthError("No TDX API key found. Set TDX_KEY in the environment or a .env file.")

        self.app_id = app_id
        self.bucket = bucket or TokenBucket()
        self.normalizer = normalizer or TicketNormalizer()
        self._client = httpx.Client(
            base_url=base_url.rstrip("/") + "/",
            timeout=timeout,
            transport=transport,
            headers={
                "Accept": "application/json",
                "Authorization": f"Bearer {api_key}",
            },
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "TDXClient":
        """Build a client, token bucket and normalizer from Settings"""
        return cls(
            api_key=settings.api_key,
            base_url=settings.api_url,
            app_id=settings.app_id,
            bucket=TokenBucket(
                capacity=settings.token_capacity,
                window_seconds=settings.refill_window,
            ),
            normalizer=TicketNormalizer(attribute_ids=settings.attribute_ids),
            timeout=settings.http_timeout,
            transport=transport,
        )

    @property
    def tokens(self) -> int:
        return self.bucket.tokens

    def seconds_until_refill(self) -> float:
        return self.bucket.seconds_until_refill()

    def set_refresh_callback(self, callback: Optional[Callable[[], None]]):
        """Install a hook called on every token refill check"""
        self.bucket.on_refill_check = callback

    def get(self, path: str) -> Any:
        """GET a path and return the decoded JSON body"""
        return self._request("GET", path)

    def post(self, path: str, data: Any) -> Any:
        """POST a JSON body and return the decoded JSON response"""
        return self._request("POST", path, json=data)

    def _request(self, method: str, path: str, **kwargs) -> Any:
        self.bucket.consume()
        response = self._client.request(method, path, **kwargs)
        if not response.is_success:
            logger.error("TDX request failed", method=method, path=path,
                         status=response.status_code)
            raise HttpError(response.status_code, response.reason_phrase, path)

        logger.debug("TDX request", method=method, path=path, tokens=self.bucket.tokens)
        return response.json()

    def get_ticket(self, ticket_id: str) -> dict:
        """Fetch the raw ticket payload"""
        return self.get(f"{self.app_id}/tickets/{ticket_id}")

    def search_tickets(self, query: dict) -> Any:
        """Run a ticket search query"""
        return self.post(f"{self.app_id}/tickets/search", query)

    def get_feed(self, ticket_id: str) -> Any:
        """Fetch the ticket's activity feed"""
        return self.get(f"{self.app_id}/tickets/{ticket_id}/feed")

    def fetch_ticket(self, ticket_id: str) -> NormalizedRow:
        """Fetch a ticket and normalize it into a spreadsheet row"""
        raw = self.get_ticket(ticket_id)
        row = self.normalizer.normalize(raw)
        logger.info("Fetched ticket", ticket_id=ticket_id, status=row.status)
        return row

    def close(self):
        """Close the underlying HTTP client"""
        self._client.close()

    def __enter__(self) -> "TDXClient":
        return self

    def __exit__(self, *exc_info):
        self.close()
