"""Monite API client — implements the EntityService interface.

Communicates with the Monite entity API (https://api.sandbox.monite.com)
using httpx. Authenticates with the OAuth2 client-credentials grant and
reuses the bearer token until shortly before it expires.
"""

import logging
import time
from typing import Any

import httpx

from monite_smoke.application.interfaces.entity_service import EntityService
from monite_smoke.application.schemas.entity import EntityCreate, EntityUpdate
from monite_smoke.domain.entities import Entity
from monite_smoke.domain.exceptions import EntityServiceError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.sandbox.monite.com"
DEFAULT_API_VERSION = "2024-01-31"

# Refresh the token this many seconds before the server says it expires
_TOKEN_EXPIRY_MARGIN = 60.0
_LIST_PAGE_SIZE = 100
_ABSENT_STATUS_CODES = frozenset({404, 410})


class MoniteClient(EntityService):
    """Infrastructure adapter — connects to the Monite entity API.

    Pass ``http_client`` to inject a preconfigured client (tests use an
    ``httpx.MockTransport``); otherwise one is created on first use and
    closed by ``aclose()``.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        base_url: str = DEFAULT_BASE_URL,
        api_version: str = DEFAULT_API_VERSION,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._client_id = client_id
        self._client_secret = client_secret
        self._base_url = base_url.rstrip("/")
        self._api_version = api_version
        self._timeout = timeout
        self._http_client = http_client
        self._owned_client: httpx.AsyncClient | None = None
        self._access_token: str | None = None
        self._token_expires_at = 0.0

    async def __aenter__(self) -> "MoniteClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the internally created HTTP client, if any."""
        if self._owned_client is not None:
            await self._owned_client.aclose()
            self._owned_client = None

    def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or the lazily created owned one."""
        if self._http_client is not None:
            return self._http_client
        if self._owned_client is None:
            self._owned_client = httpx.AsyncClient(timeout=self._timeout)
        return self._owned_client

    # ── Authentication ───────────────────────────────────────────────

    async def _get_access_token(self) -> str:
        """Return a cached bearer token, requesting a new one when needed."""
        if self._access_token and time.monotonic() < self._token_expires_at:
            return self._access_token

        url = f"{self._base_url}/v1/auth/token"
        payload = {
            "grant_type": "client_credentials",
            "client_id": self._client_id,
            "client_secret": self._client_secret,
        }
        try:
            response = await self._get_client().post(
                url,
                headers={"x-monite-version": self._api_version},
                json=payload,
            )
        except httpx.HTTPError as exc:
            raise EntityServiceError(0, f"Token request failed: {exc}") from exc

        if response.status_code >= 400:
            self._raise_api_error(response)

        data = response.json()
        token = data.get("access_token")
        if not token:
            raise EntityServiceError(response.status_code, "Token response has no access_token")

        expires_in = float(data.get("expires_in") or 0)
        self._access_token = token
        self._token_expires_at = time.monotonic() + max(0.0, expires_in - _TOKEN_EXPIRY_MARGIN)
        logger.info("Obtained Monite access token (expires_in=%ss)", int(expires_in))
        return token

    async def _get_headers(self) -> dict[str, str]:
        """Standard headers for Monite requests."""
        token = await self._get_access_token()
        return {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "x-monite-version": self._api_version,
        }

    # ── Requests ─────────────────────────────────────────────────────

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        allow_absent: bool = False,
    ) -> httpx.Response | None:
        """Send an authenticated request and raise on API errors.

        With ``allow_absent`` a 404/410 response returns None instead of
        raising.
        """
        url = f"{self._base_url}{path}"
        headers = await self._get_headers()
        logger.debug("%s %s", method, url)

        try:
            response = await self._get_client().request(
                method, url, headers=headers, json=json, params=params
            )
        except httpx.HTTPError as exc:
            raise EntityServiceError(0, f"{method} {path} failed: {exc}") from exc

        if allow_absent and response.status_code in _ABSENT_STATUS_CODES:
            return None
        if response.status_code >= 400:
            self._raise_api_error(response)
        return response

    async def create_entity(self, record: EntityCreate) -> Entity:
        response = await self._request("POST", "/v1/entities", json=record.to_payload())
        entity = Entity.from_api(response.json())
        if not entity.id:
            raise EntityServiceError(response.status_code, "Created entity has no id")
        logger.info("Created entity %s", entity.id)
        return entity

    async def get_entity(self, entity_id: str) -> Entity | None:
        response = await self._request("GET", f"/v1/entities/{entity_id}", allow_absent=True)
        if response is None:
            logger.info("Entity %s not found", entity_id)
            return None
        return Entity.from_api(response.json())

    async def list_entities(self) -> list[Entity]:
        """Fetch every page of entities.

        Accepts both a bare JSON list and the paginated envelope
        ``{"data": [...], "next_pagination_token": ...}``.
        """
        entities: list[Entity] = []
        params: dict[str, Any] = {"limit": _LIST_PAGE_SIZE}
        seen_tokens: set[str] = set()

        while True:
            response = await self._request("GET", "/v1/entities", params=params)
            data = response.json()
            if isinstance(data, list):
                items, next_token = data, None
            else:
                items = data.get("data") or []
                next_token = data.get("next_pagination_token")

            entities.extend(Entity.from_api(item) for item in items)

            if not next_token:
                break
            if next_token in seen_tokens:
                logger.warning("Pagination token %s repeated, stopping", next_token)
                break
            seen_tokens.add(next_token)
            params = {"pagination_token": next_token}

        logger.info("Listed %d entities", len(entities))
        return entities

    async def update_entity(self, entity_id: str, patch: EntityUpdate) -> Entity:
        response = await self._request(
            "PATCH", f"/v1/entities/{entity_id}", json=patch.to_payload()
        )
        return Entity.from_api(response.json())

    async def delete_entity(self, entity_id: str) -> None:
        await self._request("DELETE", f"/v1/entities/{entity_id}")
        logger.info("Deleted entity %s", entity_id)

    def _raise_api_error(self, response: httpx.Response) -> None:
        """Raise EntityServiceError from a 4xx/5xx httpx Response."""
        message = response.text or response.reason_phrase
        try:
            data = response.json()
        except ValueError:
            data = None

        if isinstance(data, dict):
            error = data.get("error")
            if isinstance(error, dict) and error.get("message"):
                message = error["message"]
            elif isinstance(error, str):
                message = error
            elif data.get("detail"):
                message = str(data["detail"])
            elif data.get("message"):
                message = str(data["message"])

        raise EntityServiceError(status_code=response.status_code, message=message)
