"""
HTTP Client for the Backend API.

Async client shared by the CLI commands and the editor's ApiNoteStore.
Every request carries an X-Frontend-ID header so the backend can route
logs by frontend.
"""

from typing import Any

import httpx

from modules.backend.core.config import get_server_base_url
from modules.backend.core.logging import get_logger, log_with_source

logger = get_logger(__name__)


class APIClient:
    """
    HTTP client for backend API communication.

    Usage:
        client = APIClient()
        response = await client.get("/health")
        response = await client.put("/api/v1/notes/<id>", json={...})
        await client.close()
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        frontend: str = "cli",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the API client.

        Args:
            base_url: Backend base URL. If None, built from application.yaml.
            timeout: Request timeout in seconds. If None, read from application.yaml.
            frontend: Value sent as X-Frontend-ID and used as the log source.
            transport: Optional httpx transport (tests pass an ASGI or mock transport).
        """
        if base_url is None or timeout is None:
            try:
                config_base_url, config_timeout = get_server_base_url()
            except Exception as e:
                if base_url is None:
                    raise RuntimeError(
                        "Could not determine server URL from config/settings/application.yaml"
                    ) from e
                config_base_url, config_timeout = base_url, 30.0
            base_url = base_url or config_base_url
            timeout = timeout if timeout is not None else config_timeout

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.frontend = frontend
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"X-Frontend-ID": self.frontend},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """
        Make an HTTP request to the backend.

        Raises:
            httpx.HTTPError: On transport failure. HTTP error statuses are
                returned, not raised.
        """
        client = await self._get_client()
        log_with_source(logger, self.frontend, "debug", "API request", method=method, path=path)

        try:
            response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            log_with_source(
                logger, self.frontend, "error", "API request failed",
                method=method, path=path, error=str(e),
            )
            raise

        log_with_source(
            logger, self.frontend, "debug", "API response",
            method=method, path=path, status_code=response.status_code,
        )
        return response

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PUT", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("DELETE", path, **kwargs)


_client: APIClient | None = None


def get_api_client() -> APIClient:
    """Get or create the CLI's API client singleton."""
    global _client
    if _client is None:
        _client = APIClient()
    return _client


async def close_api_client() -> None:
    global _client
    if _client:
        await _client.close()
        _client = None
