from __future__ import annotations

from typing import Any

import httpx
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from product_catalog.config import (
    CONTENTFUL_BASE_URL,
    CONTENTFUL_SPACE_ID,
    CONTENTFUL_ENVIRONMENT,
    CONTENTFUL_ACCESS_TOKEN,
    CONTENTFUL_CONTENT_TYPE,
    CONTENTFUL_PAGE_LIMIT,
    CONTENTFUL_TIMEOUT,
)
from product_catalog.utils.errors import ExternalSourceUnavailable
from product_catalog.utils.logger import get_current_logger


class ContentfulClient:
    """
    Minimal Contentful Delivery API client: one ``GET .../entries`` per sync.

    Only the first page (``page_limit`` entries) is fetched.
    """

    def __init__(
        self,
        *,
        space_id: str | None = CONTENTFUL_SPACE_ID,
        environment: str = CONTENTFUL_ENVIRONMENT,
        access_token: str | None = CONTENTFUL_ACCESS_TOKEN,
        content_type: str = CONTENTFUL_CONTENT_TYPE,
        base_url: str = CONTENTFUL_BASE_URL,
        page_limit: int = CONTENTFUL_PAGE_LIMIT,
        timeout: float = CONTENTFUL_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._space_id = space_id
        self._environment = environment
        self._access_token = access_token
        self._content_type = content_type
        self._page_limit = page_limit

        if client is None:
            self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout)
            self._owns_client = True
        else:
            self._client = client
            self._owns_client = False

    @property
    def configured(self) -> bool:
        return bool(self._space_id and self._access_token)

    @property
    def entries_path(self) -> str:
        return f"/spaces/{self._space_id}/environments/{self._environment}/entries"

    async def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "ContentfulClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def fetch_entries(self) -> list[dict[str, Any]]:
        """
        Fetch the product entries.

        Returns:
            The ``items`` list of the response

        Raises:
            ExternalSourceUnavailable: If the client is not configured, the request
                fails, or the body is not an entries collection
        """
        logger = get_current_logger()
        if not self.configured:
            raise ExternalSourceUnavailable("Contentful space id and access token are not configured")

        logger.info(f"GET {self.entries_path} (content_type={self._content_type}, limit={self._page_limit})")
        try:
            response = await self._get_entries()
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as exc:
            raise ExternalSourceUnavailable(
                f"Contentful returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ExternalSourceUnavailable(f"Contentful request failed: {exc}") from exc
        except ValueError as exc:
            raise ExternalSourceUnavailable("Contentful returned a non-JSON response") from exc

        items = body.get("items") if isinstance(body, dict) else None
        if not isinstance(items, list):
            raise ExternalSourceUnavailable("Contentful response has no 'items' list")

        total = body.get("total")
        if isinstance(total, int) and total > len(items):
            logger.warning(f"Contentful holds {total} entries, only the first {len(items)} are synced")
        return items

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
        before_sleep=lambda retry_state: get_current_logger().warning(
            f"Retry attempt {retry_state.attempt_number} after Contentful transport error"
        ),
    )
    async def _get_entries(self) -> httpx.Response:
        return await self._client.get(
            self.entries_path,
            params={
                "access_token": self._access_token,
                "content_type": self._content_type,
                "limit": self._page_limit,
            },
        )
