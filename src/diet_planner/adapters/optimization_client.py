"""HTTP client for the macro optimization service."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class OptimizationClient(Protocol):
    """Interface for the remote ingredient optimization call."""

    async def optimize(
        self, payload: dict[str, object], access_token: str | None = None
    ) -> dict[str, object]:
        """Send an optimization request and return the raw JSON response."""


@dataclass
class HttpxOptimizationClient(OptimizationClient):
    """HTTPX-backed optimization client."""

    url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 180.0

    @classmethod
    def create(
        cls, url: str, timeout_seconds: float = 180.0
    ) -> "HttpxOptimizationClient":
        """Create a client with a managed httpx session."""
        return cls(
            url=url,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def optimize(
        self, payload: dict[str, object], access_token: str | None = None
    ) -> dict[str, object]:
        """POST the request; non-2xx responses raise ``httpx.HTTPStatusError``."""
        headers = {"Content-Type": "application/json"}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        response = await self.http_client.post(
            self.url,
            json=payload,
            headers=headers,
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
