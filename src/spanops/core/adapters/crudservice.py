from __future__ import annotations

import httpx

from spanops.core.verifier import CrudResponse


class HttpCrudServiceAdapter:
    """Adapter that talks to the CRUD service over HTTP with httpx."""

    def __init__(self, client: httpx.Client) -> None:
        self.client = client

    @classmethod
    def from_url(cls, base_url: str, timeout: float) -> "HttpCrudServiceAdapter":
        """Build an adapter with one response timeout applied to every request."""
        return cls(httpx.Client(base_url=base_url, timeout=timeout))

    def request(self, method: str, path: str, body: str | None = None) -> CrudResponse:
        """Send a request with an optional plain-text body."""
        headers = {"Content-Type": "text/plain"} if body is not None else None
        response = self.client.request(method, path, content=body, headers=headers)
        return CrudResponse(status_code=response.status_code, text=response.text)

    def close(self) -> None:
        """Close the underlying connection pool."""
        self.client.close()
