"""Shared plumbing for the provider API clients."""

from typing import Any

import httpx

from quick_deploy.core.exceptions import ExternalApiError


def extract_error_message(resp: httpx.Response) -> str:
    """Pull the provider's own error message out of a failed response."""
    body = resp.text
    try:
        payload = resp.json()
    except ValueError:
        return body or f"HTTP {resp.status_code}"

    if isinstance(payload, dict):
        for field in ("error_description", "message", "msg", "detail", "error"):
            value = payload.get(field)
            if isinstance(value, str) and value:
                return value
    return body or f"HTTP {resp.status_code}"


class ApiClient:
    """Thin wrapper over an ``httpx.AsyncClient`` for one provider."""

    provider: str = ""

    def __init__(self, http_client: httpx.AsyncClient, base_url: str, user_agent: str):
        self._http = http_client
        self._base_url = base_url.rstrip("/")
        self._user_agent = user_agent

    def _headers(self) -> dict[str, str]:
        return {"User-Agent": self._user_agent, "Accept": "application/json"}

    async def _send(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Send one request; transport failures surface as ``ExternalApiError``."""
        try:
            return await self._http.request(
                method,
                f"{self._base_url}{path}",
                json=json,
                headers={**self._headers(), **(headers or {})},
            )
        except httpx.HTTPError as e:
            raise ExternalApiError(
                f"Unable to reach {self.provider}: {e}", self.provider
            ) from e

    def _raise_for_status(self, resp: httpx.Response, context: str) -> None:
        if resp.is_success:
            return
        raise ExternalApiError(
            f"{context}: {extract_error_message(resp)}",
            self.provider,
            resp.status_code,
        )
