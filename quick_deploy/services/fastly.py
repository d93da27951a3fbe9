"""Fastly API client."""

import httpx

from quick_deploy.core.exceptions import AuthError
from quick_deploy.models.fastly import (
    DictionaryItemAction,
    FastlyBackend,
    FastlyDictionary,
    FastlyDomain,
    FastlyService,
    FastlyServiceVersion,
    FastlyUser,
)
from quick_deploy.services.base import ApiClient


class FastlyClient(ApiClient):
    """Fastly client authenticated with the user's API token."""

    provider = "fastly"

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        token: str | None = None,
        base_url: str = "https://api.fastly.com",
        user_agent: str = "Quick Deploy",
    ):
        super().__init__(http_client, base_url, user_agent)
        self.token = token

    def with_token(self, token: str | None) -> "FastlyClient":
        return FastlyClient(
            self._http, token=token, base_url=self._base_url, user_agent=self._user_agent
        )

    def _headers(self) -> dict[str, str]:
        if not self.token:
            raise AuthError("No Fastly API token set", provider=self.provider)
        return {
            "User-Agent": self._user_agent,
            "Accept": "application/json",
            "Fastly-Key": self.token,
        }

    async def fetch_user(self) -> FastlyUser:
        resp = await self._send("GET", "/current_user")
        self._raise_for_status(resp, "Unable to authenticate with Fastly")
        return FastlyUser.model_validate(resp.json())

    async def create_service(self, name: str) -> FastlyService:
        resp = await self._send("POST", "/service", json={"name": name, "type": "wasm"})
        self._raise_for_status(resp, "Error while creating service")
        return FastlyService.model_validate(resp.json())

    async def create_domain(self, service_id: str, version: int, name: str) -> FastlyDomain:
        resp = await self._send(
            "POST",
            f"/service/{service_id}/version/{version}/domain",
            json={"name": name},
        )
        self._raise_for_status(resp, "Error while creating domain")
        return FastlyDomain.model_validate(resp.json())

    async def create_backend(
        self, service_id: str, version: int, backend: FastlyBackend
    ) -> FastlyBackend:
        resp = await self._send(
            "POST",
            f"/service/{service_id}/version/{version}/backend",
            json=backend.model_dump(),
        )
        self._raise_for_status(resp, f"Error while creating backend {backend.name}")
        return FastlyBackend.model_validate(resp.json())

    async def create_dictionary(
        self, service_id: str, version: int, name: str
    ) -> FastlyDictionary:
        resp = await self._send(
            "POST",
            f"/service/{service_id}/version/{version}/dictionary",
            json={"name": name},
        )
        self._raise_for_status(resp, f"Error while creating dictionary {name}")
        return FastlyDictionary.model_validate(resp.json())

    async def update_dictionary_items(
        self,
        service_id: str,
        dictionary_id: str,
        items: list[DictionaryItemAction],
    ) -> None:
        """Apply all item operations in one bulk request."""
        resp = await self._send(
            "PATCH",
            f"/service/{service_id}/dictionary/{dictionary_id}/items",
            json={"items": [item.model_dump() for item in items]},
        )
        self._raise_for_status(resp, "Error while adding items to dictionary")

    async def get_service_version(
        self, service_id: str, version: int
    ) -> FastlyServiceVersion:
        resp = await self._send("GET", f"/service/{service_id}/version/{version}")
        self._raise_for_status(resp, f"Unable to fetch service {service_id}")
        return FastlyServiceVersion.model_validate(resp.json())
