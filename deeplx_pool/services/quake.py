"""360 Quake scan provider (API v3 service search)."""

from typing import Any

import httpx

from deeplx_pool.core.errors import ScanProviderError
from deeplx_pool.core.logging import structured_log
from deeplx_pool.services.base_provider import BaseScanProvider, parse_total
from deeplx_pool.services.provider_factory import register_provider

QUAKE_SEARCH_URL = "https://quake.360.net/api/v3/search/quake_service"


class QuakeScanProvider(BaseScanProvider):
    name = "quake"

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        query: str = 'response:"DeepL Free API"',
        page_size: int = 100,
        max_pages: int = 1,
    ) -> None:
        super().__init__(client, api_key)
        self.query = query
        self.page_size = page_size
        self.max_pages = max_pages

    async def _fetch_page(self, start: int) -> dict[str, Any]:
        try:
            resp = await self.client.post(
                QUAKE_SEARCH_URL,
                headers={"X-QuakeToken": self.api_key, "Content-Type": "application/json"},
                json={
                    "query": self.query,
                    "start": start,
                    "size": self.page_size,
                    "include": ["ip", "port"],
                },
            )
        except httpx.HTTPError as e:
            raise ScanProviderError(self.name, str(e) or type(e).__name__) from e
        if resp.status_code >= 400:
            raise ScanProviderError(
                self.name,
                f"HTTP {resp.status_code}: {resp.text[:200]}",
                details={"status": resp.status_code},
            )
        try:
            body = resp.json()
        except ValueError as e:
            raise ScanProviderError(self.name, "response is not JSON") from e
        if not isinstance(body, dict):
            raise ScanProviderError(self.name, f"unexpected response type {type(body).__name__}")
        # Quake returns code 0 on success, string or int error codes otherwise
        if str(body.get("code")) != "0":
            raise ScanProviderError(
                self.name,
                str(body.get("message") or "unexpected response code"),
                details={"code": body.get("code")},
            )
        return body

    async def scan(self) -> list[str]:
        addresses: list[str] = []
        for page in range(self.max_pages):
            body = await self._fetch_page(page * self.page_size)
            data = body.get("data") or []
            if not isinstance(data, list):
                raise ScanProviderError(self.name, f"unexpected data type {type(data).__name__}")
            for item in data:
                if not isinstance(item, dict) or not item.get("ip") or not item.get("port"):
                    continue
                addresses.append(f"{item['ip']}:{item['port']}")
            meta = body.get("meta") if isinstance(body.get("meta"), dict) else {}
            pagination = meta.get("pagination") if isinstance(meta.get("pagination"), dict) else {}
            total = parse_total(self.name, pagination.get("total"))
            if len(data) < self.page_size or (page + 1) * self.page_size >= total:
                break
        structured_log(
            "INFO",
            "Quake scan returned candidates",
            operation="scan.quake",
            metadata={"count": len(addresses), "query": self.query},
        )
        return addresses


register_provider("quake", QuakeScanProvider)
