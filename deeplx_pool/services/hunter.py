"""Qianxin Hunter open API scan provider."""

import base64
from typing import Any

import httpx

from deeplx_pool.core.errors import ScanProviderError
from deeplx_pool.core.logging import structured_log
from deeplx_pool.services.base_provider import BaseScanProvider, parse_total
from deeplx_pool.services.provider_factory import register_provider

HUNTER_SEARCH_URL = "https://hunter.qianxin.com/openApi/search"


def _encode_query(query: str) -> str:
    return base64.urlsafe_b64encode(query.encode("utf-8")).decode("ascii")


class HunterScanProvider(BaseScanProvider):
    name = "hunter"

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        query: str = 'web.body="DeepL Free API"',
        page_size: int = 100,
        max_pages: int = 1,
    ) -> None:
        super().__init__(client, api_key)
        self.query = query
        self.page_size = page_size
        self.max_pages = max_pages

    async def _fetch_page(self, page: int) -> dict[str, Any]:
        try:
            resp = await self.client.get(
                HUNTER_SEARCH_URL,
                params={
                    "api-key": self.api_key,
                    "search": _encode_query(self.query),
                    "page": page,
                    "page_size": self.page_size,
                    "is_web": 3,
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
        if body.get("code") != 200:
            raise ScanProviderError(
                self.name,
                str(body.get("message") or "unexpected response code"),
                details={"code": body.get("code")},
            )
        data = body.get("data") or {}
        if not isinstance(data, dict):
            raise ScanProviderError(self.name, f"unexpected data type {type(data).__name__}")
        return data

    async def scan(self) -> list[str]:
        urls: list[str] = []
        for page in range(1, self.max_pages + 1):
            data = await self._fetch_page(page)
            arr = data.get("arr") or []
            if not isinstance(arr, list):
                raise ScanProviderError(self.name, f"unexpected arr type {type(arr).__name__}")
            urls.extend(str(item["url"]) for item in arr if isinstance(item, dict) and item.get("url"))
            total = parse_total(self.name, data.get("total"))
            if page * self.page_size >= total:
                break
        structured_log(
            "INFO",
            "Hunter scan returned candidates",
            operation="scan.hunter",
            metadata={"count": len(urls), "query": self.query},
        )
        return urls


register_provider("hunter", HunterScanProvider)
