from abc import ABC, abstractmethod
from typing import Any

import httpx

from deeplx_pool.core.errors import ScanProviderError


def parse_total(provider: str, value: Any) -> int:
    """Result count reported by a provider; anything non-numeric is a malformed response."""
    if value is None or value == "":
        return 0
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ScanProviderError(provider, f"unexpected total {value!r}") from e


class BaseScanProvider(ABC):
    """
    Abstract base class for internet-scan providers (Hunter, 360 Quake, ...).
    Discovery only needs a bag of raw addresses; it doesn't care WHO found them.
    """

    name: str = "base"

    def __init__(self, client: httpx.AsyncClient, api_key: str) -> None:
        self.client = client
        self.api_key = api_key

    @abstractmethod
    async def scan(self) -> list[str]:
        """
        Return candidate addresses. Entries may repeat, be dead or be garbage.
        Raises ScanProviderError when the remote call itself fails.
        """
        pass

    async def aclose(self) -> None:
        await self.client.aclose()
