"""Canonicalization and deduplication of candidate endpoint addresses."""

from typing import Iterable

TRANSLATE_PATH = "/translate"
DEFAULT_SCHEME = "http://"
SCHEMES = ("http://", "https://")


def normalize_url(raw: str) -> str:
    """
    Rewrite a raw address into a canonical endpoint URL.

    `1.2.3.4:1188` -> `http://1.2.3.4:1188/translate`. Idempotent.
    """
    url = raw.strip()
    if not url.endswith(TRANSLATE_PATH):
        url += TRANSLATE_PATH
    if not url.lower().startswith(SCHEMES):
        url = DEFAULT_SCHEME + url
    return url


def dedupe_urls(urls: Iterable[str]) -> list[str]:
    """Drop repeated entries, keeping the first occurrence of each."""
    seen: set[str] = set()
    out: list[str] = []
    for url in urls:
        if url in seen:
            continue
        seen.add(url)
        out.append(url)
    return out


def normalize_urls(raws: Iterable[str]) -> list[str]:
    """Normalize every non-blank entry, then dedupe in first-seen order."""
    return dedupe_urls(normalize_url(r) for r in raws if r and r.strip())
