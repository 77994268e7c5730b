"""Shared fixtures for engine tests."""

from __future__ import annotations

from http.client import HTTPMessage
from typing import Dict, Iterable, List

import pytest

from linkarchitect.engine.config import load_config
from linkarchitect.engine.errors import FetchError

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"


@pytest.fixture()
def engine_config():
    """Provide a mutable copy of the default engine configuration."""

    return load_config(None)


class FakeTransport:
    """In-memory stand-in for ``fetch_text`` that records every request."""

    def __init__(self, pages: Dict[str, str] | None = None) -> None:
        self.pages: Dict[str, str] = dict(pages or {})
        self.calls: List[str] = []

    def __call__(self, url: str) -> str:
        self.calls.append(url)
        if url not in self.pages:
            raise FetchError(f"Status 404 for {url}", url=url, status=404)
        return self.pages[url]


@pytest.fixture()
def transport():
    return FakeTransport()


class FakeResponse:
    """Minimal ``urlopen`` response; ``error`` is raised from ``read``."""

    def __init__(self, body: bytes = b"", content_type: str = "text/html", error: Exception | None = None) -> None:
        self.body = body
        self.error = error
        self.headers = HTTPMessage()
        self.headers["Content-Type"] = content_type

    def read(self) -> bytes:
        if self.error is not None:
            raise self.error
        return self.body

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc_info) -> None:
        return None


def urlset(urls: Iterable[str]) -> str:
    entries = "".join(f"<url><loc>{url}</loc></url>" for url in urls)
    return f'<?xml version="1.0" encoding="UTF-8"?><urlset xmlns="{SITEMAP_NS}">{entries}</urlset>'


def sitemap_index(urls: Iterable[str]) -> str:
    entries = "".join(f"<sitemap><loc>{url}</loc></sitemap>" for url in urls)
    return f'<?xml version="1.0" encoding="UTF-8"?><sitemapindex xmlns="{SITEMAP_NS}">{entries}</sitemapindex>'


def article_page(paragraphs: Iterable[str], *, title: str = "Article", extra: str = "") -> str:
    body = "\n".join(f"<p>{text}</p>" for text in paragraphs)
    return (
        f"<html><head><title>{title}</title></head><body>"
        f"<nav><a href='/'>Home</a></nav><article>{body}{extra}</article>"
        "<footer>Copyright</footer></body></html>"
    )
