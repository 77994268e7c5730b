"""HTTP transport used to fetch sitemaps and articles."""

from __future__ import annotations

import functools
import gzip
import http.client
import logging
import socket
import urllib.error
import urllib.request
from typing import Callable

from .config import EngineConfig
from .errors import FetchError

logger = logging.getLogger(__name__)

Fetch = Callable[[str], str]

DEFAULT_USER_AGENT = "LinkArchitect/1.0"


def fetch_text(url: str, timeout: float = 15, user_agent: str = DEFAULT_USER_AGENT) -> str:
    """Fetch ``url`` and return its decoded body.

    Gzipped payloads (either via the ``.gz`` extension or the content type)
    are transparently decompressed. The body is decoded as UTF-8, falling
    back to the charset declared by the server.

    Parameters
    ----------
    url:
        The absolute URL of the sitemap or article to fetch.
    timeout:
        Timeout (in seconds) for the HTTP request.
    user_agent:
        Value sent in the ``User-Agent`` header.

    Raises
    ------
    FetchError
        For non-success responses (``status`` is set), timeouts and
        connection failures (``status`` is ``None``).
    """

    logger.debug("Fetching %s", url)
    try:
        request = urllib.request.Request(url, headers={"User-Agent": user_agent})
        with urllib.request.urlopen(request, timeout=timeout) as resp:
            data = resp.read()
            content_type = resp.headers.get("Content-Type", "")
            charset = resp.headers.get_content_charset()
    except urllib.error.HTTPError as exc:
        raise FetchError(f"Status {exc.code} for {url}", url=url, status=exc.code) from exc
    except urllib.error.URLError as exc:
        raise FetchError(f"Could not reach {url}: {exc.reason}", url=url) from exc
    except (socket.timeout, TimeoutError) as exc:
        raise FetchError(f"Timed out after {timeout}s fetching {url}", url=url) from exc
    except (http.client.HTTPException, OSError) as exc:
        raise FetchError(f"Could not read {url}: {exc}", url=url) from exc
    except ValueError as exc:
        raise FetchError(f"Invalid URL {url!r}: {exc}", url=url) from exc

    if url.lower().endswith(".gz") or "gzip" in content_type:
        try:
            data = gzip.decompress(data)
        except OSError:
            pass

    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        pass
    try:
        return data.decode(charset or "utf-8", errors="replace")
    except LookupError:
        return data.decode("utf-8", errors="replace")


def fetch_for(config: EngineConfig) -> Fetch:
    """Return :func:`fetch_text` bound to the configured timeout and user agent."""

    return functools.partial(
        fetch_text,
        timeout=float(config.get("fetch_timeout", 15)),
        user_agent=str(config.get("user_agent", DEFAULT_USER_AGENT)),
    )
