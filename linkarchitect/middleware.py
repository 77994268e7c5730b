"""Request throttling for pipeline runs.

Every submitted form triggers a sitemap crawl against somebody else's site,
so POSTs to the configured routes are limited per client IP.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

from django.conf import settings
from django.core.cache import caches
from django.http import HttpRequest, HttpResponse, JsonResponse

logger = logging.getLogger(__name__)

DEFAULT_THROTTLE_LIMIT = 20  # pipeline runs
DEFAULT_THROTTLE_WINDOW = 60  # seconds
DEFAULT_THROTTLE_KEY_PREFIX = 'linkarchitect:throttle'


class PipelineRunThrottle:
    """Sliding-window limit on pipeline runs, backed by the configured cache."""

    def __init__(
        self,
        get_response: Callable[[HttpRequest], HttpResponse],
        *,
        limit: int | None = None,
        window: int | None = None,
        cache_alias: str = 'default',
        key_prefix: str | None = None,
    ) -> None:
        self.get_response = get_response
        self.limit = limit or getattr(settings, 'THROTTLE_LIMIT', DEFAULT_THROTTLE_LIMIT)
        self.window = window or getattr(settings, 'THROTTLE_WINDOW', DEFAULT_THROTTLE_WINDOW)
        self.cache = caches[cache_alias]
        self.key_prefix = key_prefix or getattr(settings, 'THROTTLE_KEY_PREFIX', DEFAULT_THROTTLE_KEY_PREFIX)

    def __call__(self, request: HttpRequest) -> HttpResponse:
        return self.get_response(request)

    def process_view(
        self,
        request: HttpRequest,
        view_func: Callable[..., HttpResponse],
        view_args: tuple[Any, ...],
        view_kwargs: dict[str, Any],
    ) -> HttpResponse | None:
        if request.method != 'POST':
            return None

        resolved = getattr(request, 'resolver_match', None)
        if resolved is None:
            return None

        route_name = resolved.view_name
        if route_name not in getattr(settings, 'THROTTLED_ROUTES', []):
            return None

        client_ip = self._get_client_ip(request)
        cache_key = f"{self.key_prefix}:{route_name}:{client_ip}"
        now = time.time()
        runs = [timestamp for timestamp in self.cache.get(cache_key, []) if timestamp > now - self.window]

        if len(runs) >= self.limit:
            logger.warning('Throttled %s for %s (%d runs in %ss)', route_name, client_ip, len(runs), self.window)
            retry_after = max(1, int(self.window - (now - runs[0])))
            response = JsonResponse(
                {
                    'detail': 'Too many link injection runs. Try again shortly.',
                    'route': route_name,
                },
                status=429,
            )
            response['Retry-After'] = str(retry_after)
            return response

        runs.append(now)
        self.cache.set(cache_key, runs, timeout=self.window)
        return None

    def _get_client_ip(self, request: HttpRequest) -> str:
        header = getattr(settings, 'THROTTLE_IP_HEADER', 'HTTP_X_FORWARDED_FOR')
        if header in request.META:
            return request.META[header].split(',')[0].strip()
        return request.META.get('REMOTE_ADDR', '0.0.0.0')


def pipeline_run_throttle(get_response: Callable[[HttpRequest], HttpResponse]) -> PipelineRunThrottle:
    return PipelineRunThrottle(get_response)
