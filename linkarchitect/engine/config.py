"""Configuration helpers for the link architect engine."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import yaml


@dataclass(frozen=True)
class EngineConfig:
    """Typed wrapper around the engine configuration dictionary."""

    raw: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.raw.get(key, default)

    def weight(self, signal: str) -> float:
        weights = self.raw.get("weights", {})
        return float(weights.get(signal, 0.0))

    def selectors(self, key: str) -> List[str]:
        return [str(selector) for selector in self.raw.get(key, [])]


DEFAULTS: Dict[str, Any] = {
    "max_sitemaps": 20,
    "max_child_sitemaps": 10,
    "skip_sitemap_keywords": ["category", "tag", "author", "image"],
    "max_keywords": 20,
    "anchor_max_length": 60,
    "fetch_timeout": 15,
    "user_agent": "LinkArchitect/1.0",
    "weights": {
        "slug": 0.4,
        "keywords": 0.4,
        "url_structure": 0.2,
    },
    "content_selectors": [
        "article .ch-blog-text",
        ".ch-blog-text",
        "article",
        "main",
        ".post-content",
        ".entry-content",
        '[role="main"]',
    ],
    "strip_selectors": [
        "nav",
        "header",
        "footer",
        "aside",
        ".navigation",
        ".nav",
        ".menu",
        ".sidebar",
        ".widget",
        ".comments",
        ".related-posts",
        ".share-buttons",
        "script",
        "style",
        "noscript",
        ".social-share",
        ".author-bio",
        "form",
        ".newsletter",
        ".subscription",
        '[class*="ad-"]',
        '[id*="ad-"]',
    ],
}


def load_config(path: str | Path | None = None) -> EngineConfig:
    """Load configuration from YAML, merging with defaults."""

    data: Dict[str, Any] = copy.deepcopy(DEFAULTS)

    if path is not None and Path(path).exists():
        with Path(path).open("r", encoding="utf-8") as stream:
            user = yaml.safe_load(stream) or {}
        merge_into(data, user)

    return EngineConfig(data)


def merge_into(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    """Recursively merge override into base dict."""

    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            merge_into(base[key], value)
        else:
            base[key] = value
