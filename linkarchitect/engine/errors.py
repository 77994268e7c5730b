"""Exceptions raised by the link architect engine."""

from __future__ import annotations


class LinkArchitectError(Exception):
    """Base class for every failure the pipeline reports to its caller."""


class FetchError(LinkArchitectError):
    """The transport returned a non-success status or could not connect."""

    def __init__(self, message: str, *, url: str | None = None, status: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status = status


class ParseError(LinkArchitectError):
    """A sitemap or HTML document could not be parsed."""

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class EmptyIndexError(LinkArchitectError):
    """The top-level sitemap produced no usable candidate URLs."""

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class NoParagraphsError(LinkArchitectError):
    """The article body has no ``<p>`` elements to anchor links on."""
