"""Streaming of a crawl's resources for export."""

from __future__ import annotations

import sqlite3
from collections.abc import Callable, Iterator
from typing import TypeVar

from seonaut.models import (
    Crawl,
    ExportAudio,
    ExportHreflang,
    ExportIframe,
    ExportImage,
    ExportLink,
    ExportScript,
    ExportStyle,
    ExportVideo,
)

T = TypeVar("T")


def _origin_query(columns: str, table: str) -> str:
    return f"""
        SELECT pagereports.url, {columns}
        FROM {table}
        LEFT JOIN pagereports ON pagereports.id = {table}.pagereport_id
        WHERE {table}.crawl_id = ?
    """


class ExportRepository:
    """Yields the links and resources of a crawl, each with the page it was found on.

    Rows whose origin page or values are missing are skipped.
    """

    def __init__(self, db: sqlite3.Connection) -> None:
        self.db = db

    def _stream(self, query: str, crawl: Crawl, build: Callable[..., T]) -> Iterator[T]:
        for row in self.db.execute(query, (crawl.id,)):
            if any(value is None for value in row):
                continue
            yield build(*row)

    def export_links(self, crawl: Crawl) -> Iterator[ExportLink]:
        """Internal links of the crawl."""
        return self._stream(_origin_query("links.url, links.text", "links"), crawl, ExportLink)

    def export_external_links(self, crawl: Crawl) -> Iterator[ExportLink]:
        """External links of the crawl."""
        return self._stream(
            _origin_query("external_links.url, external_links.text", "external_links"),
            crawl,
            ExportLink,
        )

    def export_images(self, crawl: Crawl) -> Iterator[ExportImage]:
        """Image URLs of the crawl with their alt texts."""
        return self._stream(
            _origin_query("images.url, images.alt", "images"), crawl, ExportImage
        )

    def export_scripts(self, crawl: Crawl) -> Iterator[ExportScript]:
        """Script URLs of the crawl."""
        return self._stream(_origin_query("scripts.url", "scripts"), crawl, ExportScript)

    def export_styles(self, crawl: Crawl) -> Iterator[ExportStyle]:
        """Stylesheet URLs of the crawl."""
        return self._stream(_origin_query("styles.url", "styles"), crawl, ExportStyle)

    def export_iframes(self, crawl: Crawl) -> Iterator[ExportIframe]:
        """Iframe URLs of the crawl."""
        return self._stream(_origin_query("iframes.url", "iframes"), crawl, ExportIframe)

    def export_audios(self, crawl: Crawl) -> Iterator[ExportAudio]:
        """Audio URLs of the crawl."""
        return self._stream(_origin_query("audios.url", "audios"), crawl, ExportAudio)

    def export_videos(self, crawl: Crawl) -> Iterator[ExportVideo]:
        """Video URLs of the crawl."""
        return self._stream(_origin_query("videos.url", "videos"), crawl, ExportVideo)

    def export_hreflangs(self, crawl: Crawl) -> Iterator[ExportHreflang]:
        """Hreflang annotations of the crawl with their languages."""
        return self._stream(
            _origin_query(
                "hreflangs.from_lang, hreflangs.to_url, hreflangs.to_lang", "hreflangs"
            ),
            crawl,
            ExportHreflang,
        )