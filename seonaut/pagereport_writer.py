"""Storage of page reports and the resources found in them."""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Callable, Sequence

from seonaut.models import PageReport
from seonaut.sql import hash_string, truncate

log = logging.getLogger(__name__)

# Longest text kept for each kind of stored text.
LONG_TEXT_MAX = 2048
SHORT_TEXT_MAX = 1024


class PageReportWriter:
    """Writes page reports with their links, hreflangs, images and media."""

    def __init__(self, db: sqlite3.Connection) -> None:
        self.db = db

    def _insert_rows(self, query: str, rows: Sequence[tuple]) -> int:
        if not rows:
            return 0
        with self.db:
            self.db.executemany(query, rows)
        return len(rows)

    def save_page_report(self, report: PageReport, crawl_id: int) -> PageReport:
        """Store the report and everything found in it; return it with its new id.

        A failure to store the report itself raises. A failure to store one kind
        of associated data is logged and the remaining kinds are still stored.
        """
        redirect_hash = hash_string(report.redirect_url) if report.redirect_url else ""
        with self.db:
            cursor = self.db.execute(
                """
                INSERT INTO pagereports (
                    crawl_id,
                    url,
                    url_hash,
                    scheme,
                    redirect_url,
                    redirect_hash,
                    refresh,
                    status_code,
                    content_type,
                    media_type,
                    lang,
                    title,
                    description,
                    robots,
                    noindex,
                    canonical,
                    h1,
                    h2,
                    words,
                    size,
                    robotstxt_blocked,
                    crawled,
                    in_sitemap,
                    depth,
                    body_hash,
                    ttfb
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    crawl_id,
                    report.url,
                    hash_string(report.url),
                    report.scheme,
                    report.redirect_url,
                    redirect_hash,
                    report.refresh,
                    report.status_code,
                    report.content_type,
                    report.media_type,
                    report.lang,
                    truncate(report.title, LONG_TEXT_MAX),
                    truncate(report.description, LONG_TEXT_MAX),
                    report.robots,
                    report.noindex,
                    report.canonical,
                    truncate(report.h1, SHORT_TEXT_MAX),
                    truncate(report.h2, SHORT_TEXT_MAX),
                    report.words,
                    report.size,
                    report.blocked_by_robotstxt,
                    report.crawled,
                    report.in_sitemap,
                    report.depth,
                    report.body_hash,
                    report.ttfb,
                ),
            )
        report.id = cursor.lastrowid

        savers: tuple[Callable[[PageReport, int], int], ...] = (
            self.save_links,
            self.save_external_links,
            self.save_hreflangs,
            self.save_images,
            self.save_iframes,
            self.save_audios,
            self.save_videos,
            self.save_scripts,
            self.save_styles,
        )
        for save in savers:
            try:
                save(report, crawl_id)
            except sqlite3.Error as exc:
                log.warning("saving page report %d data: %s", report.id, exc)

        return report

    def save_links(self, report: PageReport, crawl_id: int) -> int:
        """Store the report's internal links; return how many were stored."""
        return self._insert_rows(
            "INSERT INTO links (pagereport_id, crawl_id, url, scheme, rel, nofollow, text, url_hash)"
            " VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            [
                (
                    report.id,
                    crawl_id,
                    link.url,
                    link.scheme,
                    link.rel,
                    link.nofollow,
                    truncate(link.text, SHORT_TEXT_MAX),
                    hash_string(link.url),
                )
                for link in report.links
            ],
        )

    def save_external_links(self, report: PageReport, crawl_id: int) -> int:
        """Store the report's external links; return how many were stored."""
        return self._insert_rows(
            "INSERT INTO external_links"
            " (pagereport_id, crawl_id, url, rel, nofollow, text, sponsored, ugc, status_code)"
            " VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
            [
                (
                    report.id,
                    crawl_id,
                    link.url,
                    link.rel,
                    link.nofollow,
                    truncate(link.text, SHORT_TEXT_MAX),
                    link.sponsored,
                    link.ugc,
                    link.status_code,
                )
                for link in report.external_links
            ],
        )

    def save_hreflangs(self, report: PageReport, crawl_id: int) -> int:
        """Store the report's hreflang annotations; return how many were stored."""
        from_hash = hash_string(report.url)
        return self._insert_rows(
            "INSERT INTO hreflangs"
            " (pagereport_id, crawl_id, from_lang, to_url, to_lang, from_hash, to_hash)"
            " VALUES (?, ?, ?, ?, ?, ?, ?)",
            [
                (
                    report.id,
                    crawl_id,
                    report.lang,
                    hreflang.url,
                    hreflang.lang,
                    from_hash,
                    hash_string(hreflang.url),
                )
                for hreflang in report.hreflangs
            ],
        )

    def save_images(self, report: PageReport, crawl_id: int) -> int:
        """Store the report's images; return how many were stored."""
        return self._insert_rows(
            "INSERT INTO images (pagereport_id, url, alt, crawl_id) VALUES (?, ?, ?, ?)",
            [
                (report.id, image.url, truncate(image.alt, SHORT_TEXT_MAX), crawl_id)
                for image in report.images
            ],
        )

    def _save_urls(self, table: str, report: PageReport, urls: Sequence[str], crawl_id: int) -> int:
        return self._insert_rows(
            f"INSERT INTO {table} (pagereport_id, url, crawl_id) VALUES (?, ?, ?)",
            [(report.id, url, crawl_id) for url in urls],
        )

    def save_iframes(self, report: PageReport, crawl_id: int) -> int:
        """Store the report's iframe URLs; return how many were stored."""
        return self._save_urls("iframes", report, report.iframes, crawl_id)

    def save_audios(self, report: PageReport, crawl_id: int) -> int:
        """Store the report's audio URLs; return how many were stored."""
        return self._save_urls("audios", report, report.audios, crawl_id)

    def save_videos(self, report: PageReport, crawl_id: int) -> int:
        """Store the report's videos with their posters; return how many were stored."""
        return self._insert_rows(
            "INSERT INTO videos (pagereport_id, url, poster, crawl_id) VALUES (?, ?, ?, ?)",
            [(report.id, video.url, video.poster, crawl_id) for video in report.videos],
        )

    def save_scripts(self, report: PageReport, crawl_id: int) -> int:
        """Store the report's script URLs; return how many were stored."""
        return self._save_urls("scripts", report, report.scripts, crawl_id)

    def save_styles(self, report: PageReport, crawl_id: int) -> int:
        """Store the report's stylesheet URLs; return how many were stored."""
        return self._save_urls("styles", report, report.styles, crawl_id)