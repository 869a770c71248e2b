"""Lookup of stored page reports, their resources and their links."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator

from seonaut.models import Hreflang, Image, InternalLink, Link, PageReport, Video
from seonaut.sql import PAGINATION_MAX, hash_string, page_count

_COLUMNS = """
    id,
    url,
    redirect_url,
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
"""


def _report_from_row(row: tuple) -> PageReport:
    (
        report_id,
        url,
        redirect_url,
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
        blocked_by_robotstxt,
        crawled,
        in_sitemap,
        depth,
        body_hash,
        ttfb,
    ) = row
    return PageReport(
        id=report_id,
        url=url,
        redirect_url=redirect_url,
        refresh=refresh,
        status_code=status_code,
        content_type=content_type,
        media_type=media_type,
        lang=lang,
        title=title,
        description=description,
        robots=robots,
        noindex=bool(noindex),
        canonical=canonical,
        h1=h1,
        h2=h2,
        words=words,
        size=size,
        blocked_by_robotstxt=bool(blocked_by_robotstxt),
        crawled=bool(crawled),
        in_sitemap=bool(in_sitemap),
        depth=depth,
        body_hash=body_hash,
        ttfb=ttfb,
    )


def _offset(page: int) -> int:
    return PAGINATION_MAX * (page - 1)


def _term_filter(term: str) -> tuple[str, list[str]]:
    if not term:
        return "", []
    return " AND url LIKE ?", [f"%{term}%"]


class PageReportRepository:
    """Reads page reports and the data associated with them."""

    def __init__(self, db: sqlite3.Connection) -> None:
        self.db = db

    def _count(self, query: str, params: tuple | list) -> int:
        row = self.db.execute(query, params).fetchone()
        return row[0] if row else 0

    def _urls(self, table: str, report: PageReport) -> list[str]:
        rows = self.db.execute(
            f"SELECT url FROM {table} WHERE pagereport_id = ?", (report.id,)
        )
        return [url for (url,) in rows]

    def all_by_crawl(self, crawl_id: int) -> Iterator[PageReport]:
        """Yield the crawl's page reports one at a time."""
        rows = self.db.execute(
            f"SELECT {_COLUMNS} FROM pagereports WHERE crawl_id = ?", (crawl_id,)
        )
        for row in rows:
            yield _report_from_row(row)

    def all_by_crawl_and_error_type(self, crawl_id: int, error_type: str) -> Iterator[PageReport]:
        """Yield the crawl's page reports that have an issue of this type."""
        rows = self.db.execute(
            f"""
            SELECT {_COLUMNS}
            FROM pagereports
            WHERE crawl_id = ?
            AND id IN (
                SELECT issues.pagereport_id
                FROM issues
                INNER JOIN issue_types ON issue_types.id = issues.issue_type_id
                WHERE issue_types.type = ? AND issues.crawl_id = ?
            )
            """,
            (crawl_id, error_type, crawl_id),
        )
        for row in rows:
            yield _report_from_row(row)

    def find_by_id(self, report_id: int) -> PageReport:
        """The page report with this id; raises LookupError if there is none."""
        row = self.db.execute(
            f"SELECT {_COLUMNS} FROM pagereports WHERE id = ?", (report_id,)
        ).fetchone()
        if row is None:
            raise LookupError(f"page report {report_id} not found")
        return _report_from_row(row)

    def find_hreflangs(self, report: PageReport) -> list[Hreflang]:
        """Hreflang annotations of a page report."""
        rows = self.db.execute(
            "SELECT to_url, to_lang FROM hreflangs WHERE pagereport_id = ?", (report.id,)
        )
        return [Hreflang(url=url, lang=lang) for url, lang in rows]

    def find_images(self, report: PageReport) -> list[Image]:
        """Images of a page report."""
        rows = self.db.execute(
            "SELECT url, alt FROM images WHERE pagereport_id = ?", (report.id,)
        )
        return [Image(url=url, alt=alt) for url, alt in rows]

    def find_iframes(self, report: PageReport) -> list[str]:
        """Iframe URLs of a page report."""
        return self._urls("iframes", report)

    def find_audios(self, report: PageReport) -> list[str]:
        """Audio URLs of a page report."""
        return self._urls("audios", report)

    def find_videos(self, report: PageReport) -> list[Video]:
        """Videos of a page report."""
        rows = self.db.execute(
            "SELECT url, poster FROM videos WHERE pagereport_id = ?", (report.id,)
        )
        return [Video(url=url, poster=poster) for url, poster in rows]

    def find_scripts(self, report: PageReport) -> list[str]:
        """Script URLs of a page report."""
        return self._urls("scripts", report)

    def find_styles(self, report: PageReport) -> list[str]:
        """Stylesheet URLs of a page report."""
        return self._urls("styles", report)

    def find_links(self, report: PageReport, crawl_id: int, page: int) -> list[InternalLink]:
        """One page of the report's internal links with the reports they point to."""
        rows = self.db.execute(
            """
            SELECT
                pagereports.id,
                pagereports.url,
                pagereports.title,
                pagereports.crawled,
                links.url,
                links.rel,
                links.nofollow,
                links.text
            FROM links
            LEFT JOIN pagereports ON links.url_hash = pagereports.url_hash
            WHERE links.pagereport_id = ? AND pagereports.crawl_id = ?
            LIMIT ?, ?
            """,
            (report.id, crawl_id, _offset(page), PAGINATION_MAX),
        )
        return [
            InternalLink(
                page_report=PageReport(id=rid, url=url, title=title, crawled=bool(crawled)),
                link=Link(url=link_url, rel=rel, nofollow=bool(nofollow), text=text),
            )
            for rid, url, title, crawled, link_url, rel, nofollow, text in rows
        ]

    def find_external_links(self, report: PageReport, page: int) -> list[Link]:
        """One page of the report's external links."""
        rows = self.db.execute(
            """
            SELECT url, rel, nofollow, text, sponsored, ugc, status_code
            FROM external_links
            WHERE pagereport_id = ?
            LIMIT ?, ?
            """,
            (report.id, _offset(page), PAGINATION_MAX),
        )
        return [
            Link(
                url=url,
                rel=rel,
                nofollow=bool(nofollow),
                text=text,
                sponsored=bool(sponsored),
                ugc=bool(ugc),
                status_code=status_code,
            )
            for url, rel, nofollow, text, sponsored, ugc, status_code in rows
        ]

    def find_sitemap_page_reports(self, crawl_id: int) -> Iterator[PageReport]:
        """Yield the crawled, successful, canonical HTML reports fit for a sitemap."""
        rows = self.db.execute(
            """
            SELECT id, url, title
            FROM pagereports
            WHERE media_type = 'text/html' AND status_code >= 200 AND status_code < 300
            AND (canonical IS NULL OR canonical = '' OR canonical = url)
            AND crawl_id = ?
            AND crawled = 1
            """,
            (crawl_id,),
        )
        for rid, url, title in rows:
            yield PageReport(id=rid, url=url, title=title)

    def find_paginated(self, crawl_id: int, page: int, term: str) -> list[PageReport]:
        """One page of crawled reports, optionally filtered by a URL search term.

        An exact URL match comes first, the rest follow in URL order.
        """
        condition, params = _term_filter(term)
        rows = self.db.execute(
            f"""
            SELECT
                id,
                url,
                title,
                (CASE WHEN url = ? THEN 1 ELSE 0 END) AS exact_match
            FROM pagereports
            WHERE crawl_id = ? AND crawled = 1{condition}
            ORDER BY exact_match DESC, url ASC
            LIMIT ?, ?
            """,
            [term, crawl_id, *params, _offset(page), PAGINATION_MAX],
        )
        return [PageReport(id=rid, url=url, title=title) for rid, url, title, _ in rows]

    def page_count(self, crawl_id: int, term: str) -> int:
        """Number of paginator pages for the crawled reports matching the term."""
        condition, params = _term_filter(term)
        total = self._count(
            f"SELECT count(id) FROM pagereports WHERE crawl_id = ? AND crawled = 1{condition}",
            [crawl_id, *params],
        )
        return page_count(total)

    def find_in_links(self, url: str, crawl_id: int, page: int) -> list[InternalLink]:
        """One page of the crawled reports linking to ``url``."""
        rows = self.db.execute(
            """
            SELECT
                pagereports.id,
                pagereports.url,
                pagereports.title,
                links.nofollow,
                links.text
            FROM links
            LEFT JOIN pagereports ON pagereports.id = links.pagereport_id
            WHERE links.url_hash = ? AND pagereports.crawl_id = ? AND pagereports.crawled = 1
            LIMIT ?, ?
            """,
            (hash_string(url), crawl_id, _offset(page), PAGINATION_MAX),
        )
        return [
            InternalLink(
                page_report=PageReport(id=rid, url=origin, title=title),
                link=Link(nofollow=bool(nofollow), text=text),
            )
            for rid, origin, title, nofollow, text in rows
        ]

    def find_redirecting_to(self, url: str, crawl_id: int, page: int) -> list[PageReport]:
        """One page of the crawled reports that redirect to ``url``."""
        rows = self.db.execute(
            """
            SELECT id, url, title
            FROM pagereports
            WHERE redirect_hash = ? AND crawl_id = ? AND crawled = 1
            LIMIT ?, ?
            """,
            (hash_string(url), crawl_id, _offset(page), PAGINATION_MAX),
        )
        return [PageReport(id=rid, url=origin, title=title) for rid, origin, title in rows]

    def page_count_for_links(self, report: PageReport, crawl_id: int) -> int:
        """Number of paginator pages of the report's internal links."""
        return page_count(
            self._count(
                "SELECT count(*) FROM links WHERE pagereport_id = ? AND crawl_id = ?",
                (report.id, crawl_id),
            )
        )

    def page_count_for_external_links(self, report: PageReport, crawl_id: int) -> int:
        """Number of paginator pages of the report's external links."""
        return page_count(
            self._count(
                "SELECT count(*) FROM external_links WHERE pagereport_id = ? AND crawl_id = ?",
                (report.id, crawl_id),
            )
        )

    def page_count_for_inlinks(self, report: PageReport, crawl_id: int) -> int:
        """Number of paginator pages of the links pointing to the report."""
        return page_count(
            self._count(
                """
                SELECT count(pagereports.id)
                FROM links
                LEFT JOIN pagereports ON pagereports.id = links.pagereport_id
                WHERE links.url_hash = ? AND pagereports.crawl_id = ?
                    AND pagereports.crawled = 1
                """,
                (hash_string(report.url), crawl_id),
            )
        )

    def page_count_for_redirecting(self, report: PageReport, crawl_id: int) -> int:
        """Number of paginator pages of the reports redirecting to the report."""
        return page_count(
            self._count(
                """
                SELECT count(id)
                FROM pagereports
                WHERE redirect_hash = ? AND crawl_id = ? AND crawled = 1
                """,
                (hash_string(report.url), crawl_id),
            )
        )