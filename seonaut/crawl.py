"""Storage of crawls and clean-up of their data."""

from __future__ import annotations

import logging
import sqlite3
import time
from datetime import datetime

from seonaut.models import Crawl, Project

log = logging.getLogger(__name__)

# Tables holding per-crawl data, in the order they are emptied.
CRAWL_DATA_TABLES = (
    "links",
    "external_links",
    "hreflangs",
    "issues",
    "images",
    "scripts",
    "styles",
    "iframes",
    "audios",
    "videos",
    "pagereports",
)


def _mark_finished(crawl: Crawl, end: datetime | None, issues_end: datetime | None) -> None:
    if end is not None and issues_end is not None:
        crawl.end = end
        crawl.issues_end = issues_end
        crawl.crawling = False


class CrawlRepository:
    """Reads and writes the ``crawls`` table and removes crawl data.

    Crawl data is deleted in batches of ``batch_size`` rows with a pause of
    ``batch_pause`` seconds between batches to keep the database responsive.
    """

    def __init__(
        self,
        db: sqlite3.Connection,
        batch_size: int = 1000,
        batch_pause: float = 1.5,
    ) -> None:
        self.db = db
        self.batch_size = batch_size
        self.batch_pause = batch_pause

    def save_crawl(self, project: Project) -> Crawl:
        """Insert a new crawl for the project and return it."""
        start = datetime.now()
        with self.db:
            cursor = self.db.execute(
                "INSERT INTO crawls (project_id, start) VALUES (?, ?)",
                (project.id, start),
            )
        return Crawl(id=cursor.lastrowid, project_id=project.id, url=project.url, start=start)

    def last_crawl(self, project: Project) -> Crawl:
        """The most recent crawl of the project.

        If the project has no crawls an empty crawl marked as crawling is returned.
        """
        row = self.db.execute(
            """
            SELECT
                id,
                start,
                "end",
                total_urls,
                total_issues,
                critical_issues,
                alert_issues,
                warning_issues,
                issues_end,
                robotstxt_exists,
                sitemap_exists,
                sitemap_blocked,
                links_internal_follow,
                links_internal_nofollow,
                links_external_follow,
                links_external_nofollow,
                links_sponsored,
                links_ugc
            FROM crawls
            WHERE project_id = ?
            ORDER BY start DESC LIMIT 1
            """,
            (project.id,),
        ).fetchone()

        crawl = Crawl(crawling=True)
        if row is None:
            return crawl

        (
            crawl.id,
            crawl.start,
            end,
            crawl.total_urls,
            crawl.total_issues,
            crawl.critical_issues,
            crawl.alert_issues,
            crawl.warning_issues,
            issues_end,
            robotstxt_exists,
            sitemap_exists,
            sitemap_blocked,
            crawl.internal_follow_links,
            crawl.internal_nofollow_links,
            crawl.external_follow_links,
            crawl.external_nofollow_links,
            crawl.sponsored_links,
            crawl.ugc_links,
        ) = row
        crawl.project_id = project.id
        crawl.url = project.url
        crawl.robotstxt_exists = bool(robotstxt_exists)
        crawl.sitemap_exists = bool(sitemap_exists)
        crawl.sitemap_is_blocked = bool(sitemap_blocked)
        _mark_finished(crawl, end, issues_end)
        return crawl

    def last_crawls(self, project: Project, limit: int) -> list[Crawl]:
        """Up to ``limit`` most recent crawls of the project, oldest first."""
        rows = self.db.execute(
            """
            SELECT
                id,
                start,
                "end",
                total_urls,
                total_issues,
                issues_end,
                critical_issues,
                alert_issues,
                warning_issues,
                blocked_by_robotstxt,
                noindex
            FROM crawls
            WHERE project_id = ?
            ORDER BY start DESC LIMIT ?
            """,
            (project.id, limit),
        ).fetchall()

        crawls = []
        for row in reversed(rows):
            crawl = Crawl(crawling=True, project_id=project.id, url=project.url)
            (
                crawl.id,
                crawl.start,
                end,
                crawl.total_urls,
                crawl.total_issues,
                issues_end,
                crawl.critical_issues,
                crawl.alert_issues,
                crawl.warning_issues,
                crawl.blocked_by_robotstxt,
                crawl.noindex,
            ) = row
            _mark_finished(crawl, end, issues_end)
            crawls.append(crawl)
        return crawls

    def _delete_in_batches(self, crawl_id: int, table: str) -> None:
        while True:
            try:
                with self.db:
                    self.db.execute(
                        f"DELETE FROM {table} WHERE id IN ("
                        f"SELECT id FROM {table} WHERE crawl_id = ? ORDER BY id DESC LIMIT ?)",
                        (crawl_id, self.batch_size),
                    )
                (remaining,) = self.db.execute(
                    f"SELECT count(*) FROM {table} WHERE crawl_id = ?", (crawl_id,)
                ).fetchone()
            except sqlite3.Error as exc:
                log.warning("delete crawl data: crawl %d table %s: %s", crawl_id, table, exc)
                return
            if remaining == 0:
                return
            time.sleep(self.batch_pause)

    def delete_crawl_data(self, crawl: Crawl) -> None:
        """Remove every row associated with the crawl from the data tables.

        A table that cannot be emptied is logged and skipped.
        """
        for table in CRAWL_DATA_TABLES:
            self._delete_in_batches(crawl.id, table)

    def delete_project_crawls(self, project: Project) -> None:
        """Remove all the project's crawls together with their data."""
        ids = [
            crawl_id
            for (crawl_id,) in self.db.execute(
                "SELECT id FROM crawls WHERE project_id = ?", (project.id,)
            ).fetchall()
        ]
        for crawl_id in ids:
            self.delete_crawl_data(Crawl(id=crawl_id))
        with self.db:
            self.db.execute("DELETE FROM crawls WHERE project_id = ?", (project.id,))

    def delete_unfinished_crawls(self) -> int:
        """Remove crawls whose issue report never finished; return how many."""
        ids = [
            crawl_id
            for (crawl_id,) in self.db.execute(
                "SELECT id FROM crawls WHERE issues_end IS NULL"
            ).fetchall()
        ]
        if not ids:
            return 0

        for crawl_id in ids:
            self.delete_crawl_data(Crawl(id=crawl_id))

        placeholders = ",".join("?" for _ in ids)
        with self.db:
            self.db.execute(f"DELETE FROM crawls WHERE id IN ({placeholders})", ids)
        log.info("Deleted %d unfinished crawls.", len(ids))
        return len(ids)

    def update_crawl(self, crawl: Crawl) -> None:
        """Store the crawl's end times and summary counters."""
        with self.db:
            self.db.execute(
                """
                UPDATE crawls SET
                    "end" = ?,
                    total_urls = ?,
                    blocked_by_robotstxt = ?,
                    noindex = ?,
                    robotstxt_exists = ?,
                    sitemap_exists = ?,
                    sitemap_blocked = ?,
                    links_internal_follow = ?,
                    links_internal_nofollow = ?,
                    links_external_follow = ?,
                    links_external_nofollow = ?,
                    links_sponsored = ?,
                    links_ugc = ?,
                    issues_end = ?,
                    critical_issues = ?,
                    alert_issues = ?,
                    warning_issues = ?,
                    total_issues = ?
                WHERE id = ?
                """,
                (
                    crawl.end,
                    crawl.total_urls,
                    crawl.blocked_by_robotstxt,
                    crawl.noindex,
                    crawl.robotstxt_exists,
                    crawl.sitemap_exists,
                    crawl.sitemap_is_blocked,
                    crawl.internal_follow_links,
                    crawl.internal_nofollow_links,
                    crawl.external_follow_links,
                    crawl.external_nofollow_links,
                    crawl.sponsored_links,
                    crawl.ugc_links,
                    crawl.issues_end,
                    crawl.critical_issues,
                    crawl.alert_issues,
                    crawl.warning_issues,
                    crawl.total_issues,
                    crawl.id,
                ),
            )