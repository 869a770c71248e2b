"""Aggregated figures of a crawl for the dashboard charts."""

from __future__ import annotations

import sqlite3

from seonaut.models import AltCount, CountItem, SchemeCount, StatusCodeByDepth


class DashboardRepository:
    """Counts over the page reports and images of a crawl."""

    def __init__(self, db: sqlite3.Connection) -> None:
        self.db = db

    def _scalar(self, query: str, params: tuple) -> int:
        row = self.db.execute(query, params).fetchone()
        return row[0] if row else 0

    def count_by_canonical(self, crawl_id: int) -> int:
        """Successful HTML pages with no canonical or a self-referencing one."""
        return self._scalar(
            """
            SELECT count(id)
            FROM pagereports
            WHERE crawl_id = ? AND media_type = 'text/html'
                AND (canonical = '' OR canonical = url)
                AND status_code >= 200 AND status_code < 300
            """,
            (crawl_id,),
        )

    def count_by_non_canonical(self, crawl_id: int) -> int:
        """Successful HTML pages whose canonical points to another URL."""
        return self._scalar(
            """
            SELECT count(id)
            FROM pagereports
            WHERE crawl_id = ? AND media_type = 'text/html'
                AND canonical != '' AND canonical != url
                AND status_code >= 200 AND status_code < 300
            """,
            (crawl_id,),
        )

    def count_images_alt(self, crawl_id: int) -> AltCount:
        """Images with and without an alt text."""
        count = AltCount()
        rows = self.db.execute(
            """
            SELECT
                CASE WHEN alt = '' THEN 'no alt' ELSE 'alt' END AS a,
                count(*)
            FROM images
            WHERE crawl_id = ?
            GROUP BY a
            """,
            (crawl_id,),
        )
        for kind, total in rows:
            if kind == "alt":
                count.alt = total
            else:
                count.non_alt = total
        return count

    def count_scheme(self, crawl_id: int) -> SchemeCount:
        """Page reports served over https and over http."""
        count = SchemeCount()
        rows = self.db.execute(
            "SELECT scheme, count(*) FROM pagereports WHERE crawl_id = ? GROUP BY scheme",
            (crawl_id,),
        )
        for scheme, total in rows:
            if scheme == "https":
                count.https = total
            else:
                count.http = total
        return count

    def _count_list(self, query: str, crawl_id: int) -> list[CountItem]:
        items = [
            CountItem(key=str(key), value=value)
            for key, value in self.db.execute(query, (crawl_id,))
        ]
        items.sort(key=lambda item: item.value, reverse=True)
        return items

    def count_by_media_type(self, crawl_id: int) -> list[CountItem]:
        """Crawled page reports per media type, largest count first."""
        return self._count_list(
            """
            SELECT media_type, count(*)
            FROM pagereports
            WHERE crawl_id = ? AND crawled = 1
            GROUP BY media_type
            """,
            crawl_id,
        )

    def count_by_status_code(self, crawl_id: int) -> list[CountItem]:
        """Crawled page reports per status code, largest count first."""
        return self._count_list(
            """
            SELECT status_code, count(*)
            FROM pagereports
            WHERE crawl_id = ? AND crawled = 1
            GROUP BY status_code
            """,
            crawl_id,
        )

    def status_code_by_depth(self, crawl_id: int) -> list[StatusCodeByDepth]:
        """Page reports per status code class for each depth from 1 to 8."""
        rows = self.db.execute(
            """
            SELECT
                d.depth,
                COALESCE(SUM(CASE WHEN pr.status_code BETWEEN 0 AND 199 THEN 1 ELSE 0 END), 0),
                COALESCE(SUM(CASE WHEN pr.status_code BETWEEN 200 AND 299 THEN 1 ELSE 0 END), 0),
                COALESCE(SUM(CASE WHEN pr.status_code BETWEEN 300 AND 399 THEN 1 ELSE 0 END), 0),
                COALESCE(SUM(CASE WHEN pr.status_code BETWEEN 400 AND 499 THEN 1 ELSE 0 END), 0),
                COALESCE(SUM(CASE WHEN pr.status_code >= 500 THEN 1 ELSE 0 END), 0)
            FROM
                (SELECT 1 AS depth
                UNION SELECT 2
                UNION SELECT 3
                UNION SELECT 4
                UNION SELECT 5
                UNION SELECT 6
                UNION SELECT 7
                UNION SELECT 8) d
            LEFT JOIN pagereports pr ON pr.depth = d.depth AND pr.crawl_id = ?
            GROUP BY d.depth
            ORDER BY d.depth
            """,
            (crawl_id,),
        )
        return [
            StatusCodeByDepth(
                depth=depth,
                status_code_100=c100,
                status_code_200=c200,
                status_code_300=c300,
                status_code_400=c400,
                status_code_500=c500,
            )
            for depth, c100, c200, c300, c400, c500 in rows
        ]