"""Storage and lookup of the issues detected in crawls."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterable, Iterator
from itertools import islice

from seonaut.models import Issue, IssueGroup, PageReport
from seonaut.sql import PAGINATION_MAX, page_count

# Issues are written in batches of at most about 100 bound values,
# three values per issue.
ISSUES_PER_BATCH = 34


def _batches(issues: Iterable[Issue], size: int) -> Iterator[list[Issue]]:
    iterator = iter(issues)
    while batch := list(islice(iterator, size)):
        yield batch


class IssueRepository:
    """Reads and writes the ``issues`` table."""

    def __init__(self, db: sqlite3.Connection) -> None:
        self.db = db

    def save_issues(self, issues: Iterable[Issue]) -> int:
        """Store every issue from ``issues`` in batches; return how many were stored."""
        saved = 0
        for batch in _batches(issues, ISSUES_PER_BATCH):
            with self.db:
                self.db.executemany(
                    "INSERT INTO issues (pagereport_id, crawl_id, issue_type_id) VALUES (?, ?, ?)",
                    [(i.page_report_id, i.crawl_id, i.error_type) for i in batch],
                )
            saved += len(batch)
        return saved

    def find_issues_by_type_and_priority(self, crawl_id: int, priority: int) -> list[IssueGroup]:
        """Issue types of a priority with the number of affected pages, most frequent first."""
        rows = self.db.execute(
            """
            SELECT
                issue_types.type,
                issue_types.priority,
                count(DISTINCT issues.pagereport_id) AS c
            FROM issues
            INNER JOIN issue_types ON issue_types.id = issues.issue_type_id
            WHERE issues.crawl_id = ? AND issue_types.priority = ?
            GROUP BY issues.issue_type_id
            ORDER BY c DESC
            """,
            (crawl_id, priority),
        )
        return [
            IssueGroup(error_type=error_type, priority=prio, count=count)
            for error_type, prio, count in rows
        ]

    def count_issues_by_priority(self, crawl_id: int, priority: int) -> int:
        """Total number of issues of a priority found in a crawl."""
        row = self.db.execute(
            """
            SELECT count(issues.pagereport_id)
            FROM issues
            INNER JOIN issue_types ON issue_types.id = issues.issue_type_id
            WHERE issues.crawl_id = ? AND issue_types.priority = ?
            GROUP BY issue_types.priority
            """,
            (crawl_id, priority),
        ).fetchone()
        return row[0] if row else 0

    def page_count_for_issues(self, crawl_id: int, error_type: str) -> int:
        """Number of paginator pages listing the pages with this issue type."""
        (total,) = self.db.execute(
            """
            SELECT count(DISTINCT issues.pagereport_id)
            FROM issues
            INNER JOIN issue_types ON issue_types.id = issues.issue_type_id
            WHERE issue_types.type = ? AND issues.crawl_id = ?
            """,
            (error_type, crawl_id),
        ).fetchone()
        return page_count(total)

    def find_page_report_issues(
        self, crawl_id: int, page: int, error_type: str
    ) -> list[PageReport]:
        """One page of the reports that have this issue type, ordered by URL."""
        offset = PAGINATION_MAX * (page - 1)
        rows = self.db.execute(
            """
            SELECT id, url, title
            FROM pagereports
            WHERE id IN (
                SELECT DISTINCT issues.pagereport_id
                FROM issues
                INNER JOIN issue_types ON issue_types.id = issues.issue_type_id
                WHERE issue_types.type = ? AND issues.crawl_id = ?
            )
            ORDER BY url ASC
            LIMIT ?, ?
            """,
            (error_type, crawl_id, offset, PAGINATION_MAX),
        )
        return [PageReport(id=rid, url=url, title=title) for rid, url, title in rows]

    def find_error_types_by_page(self, page_report_id: int, crawl_id: int) -> list[str]:
        """Issue types found for one page report."""
        rows = self.db.execute(
            """
            SELECT issue_types.type
            FROM issues
            INNER JOIN issue_types ON issue_types.id = issues.issue_type_id
            WHERE issues.pagereport_id = ? AND issues.crawl_id = ?
            GROUP BY issues.issue_type_id
            """,
            (page_report_id, crawl_id),
        )
        return [error_type for (error_type,) in rows]