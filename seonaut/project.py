"""Storage of projects."""

from __future__ import annotations

import sqlite3

from seonaut.models import Project


class ProjectNotFoundError(LookupError):
    """No project matches the given id and user."""


_COLUMNS = """
    id,
    url,
    ignore_robotstxt,
    follow_nofollow,
    include_noindex,
    crawl_sitemap,
    allow_subdomains,
    basic_auth,
    deleting,
    created,
    check_external_links,
    archive
"""


def _project_from_row(row: tuple) -> Project:
    (
        project_id,
        url,
        ignore_robotstxt,
        follow_nofollow,
        include_noindex,
        crawl_sitemap,
        allow_subdomains,
        basic_auth,
        deleting,
        created,
        check_external_links,
        archive,
    ) = row
    return Project(
        id=project_id,
        url=url,
        ignore_robotstxt=bool(ignore_robotstxt),
        follow_nofollow=bool(follow_nofollow),
        include_noindex=bool(include_noindex),
        crawl_sitemap=bool(crawl_sitemap),
        allow_subdomains=bool(allow_subdomains),
        basic_auth=bool(basic_auth),
        deleting=bool(deleting),
        created=created,
        check_external_links=bool(check_external_links),
        archive=bool(archive),
    )


class ProjectRepository:
    """Reads and writes the ``projects`` table."""

    def __init__(self, db: sqlite3.Connection) -> None:
        self.db = db

    def save(self, project: Project, user_id: int) -> int:
        """Insert a project for a user and return its new id."""
        with self.db:
            cursor = self.db.execute(
                """
                INSERT INTO projects (
                    url,
                    ignore_robotstxt,
                    follow_nofollow,
                    include_noindex,
                    crawl_sitemap,
                    allow_subdomains,
                    basic_auth,
                    user_id,
                    check_external_links,
                    archive
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    project.url,
                    project.ignore_robotstxt,
                    project.follow_nofollow,
                    project.include_noindex,
                    project.crawl_sitemap,
                    project.allow_subdomains,
                    project.basic_auth,
                    user_id,
                    project.check_external_links,
                    project.archive,
                ),
            )
        return cursor.lastrowid

    def find_by_user(self, user_id: int) -> list[Project]:
        """All projects of a user, ordered by URL."""
        rows = self.db.execute(
            f"SELECT {_COLUMNS} FROM projects WHERE user_id = ? ORDER BY url ASC",
            (user_id,),
        )
        return [_project_from_row(row) for row in rows]

    def find_by_id(self, project_id: int, user_id: int) -> Project:
        """The project with this id owned by this user, or ProjectNotFoundError."""
        row = self.db.execute(
            f"SELECT {_COLUMNS} FROM projects WHERE id = ? AND user_id = ?",
            (project_id, user_id),
        ).fetchone()
        if row is None:
            raise ProjectNotFoundError(f"project {project_id} of user {user_id}")
        return _project_from_row(row)

    def disable(self, project: Project) -> None:
        """Mark the project as being deleted."""
        with self.db:
            self.db.execute("UPDATE projects SET deleting = 1 WHERE id = ?", (project.id,))

    def delete(self, project: Project) -> None:
        """Remove the project."""
        with self.db:
            self.db.execute("DELETE FROM projects WHERE id = ?", (project.id,))

    def update(self, project: Project) -> None:
        """Store the project's crawl options."""
        with self.db:
            self.db.execute(
                """
                UPDATE projects SET
                    ignore_robotstxt = ?,
                    follow_nofollow = ?,
                    include_noindex = ?,
                    crawl_sitemap = ?,
                    allow_subdomains = ?,
                    basic_auth = ?,
                    check_external_links = ?,
                    archive = ?
                WHERE id = ?
                """,
                (
                    project.ignore_robotstxt,
                    project.follow_nofollow,
                    project.include_noindex,
                    project.crawl_sitemap,
                    project.allow_subdomains,
                    project.basic_auth,
                    project.check_external_links,
                    project.archive,
                    project.id,
                ),
            )