"""Location and management of the projects' WACZ archive files."""

from __future__ import annotations

import logging
from pathlib import Path

from seonaut.models import ArchiveRecord, Project

log = logging.getLogger(__name__)

_SEPARATOR = "\r\n\r\n"


def split_archive_record(content: str) -> ArchiveRecord:
    """Split a raw archived response into its headers and body."""
    index = content.find(_SEPARATOR)
    if index == -1:
        return ArchiveRecord(headers=content)
    return ArchiveRecord(headers=content[:index], body=content[index + 1 :].strip())


class ArchiveService:
    """Finds and removes the archive file of each project under a base directory."""

    def __init__(self, archive_dir: str | Path) -> None:
        self.archive_dir = Path(archive_dir)

    def _archive_file(self, project: Project) -> Path:
        return self.archive_dir / str(project.id) / f"{project.host}.wacz"

    def archive_exists(self, project: Project) -> bool:
        """Whether the project's archive file exists."""
        return self._archive_file(project).exists()

    def delete_archive(self, project: Project) -> None:
        """Remove the project's archive, and its directory if left empty."""
        if not self.archive_exists(project):
            return
        file = self._archive_file(project)
        file.unlink(missing_ok=True)

        directory = file.parent
        try:
            if any(directory.iterdir()):
                return
            directory.rmdir()
        except OSError as exc:
            log.warning("failed to remove empty archive dir %s: %s", directory, exc)

    def archive_file_path(self, project: Project) -> Path:
        """Path of the project's archive; raises FileNotFoundError if it is missing."""
        if not self.archive_exists(project):
            raise FileNotFoundError("WACZ archive file does not exist")
        return self._archive_file(project)