import pytest

from seonaut.archive import ArchiveService, split_archive_record
from seonaut.models import Project


@pytest.fixture
def project():
    return Project(id=7, url="https://example.com", host="example.com")


def _make_archive(base, project):
    directory = base / str(project.id)
    directory.mkdir(parents=True)
    file = directory / f"{project.host}.wacz"
    file.write_bytes(b"archive")
    return file


def test_missing_archive(tmp_path, project):
    service = ArchiveService(tmp_path)
    assert service.archive_exists(project) is False
    with pytest.raises(FileNotFoundError):
        service.archive_file_path(project)


def test_existing_archive_path(tmp_path, project):
    file = _make_archive(tmp_path, project)
    service = ArchiveService(tmp_path)
    assert service.archive_exists(project) is True
    assert service.archive_file_path(project) == file


def test_delete_archive_removes_empty_dir(tmp_path, project):
    file = _make_archive(tmp_path, project)
    service = ArchiveService(tmp_path)
    service.delete_archive(project)
    assert not file.exists()
    assert not file.parent.exists()
    assert service.archive_exists(project) is False


def test_delete_archive_keeps_non_empty_dir(tmp_path, project):
    file = _make_archive(tmp_path, project)
    other = file.parent / "other.txt"
    other.write_text("keep")
    ArchiveService(tmp_path).delete_archive(project)
    assert not file.exists()
    assert other.exists()


def test_delete_missing_archive_leaves_tree(tmp_path, project):
    ArchiveService(tmp_path).delete_archive(project)
    assert list(tmp_path.iterdir()) == []


def test_split_archive_record_with_body():
    headers = "HTTP/1.1 200 OK\r\nContent-Type: text/html"
    record = split_archive_record(headers + "\r\n\r\n<html></html>\n")
    assert record.headers == headers
    assert record.body == "<html></html>"


def test_split_archive_record_without_body():
    content = "HTTP/1.1 204 No Content"
    record = split_archive_record(content)
    assert record.headers == content
    assert record.body == ""