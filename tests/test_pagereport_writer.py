import sqlite3

import pytest

from seonaut.models import Hreflang, Image, Link, PageReport, Video
from seonaut.pagereport_writer import PageReportWriter
from seonaut.sql import connect, hash_string

SCHEMA = """
CREATE TABLE pagereports (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    crawl_id INTEGER, url TEXT, url_hash TEXT, scheme TEXT,
    redirect_url TEXT, redirect_hash TEXT, refresh TEXT, status_code INTEGER,
    content_type TEXT, media_type TEXT, lang TEXT, title TEXT, description TEXT,
    robots TEXT, noindex INTEGER, canonical TEXT, h1 TEXT, h2 TEXT,
    words INTEGER, size INTEGER, robotstxt_blocked INTEGER, crawled INTEGER,
    in_sitemap INTEGER, depth INTEGER, body_hash TEXT, ttfb INTEGER
);
CREATE TABLE links (
    id INTEGER PRIMARY KEY AUTOINCREMENT, pagereport_id INTEGER, crawl_id INTEGER,
    url TEXT, scheme TEXT, rel TEXT, nofollow INTEGER, text TEXT, url_hash TEXT
);
CREATE TABLE external_links (
    id INTEGER PRIMARY KEY AUTOINCREMENT, pagereport_id INTEGER, crawl_id INTEGER,
    url TEXT, rel TEXT, nofollow INTEGER, text TEXT, sponsored INTEGER, ugc INTEGER,
    status_code INTEGER
);
CREATE TABLE hreflangs (
    id INTEGER PRIMARY KEY AUTOINCREMENT, pagereport_id INTEGER, crawl_id INTEGER,
    from_lang TEXT, to_url TEXT, to_lang TEXT, from_hash TEXT, to_hash TEXT
);
CREATE TABLE images (
    id INTEGER PRIMARY KEY AUTOINCREMENT, pagereport_id INTEGER, url TEXT, alt TEXT,
    crawl_id INTEGER
);
CREATE TABLE iframes (id INTEGER PRIMARY KEY AUTOINCREMENT, pagereport_id INTEGER, url TEXT, crawl_id INTEGER);
CREATE TABLE audios (id INTEGER PRIMARY KEY AUTOINCREMENT, pagereport_id INTEGER, url TEXT, crawl_id INTEGER);
CREATE TABLE videos (
    id INTEGER PRIMARY KEY AUTOINCREMENT, pagereport_id INTEGER, url TEXT, poster TEXT,
    crawl_id INTEGER
);
CREATE TABLE scripts (id INTEGER PRIMARY KEY AUTOINCREMENT, pagereport_id INTEGER, url TEXT, crawl_id INTEGER);
CREATE TABLE styles (id INTEGER PRIMARY KEY AUTOINCREMENT, pagereport_id INTEGER, url TEXT, crawl_id INTEGER);
"""


@pytest.fixture
def db():
    connection = connect(":memory:")
    connection.executescript(SCHEMA)
    yield connection
    connection.close()


@pytest.fixture
def writer(db):
    return PageReportWriter(db)


def full_report():
    return PageReport(
        url="https://example.com/page",
        status_code=200,
        media_type="text/html",
        lang="en",
        title="Page",
        crawled=True,
        depth=2,
        links=[Link(url="https://example.com/other", text="other", nofollow=True)],
        external_links=[Link(url="https://example.org/", text="ext", sponsored=True, status_code=404)],
        hreflangs=[Hreflang(url="https://example.com/es", lang="es")],
        images=[Image(url="https://example.com/a.png", alt="alt text")],
        iframes=["https://example.com/frame"],
        audios=["https://example.com/a.mp3"],
        videos=[Video(url="https://example.com/v.mp4", poster="https://example.com/p.jpg")],
        scripts=["https://example.com/s.js"],
        styles=["https://example.com/s.css"],
    )


def test_save_page_report_assigns_id_and_stores_row(writer, db):
    report = writer.save_page_report(full_report(), 7)
    row = db.execute(
        "SELECT id, crawl_id, url, url_hash, scheme, redirect_hash, crawled, depth FROM pagereports"
    ).fetchone()
    assert row == (
        report.id,
        7,
        "https://example.com/page",
        hash_string("https://example.com/page"),
        "https",
        "",
        1,
        2,
    )
    assert report.id >= 1


def test_redirect_hash_is_stored_when_redirecting(writer, db):
    report = PageReport(url="http://example.com/", redirect_url="https://example.com/")
    writer.save_page_report(report, 1)
    redirect_hash, scheme = db.execute("SELECT redirect_hash, scheme FROM pagereports").fetchone()
    assert redirect_hash == hash_string("https://example.com/")
    assert scheme == "http"


def test_long_texts_are_truncated(writer, db):
    report = PageReport(url="https://example.com/", title="t" * 3000, h1="h" * 2000)
    writer.save_page_report(report, 1)
    title, h1 = db.execute("SELECT title, h1 FROM pagereports").fetchone()
    assert len(title) == 2048 and title.endswith("...")
    assert len(h1) == 1024 and h1.endswith("...")


def test_associated_data_is_stored(writer, db):
    report = writer.save_page_report(full_report(), 3)
    for table in ("links", "external_links", "hreflangs", "images", "iframes",
                  "audios", "videos", "scripts", "styles"):
        (count,) = db.execute(
            f"SELECT count(*) FROM {table} WHERE pagereport_id = ? AND crawl_id = 3", (report.id,)
        ).fetchone()
        assert count == 1, table


def test_links_row_contents(writer, db):
    report = writer.save_page_report(full_report(), 3)
    row = db.execute("SELECT url, scheme, nofollow, text, url_hash FROM links").fetchone()
    assert row == (
        "https://example.com/other",
        "https",
        1,
        "other",
        hash_string("https://example.com/other"),
    )
    assert report.links[0].url == row[0]


def test_external_link_row_contents(writer, db):
    writer.save_page_report(full_report(), 3)
    row = db.execute("SELECT url, sponsored, ugc, status_code FROM external_links").fetchone()
    assert row == ("https://example.org/", 1, 0, 404)


def test_hreflang_row_uses_report_language_and_hashes(writer, db):
    writer.save_page_report(full_report(), 3)
    row = db.execute("SELECT from_lang, to_url, to_lang, from_hash, to_hash FROM hreflangs").fetchone()
    assert row == (
        "en",
        "https://example.com/es",
        "es",
        hash_string("https://example.com/page"),
        hash_string("https://example.com/es"),
    )


def test_video_poster_is_stored(writer, db):
    writer.save_page_report(full_report(), 3)
    assert db.execute("SELECT url, poster FROM videos").fetchone() == (
        "https://example.com/v.mp4",
        "https://example.com/p.jpg",
    )


def test_save_links_returns_count(writer):
    report = PageReport(id=5, url="https://example.com/", links=[
        Link(url="https://example.com/a"), Link(url="https://example.com/b")
    ])
    assert writer.save_links(report, 1) == 2


def test_empty_lists_touch_nothing(db):
    db.execute("DROP TABLE scripts")
    writer = PageReportWriter(db)
    assert writer.save_scripts(PageReport(id=1), 1) == 0


def test_failure_of_one_kind_does_not_stop_others(db):
    db.execute("DROP TABLE images")
    writer = PageReportWriter(db)
    report = writer.save_page_report(full_report(), 3)
    (links,) = db.execute("SELECT count(*) FROM links").fetchone()
    (styles,) = db.execute("SELECT count(*) FROM styles").fetchone()
    assert (links, styles) == (1, 1)
    assert report.id >= 1


def test_failure_of_one_kind_raises_when_called_directly(db):
    db.execute("DROP TABLE images")
    writer = PageReportWriter(db)
    with pytest.raises(sqlite3.Error):
        writer.save_images(PageReport(id=1, images=[Image(url="https://example.com/a.png")]), 1)


def test_failure_to_store_report_raises(db):
    db.execute("DROP TABLE pagereports")
    writer = PageReportWriter(db)
    with pytest.raises(sqlite3.Error):
        writer.save_page_report(PageReport(url="https://example.com/"), 1)