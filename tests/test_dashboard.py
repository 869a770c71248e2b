from collections import Counter

import pytest

from seonaut.dashboard import DashboardRepository
from seonaut.sql import connect

CRAWL = 1
OTHER_CRAWL = 2


@pytest.fixture
def db():
    connection = connect(":memory:")
    connection.execute(
        """
        CREATE TABLE pagereports (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            crawl_id INTEGER,
            url TEXT DEFAULT '',
            canonical TEXT DEFAULT '',
            media_type TEXT DEFAULT 'text/html',
            status_code INTEGER DEFAULT 200,
            scheme TEXT DEFAULT 'https',
            crawled INTEGER DEFAULT 1,
            depth INTEGER DEFAULT 1
        )
        """
    )
    connection.execute(
        "CREATE TABLE images (id INTEGER PRIMARY KEY AUTOINCREMENT, crawl_id INTEGER, alt TEXT)"
    )
    yield connection
    connection.close()


@pytest.fixture
def repo(db):
    return DashboardRepository(db)


def add_report(db, crawl_id=CRAWL, **columns):
    columns["crawl_id"] = crawl_id
    names = ", ".join(columns)
    marks = ", ".join("?" for _ in columns)
    db.execute(f"INSERT INTO pagereports ({names}) VALUES ({marks})", tuple(columns.values()))


def test_canonical_counts(repo, db):
    self_canonical = ["https://example.com/a", "https://example.com/b"]
    no_canonical = ["https://example.com/c"]
    other_canonical = ["https://example.com/d", "https://example.com/e", "https://example.com/f"]

    for url in self_canonical:
        add_report(db, url=url, canonical=url)
    for url in no_canonical:
        add_report(db, url=url)
    for url in other_canonical:
        add_report(db, url=url, canonical="https://example.com/")

    # Excluded: not html, not 2xx, other crawl.
    add_report(db, url="https://example.com/x.png", media_type="image/png")
    add_report(db, url="https://example.com/gone", status_code=404)
    add_report(db, url="https://example.com/moved", status_code=301, canonical="https://example.com/")
    add_report(db, crawl_id=OTHER_CRAWL, url="https://example.com/o")

    assert repo.count_by_canonical(CRAWL) == len(self_canonical) + len(no_canonical)
    assert repo.count_by_non_canonical(CRAWL) == len(other_canonical)


def test_canonical_counts_empty_crawl(repo):
    assert repo.count_by_canonical(CRAWL) == 0
    assert repo.count_by_non_canonical(CRAWL) == 0


def test_count_images_alt(repo, db):
    alts = ["a logo", "", "a photo", "", "", "a chart"]
    for alt in alts:
        db.execute("INSERT INTO images (crawl_id, alt) VALUES (?, ?)", (CRAWL, alt))
    db.execute("INSERT INTO images (crawl_id, alt) VALUES (?, ?)", (OTHER_CRAWL, ""))

    count = repo.count_images_alt(CRAWL)
    assert count.alt == sum(1 for alt in alts if alt)
    assert count.non_alt == alts.count("")


def test_count_images_alt_without_images(repo):
    count = repo.count_images_alt(CRAWL)
    assert (count.alt, count.non_alt) == (0, 0)


def test_count_scheme(repo, db):
    schemes = ["https", "http", "https", "https"]
    for scheme in schemes:
        add_report(db, scheme=scheme)
    count = repo.count_scheme(CRAWL)
    assert count.https == schemes.count("https")
    assert count.http == schemes.count("http")


def test_count_by_media_type_sorted_descending(repo, db):
    media = ["text/html"] * 4 + ["image/png"] + ["text/css"] * 2
    for media_type in media:
        add_report(db, media_type=media_type)
    add_report(db, media_type="application/pdf", crawled=0)

    items = repo.count_by_media_type(CRAWL)
    assert {item.key: item.value for item in items} == dict(Counter(media))
    values = [item.value for item in items]
    assert values == sorted(values, reverse=True)
    assert items[0].key == "text/html"


def test_count_by_status_code_keys_are_strings(repo, db):
    codes = [200, 200, 404, 301, 200, 500]
    for code in codes:
        add_report(db, status_code=code)

    items = repo.count_by_status_code(CRAWL)
    assert {item.key: item.value for item in items} == {
        str(code): n for code, n in Counter(codes).items()
    }
    assert items[0].key == "200"


def test_status_code_by_depth_has_all_depths(repo):
    rows = repo.status_code_by_depth(CRAWL)
    assert [row.depth for row in rows] == list(range(1, 9))
    assert all(
        row.status_code_100 == row.status_code_200 == row.status_code_300
        == row.status_code_400 == row.status_code_500 == 0
        for row in rows
    )


def test_status_code_by_depth_buckets(repo, db):
    reports = [(1, 200), (1, 200), (1, 404), (2, 301), (2, 503), (3, 0), (9, 200)]
    for depth, code in reports:
        add_report(db, depth=depth, status_code=code)
    add_report(db, crawl_id=OTHER_CRAWL, depth=1, status_code=200)

    rows = {row.depth: row for row in repo.status_code_by_depth(CRAWL)}
    assert rows[1].status_code_200 == sum(1 for d, c in reports if d == 1 and c == 200)
    assert rows[1].status_code_400 == sum(1 for d, c in reports if d == 1 and c == 404)
    assert rows[2].status_code_300 == sum(1 for d, c in reports if d == 2 and c == 301)
    assert rows[2].status_code_500 == sum(1 for d, c in reports if d == 2 and c == 503)
    assert rows[3].status_code_100 == sum(1 for d, c in reports if d == 3 and c == 0)
    assert 9 not in rows
    total = sum(
        r.status_code_100 + r.status_code_200 + r.status_code_300 + r.status_code_400 + r.status_code_500
        for r in rows.values()
    )
    assert total == sum(1 for d, _ in reports if d <= 8)