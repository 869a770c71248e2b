# seonaut

The storage layer of an SEO site auditor. It keeps users, projects, crawls,
page reports and the issues found in them in an SQLite database, streams data
out for exports, locates and removes per-project WACZ archive files and offers
a small in-process publish/subscribe broker for live crawl progress.

It has no dependencies outside the standard library.

## Installation

```
pip install .
```

For development, with the test dependencies:

```
pip install -e ".[test]"
pytest
```

## Overview

| Module                       | What it holds                                                    |
|------------------------------|------------------------------------------------------------------|
| `seonaut.models`             | Plain data classes: `Project`, `Crawl`, `PageReport`, `Link`, …  |
| `seonaut.sql`                | `connect`, `hash_string`, `truncate`, `page_count`               |
| `seonaut.user`               | `UserRepository`, `UserNotFoundError`                            |
| `seonaut.project`            | `ProjectRepository`, `ProjectNotFoundError`                      |
| `seonaut.crawl`              | `CrawlRepository`: saving, updating and cleaning up crawls       |
| `seonaut.dashboard`          | `DashboardRepository`: counts for the dashboard charts           |
| `seonaut.issue`              | `IssueRepository`: batched issue inserts and issue queries       |
| `seonaut.export`             | `ExportRepository`: generators over links, images, scripts, …    |
| `seonaut.pagereport_writer`  | `PageReportWriter`: stores a page report and its resources       |
| `seonaut.pagereport`         | `PageReportRepository`: page report lookups and pagination       |
| `seonaut.broker`             | `Broker`, `Subscriber`                                           |
| `seonaut.archive`            | `ArchiveService`, `split_archive_record`                         |

## Helpers

```python
from seonaut.sql import hash_string, truncate, page_count

hash_string("https://example.com")
# '100680ad546ce6a577f42f52df33b4cfdca756859e664b8d7de329b150d09ce9'

truncate("abcdeabcdeabcde", 6)   # 'abc...'
truncate("short", 500)           # 'short'

page_count(26)                   # 2 pages of at most 25 items
```

`hash_string` is the SHA-256 hex digest used to index URLs; `truncate` cuts
text to a maximum number of characters, ending it with `...`.

## Repositories

Every repository wraps a connection opened with `seonaut.sql.connect`, which
opens an SQLite database in autocommit mode and converts `timestamp` and
`datetime` columns to `datetime` objects.

```python
from seonaut.sql import connect
from seonaut.user import UserRepository
from seonaut.project import ProjectRepository
from seonaut.crawl import CrawlRepository

db = connect("seonaut.db")

users = UserRepository(db)
password = "password"
user = users.sign_up("user@example.com", password)

projects = ProjectRepository(db)
crawls = CrawlRepository(db)

for project in projects.find_by_user(user.id):
    last = crawls.last_crawl(project)
    print(project.url, last.total_urls, last.crawling)
```

- `UserRepository.find_by_email` raises `UserNotFoundError` and
  `ProjectRepository.find_by_id` raises `ProjectNotFoundError` when nothing
  matches; `PageReportRepository.find_by_id` raises `LookupError`.
- `CrawlRepository.last_crawl` returns an empty crawl marked as crawling when a
  project has none; `last_crawls` returns the newest crawls oldest first.
- `CrawlRepository.delete_crawl_data` empties the data tables of a crawl in
  batches of `batch_size` rows, pausing `batch_pause` seconds between batches
  (1000 rows and 1.5 seconds by default). `delete_unfinished_crawls` removes
  crawls whose issue report never finished and returns how many it removed.
- `IssueRepository.save_issues` takes any iterable of `Issue` and returns the
  number stored.
- `PageReportWriter.save_page_report` stores a report and then its links,
  external links, hreflangs, images, iframes, audios, videos, scripts and
  styles; a failure on one of those kinds is logged and the rest are stored.
- Paginated queries return at most 25 items per page; the matching
  `page_count…` methods give the number of pages. In
  `PageReportRepository.find_paginated` a non-empty term filters URLs by
  substring, and an exact URL match comes first.
- Queries that stream many rows, such as `ExportRepository.export_links` or
  `PageReportRepository.all_by_crawl`, are generators. Export rows with a
  missing origin page or value are skipped.

## Publish/subscribe

```python
from seonaut.broker import Broker
from seonaut.models import Message

broker = Broker()
received = []

subscriber = broker.subscribe("crawl-1", received.append)
broker.publish("crawl-1", Message(name="CrawlEnd", data=42))
broker.unsubscribe(subscriber)
```

A callback that raises is dropped from its topic; a topic with no subscribers
left is removed, and `Broker.topics()` lists the topics that remain. All
operations take a lock, so the broker can be shared between threads.

## Archives

`ArchiveService` locates each project's WACZ file under
`<archive dir>/<project id>/<host>.wacz`. `archive_exists`,
`archive_file_path` (which raises `FileNotFoundError` for a missing archive)
and `delete_archive` work on that file; deleting the last archive of a project
removes its directory as well. `split_archive_record` splits a stored HTTP
response into its headers and body at the first blank line.

## What this package does not do

- It does not create the database schema. The tables the repositories use
  (`users`, `projects`, `crawls`, `pagereports`, `links`, `issues`,
  `issue_types` and the rest) must already exist.
- It does not crawl sites, detect issues or serve a web interface; it stores
  and reads what a crawler and its reports produce.
- It does not write or read WACZ archives; `ArchiveService` only finds and
  removes the files.