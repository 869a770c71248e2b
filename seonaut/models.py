"""Data records shared by the repositories and services."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from urllib.parse import urlsplit


def _scheme_of(url: str) -> str:
    return urlsplit(url).scheme


@dataclass
class Project:
    """A site to be crawled, together with its crawl options."""

    id: int = 0
    url: str = ""
    host: str = ""
    ignore_robotstxt: bool = False
    follow_nofollow: bool = False
    include_noindex: bool = False
    crawl_sitemap: bool = False
    allow_subdomains: bool = False
    basic_auth: bool = False
    deleting: bool = False
    created: datetime | None = None
    check_external_links: bool = False
    archive: bool = False


@dataclass
class Crawl:
    """A single crawl of a project and its summary counters."""

    id: int = 0
    project_id: int = 0
    url: str = ""
    start: datetime | None = None
    end: datetime | None = None
    total_urls: int = 0
    total_issues: int = 0
    critical_issues: int = 0
    alert_issues: int = 0
    warning_issues: int = 0
    issues_end: datetime | None = None
    robotstxt_exists: bool = False
    sitemap_exists: bool = False
    sitemap_is_blocked: bool = False
    internal_follow_links: int = 0
    internal_nofollow_links: int = 0
    external_follow_links: int = 0
    external_nofollow_links: int = 0
    sponsored_links: int = 0
    ugc_links: int = 0
    blocked_by_robotstxt: int = 0
    noindex: int = 0
    crawling: bool = False


@dataclass
class User:
    """An account of the application."""

    id: int = 0
    email: str = ""
    password: str = ""


@dataclass
class Link:
    """A link found in a page."""

    url: str = ""
    rel: str = ""
    nofollow: bool = False
    text: str = ""
    sponsored: bool = False
    ugc: bool = False
    status_code: int = 0

    @property
    def scheme(self) -> str:
        return _scheme_of(self.url)


@dataclass
class Hreflang:
    url: str = ""
    lang: str = ""


@dataclass
class Image:
    url: str = ""
    alt: str = ""


@dataclass
class Video:
    url: str = ""
    poster: str = ""


@dataclass
class PageReport:
    """Everything recorded about one crawled URL."""

    id: int = 0
    url: str = ""
    redirect_url: str = ""
    refresh: str = ""
    status_code: int = 0
    content_type: str = ""
    media_type: str = ""
    lang: str = ""
    title: str = ""
    description: str = ""
    robots: str = ""
    noindex: bool = False
    canonical: str = ""
    h1: str = ""
    h2: str = ""
    words: int = 0
    size: int = 0
    blocked_by_robotstxt: bool = False
    crawled: bool = False
    in_sitemap: bool = False
    depth: int = 0
    body_hash: str = ""
    ttfb: int = 0
    links: list[Link] = field(default_factory=list)
    external_links: list[Link] = field(default_factory=list)
    hreflangs: list[Hreflang] = field(default_factory=list)
    images: list[Image] = field(default_factory=list)
    iframes: list[str] = field(default_factory=list)
    audios: list[str] = field(default_factory=list)
    videos: list[Video] = field(default_factory=list)
    scripts: list[str] = field(default_factory=list)
    styles: list[str] = field(default_factory=list)

    @property
    def scheme(self) -> str:
        return _scheme_of(self.url)


@dataclass
class InternalLink:
    """An internal link paired with the page report on its other end."""

    page_report: PageReport = field(default_factory=PageReport)
    link: Link = field(default_factory=Link)


@dataclass
class Issue:
    page_report_id: int = 0
    crawl_id: int = 0
    error_type: int = 0


@dataclass
class IssueGroup:
    error_type: str = ""
    priority: int = 0
    count: int = 0


@dataclass
class AltCount:
    alt: int = 0
    non_alt: int = 0


@dataclass
class SchemeCount:
    http: int = 0
    https: int = 0


@dataclass
class CountItem:
    key: str = ""
    value: int = 0


@dataclass
class StatusCodeByDepth:
    depth: int = 0
    status_code_100: int = 0
    status_code_200: int = 0
    status_code_300: int = 0
    status_code_400: int = 0
    status_code_500: int = 0


@dataclass
class ExportLink:
    origin: str = ""
    destination: str = ""
    text: str = ""


@dataclass
class ExportImage:
    origin: str = ""
    image: str = ""
    alt: str = ""


@dataclass
class ExportScript:
    origin: str = ""
    script: str = ""


@dataclass
class ExportStyle:
    origin: str = ""
    style: str = ""


@dataclass
class ExportIframe:
    origin: str = ""
    iframe: str = ""


@dataclass
class ExportAudio:
    origin: str = ""
    audio: str = ""


@dataclass
class ExportVideo:
    origin: str = ""
    video: str = ""


@dataclass
class ExportHreflang:
    origin: str = ""
    origin_lang: str = ""
    hreflang: str = ""
    hreflang_lang: str = ""


@dataclass
class Message:
    """A message published through the broker."""

    name: str = ""
    data: Any = None


@dataclass
class ArchiveRecord:
    headers: str = ""
    body: str = ""