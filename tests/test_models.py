from seonaut.models import (
    Crawl,
    InternalLink,
    Link,
    Message,
    PageReport,
    Project,
)


def test_page_report_scheme_follows_url():
    report = PageReport(url="https://example.com/page")
    assert report.scheme == "https"
    report.url = "http://example.com/page"
    assert report.scheme == "http"


def test_link_scheme_follows_url():
    assert Link(url="http://example.com/a").scheme == "http"
    assert Link(url="").scheme == ""


def test_page_report_lists_are_independent():
    first = PageReport()
    second = PageReport()
    first.scripts.append("https://example.com/app.js")
    first.links.append(Link(url="https://example.com/"))
    assert second.scripts == []
    assert second.links == []
    assert len(first.links) == 1


def test_internal_link_defaults_are_independent():
    first = InternalLink()
    second = InternalLink()
    first.page_report.url = "https://example.com/"
    assert second.page_report.url == ""


def test_records_compare_by_value():
    assert Project(id=1, url="https://example.com") == Project(id=1, url="https://example.com")
    assert Crawl(id=2, crawling=True) != Crawl(id=2)


def test_message_holds_data():
    message = Message(name="CrawlEnd", data=10)
    assert (message.name, message.data) == ("CrawlEnd", 10)
    assert Message().data is None