"""SQLite repositories, a pub/sub broker and archive file handling for an SEO site auditor."""

__version__ = "0.1.0"