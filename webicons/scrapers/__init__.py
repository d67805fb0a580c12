"""Scrapers collecting the icons a page declares."""

from webicons.scrapers.page_icons import PageIconScraper

__all__ = ["PageIconScraper"]
