"""
Yahoo Finance headline RSS scraper, queried per ticker symbol.
"""

import feedparser
from typing import List, Optional
from datetime import datetime, timezone
import time
from dateutil import parser as date_parser
from loguru import logger

from tickertone.models import Article, Company, FetchResult, SourceType
from tickertone.utils.text_utils import clean_html
from .base_scraper import BaseScraper
from config.settings import YAHOO_RSS_CONFIG


class YahooRSSScraper(BaseScraper):
    """RSS scraper for the Yahoo Finance per-symbol headline feed."""

    def __init__(self, url_template: Optional[str] = None):
        super().__init__("Yahoo Finance", SourceType.RSS)
        self.url_template = url_template or YAHOO_RSS_CONFIG['url_template']

    def feed_url(self, company: Company) -> str:
        return self.url_template.format(symbol=company.symbol, ticker=company.ticker)

    def fetch_articles(self, company: Company,
                       max_articles: Optional[int] = None) -> FetchResult:
        """
        Fetch articles from the symbol's RSS feed.

        Args:
            company: Company whose symbol selects the feed
            max_articles: Maximum number of articles to return

        Returns:
            FetchResult containing fetched articles
        """
        start_time = time.time()
        articles: List[Article] = []
        rss_url = self.feed_url(company)

        try:
            logger.info(f"Fetching RSS feed for {company.ticker}: {rss_url}")

            response = self.make_request(rss_url)
            if response is None:
                raise ConnectionError(f"No response from {rss_url}")

            feed = feedparser.parse(response.content)

            if feed.bozo:
                logger.warning(f"RSS feed has parsing issues: {rss_url}")

            for entry in feed.entries:
                try:
                    article = self._parse_rss_entry(entry, company)
                    if article:
                        articles.append(article)

                        if max_articles and len(articles) >= max_articles:
                            break

                except Exception as e:
                    logger.warning(f"Error parsing RSS entry: {e}")
                    continue

            fetch_time = time.time() - start_time
            logger.info(f"Fetched {len(articles)} articles from {self.source_name} for {company.ticker}")

            return self.create_fetch_result(
                company,
                articles=articles,
                success=True,
                fetch_time=fetch_time
            )

        except Exception as e:
            fetch_time = time.time() - start_time
            error_msg = f"Failed to fetch RSS feed {rss_url}: {e}"
            logger.error(error_msg)

            return self.create_fetch_result(
                company,
                articles=[],
                success=False,
                error_message=error_msg,
                fetch_time=fetch_time
            )

    def _parse_rss_entry(self, entry, company: Company) -> Optional[Article]:
        """
        Parse a single RSS entry into an Article object.

        Args:
            entry: RSS feed entry
            company: Company the feed belongs to

        Returns:
            Article object or None if the entry lacks a title or link
        """
        heading = self.clean_text(entry.get('title', ''))
        url = entry.get('link', '')

        if not heading or not url:
            return None

        summary = self.clean_text(clean_html(entry.get('summary', '')))
        body = self.fetch_article_text(url) if self.fetch_full_text else ""

        return Article(
            company=company.name,
            ticker=company.ticker,
            heading=heading,
            text=body or summary or heading,
            url=url,
            source=self.source_name,
            published_date=self._parse_date(entry),
            source_type=SourceType.RSS,
            metadata={
                'rss_url': self.feed_url(company),
                'guid': entry.get('id', ''),
                'full_text': bool(body)
            }
        )

    def _parse_date(self, entry) -> datetime:
        """Parse publication date from RSS entry."""
        for field in ('published_parsed', 'updated_parsed'):
            time_struct = entry.get(field)
            if time_struct:
                try:
                    return datetime(*time_struct[:6], tzinfo=timezone.utc)
                except (TypeError, ValueError):
                    continue

        for field in ('published', 'updated'):
            value = entry.get(field)
            if value:
                try:
                    return date_parser.parse(value)
                except (ValueError, OverflowError):
                    continue

        return datetime.now(timezone.utc)
