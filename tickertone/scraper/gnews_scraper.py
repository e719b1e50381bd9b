"""
GNews scraper using the gnews library.
"""

from typing import List, Optional
from datetime import datetime, timezone
import time
from dateutil import parser as date_parser
from loguru import logger
from gnews import GNews

from tickertone.models import Article, Company, FetchResult, SourceType
from .base_scraper import BaseScraper
from config.settings import GNEWS_CONFIG


class GNewsScraper(BaseScraper):
    """Scraper that fetches ticker news through Google News."""

    def __init__(self, client: Optional[GNews] = None):
        super().__init__("GNews", SourceType.API)
        self.max_results = GNEWS_CONFIG.get('max_results', 20)
        self.query_template = GNEWS_CONFIG['query_template']
        self.fetch_full_text = GNEWS_CONFIG['fetch_full_text']
        self.client = client or GNews(
            language=GNEWS_CONFIG['language'],
            country=GNEWS_CONFIG['country'],
            period=GNEWS_CONFIG['period'],
            max_results=self.max_results
        )

    def build_query(self, company: Company) -> str:
        return self.query_template.format(
            symbol=company.symbol,
            ticker=company.ticker,
            name=company.name
        )

    def fetch_articles(self, company: Company,
                       max_articles: Optional[int] = None) -> FetchResult:
        start_time = time.time()
        articles: List[Article] = []

        try:
            query = self.build_query(company)
            limit = min(self.max_results, max_articles) if max_articles else self.max_results

            logger.info(f"Fetching GNews articles (limit={limit}) for {company.ticker}: {query!r}")

            results = self.client.get_news(query) or []

            for item in results[:limit]:
                try:
                    article = self._parse_gnews_item(item, company)
                    if article:
                        articles.append(article)
                except Exception as e:
                    logger.warning(f"Error parsing GNews item for {company.ticker}: {e}")

            fetch_time = time.time() - start_time
            logger.info(f"GNews returned {len(articles)} articles for {company.ticker}")
            return self.create_fetch_result(
                company,
                articles=articles,
                success=True,
                fetch_time=fetch_time
            )

        except Exception as e:
            fetch_time = time.time() - start_time
            error_msg = f"Failed to fetch GNews articles for {company.ticker}: {e}"
            logger.error(error_msg)
            return self.create_fetch_result(
                company,
                articles=[],
                success=False,
                error_message=error_msg,
                fetch_time=fetch_time
            )

    def _parse_gnews_item(self, item, company: Company) -> Optional[Article]:
        heading = self.clean_text(item.get('title', ''))
        url = item.get('url', '')
        if not heading or not url:
            return None

        published = item.get('published date') or item.get('published') or item.get('published_at')
        published_date = self._parse_date(published)

        description = self.clean_text(item.get('description', '') or item.get('snippet', ''))
        source = (item.get('publisher') or {}).get('title') or item.get('source') or 'Google News'

        # Google News only carries a snippet; the page body is fetched separately
        body = self.fetch_article_text(url) if self.fetch_full_text else ""

        return Article(
            company=company.name,
            ticker=company.ticker,
            heading=heading,
            text=body or description or heading,
            url=url,
            source=source,
            published_date=published_date,
            source_type=SourceType.API,
            metadata={'api_source': 'gnews', 'full_text': bool(body)}
        )

    def _parse_date(self, value) -> datetime:
        if isinstance(value, datetime):
            return value
        if isinstance(value, str) and value:
            try:
                return date_parser.parse(value)
            except (ValueError, OverflowError):
                pass
        return datetime.now(timezone.utc)
