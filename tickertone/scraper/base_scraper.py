"""
Base scraper class for news sources.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
import time
import requests
from bs4 import BeautifulSoup
from datetime import datetime
from loguru import logger

from tickertone.models import Article, Company, FetchResult, SourceType
from tickertone.utils.text_utils import clean_text
from config.settings import SCRAPING_CONFIG

# Minimum length for a paragraph to count as article body text
MIN_PARAGRAPH_LENGTH = 40


class BaseScraper(ABC):
    """Abstract base class for all news scrapers."""

    def __init__(self, source_name: str, source_type: SourceType):
        self.source_name = source_name
        self.source_type = source_type
        self.session = requests.Session()
        self.session.headers.update({
            'User-Agent': SCRAPING_CONFIG['USER_AGENT']
        })
        self.request_delay = SCRAPING_CONFIG['REQUEST_DELAY']
        self.max_retries = SCRAPING_CONFIG['MAX_RETRIES']
        self.timeout = SCRAPING_CONFIG['TIMEOUT']
        self.fetch_full_text = SCRAPING_CONFIG['FETCH_FULL_TEXT']

    @abstractmethod
    def fetch_articles(self, company: Company,
                       max_articles: Optional[int] = None) -> FetchResult:
        """
        Fetch recent articles about one company.

        Args:
            company: Company whose ticker is queried
            max_articles: Maximum number of articles to return

        Returns:
            FetchResult object containing fetched articles and metadata
        """
        pass

    def make_request(self, url: str, **kwargs) -> Optional[requests.Response]:
        """
        Make HTTP request with retry logic and rate limiting.

        Args:
            url: URL to request
            **kwargs: Additional arguments for requests

        Returns:
            Response object or None if failed
        """
        for attempt in range(self.max_retries):
            try:
                time.sleep(self.request_delay)

                response = self.session.get(
                    url,
                    timeout=self.timeout,
                    **kwargs
                )
                response.raise_for_status()
                return response

            except requests.exceptions.RequestException as e:
                logger.warning(f"Request attempt {attempt + 1} failed for {url}: {e}")
                if attempt == self.max_retries - 1:
                    logger.error(f"All attempts failed for {url}")
                    return None
                time.sleep(2 ** attempt)  # Exponential backoff

        return None

    def fetch_article_text(self, url: str) -> str:
        """
        Download an article page and extract its body text.

        Args:
            url: Article URL

        Returns:
            Body text, or an empty string when the page is unavailable
        """
        if not url:
            return ""

        response = self.make_request(url)
        if response is None:
            return ""

        try:
            soup = BeautifulSoup(response.content, 'html.parser')
            for unwanted in soup.select('script, style, nav, header, footer, aside, .advertisement, .ad'):
                unwanted.decompose()

            container = soup.select_one('article') or soup.body or soup
            paragraphs = [
                clean_text(p.get_text(' '))
                for p in container.find_all('p')
            ]
            return ' '.join(p for p in paragraphs if len(p) >= MIN_PARAGRAPH_LENGTH)

        except Exception as e:
            logger.warning(f"Error extracting article text from {url}: {e}")
            return ""

    def clean_text(self, text: str) -> str:
        """Clean and normalize text content."""
        return clean_text(text)

    def create_fetch_result(self, company: Company,
                            articles: List[Article],
                            success: bool = True,
                            error_message: Optional[str] = None,
                            fetch_time: float = 0.0) -> FetchResult:
        """
        Create a FetchResult object.

        Args:
            company: Company the articles were fetched for
            articles: List of fetched articles
            success: Whether fetching was successful
            error_message: Error message if fetching failed
            fetch_time: Time taken for fetching

        Returns:
            FetchResult object
        """
        return FetchResult(
            ticker=company.ticker,
            source=self.source_name,
            source_type=self.source_type,
            articles=articles,
            success=success,
            error_message=error_message,
            fetch_time=fetch_time,
            timestamp=datetime.now()
        )
