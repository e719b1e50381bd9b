"""
Scraper manager for fetching each company's articles from the configured sources.
"""

from typing import List, Optional, Dict, Any, Union
import concurrent.futures
from loguru import logger

from tickertone.models import Article, Company, FetchResult
from .base_scraper import BaseScraper
from .gnews_scraper import GNewsScraper
from .yahoo_rss_scraper import YahooRSSScraper
from config.settings import NEWS_SOURCES, SCRAPING_CONFIG, COMPANIES

SCRAPER_TYPES = {
    'gnews': GNewsScraper,
    'yahoo_rss': YahooRSSScraper,
}


class ScraperManager:
    """Fetches articles per company; a failing company or source never aborts the others."""

    def __init__(self, scrapers: Optional[List[BaseScraper]] = None,
                 companies: Optional[List[Company]] = None):
        self.companies = companies or [Company(name, ticker) for name, ticker in COMPANIES]
        if scrapers is None:
            self.scrapers = []
            self._initialize_scrapers(NEWS_SOURCES)
        else:
            self.scrapers = list(scrapers)

    def _initialize_scrapers(self, source_names: List[str]):
        """Initialize all configured scrapers."""
        logger.info(f"Initializing news scrapers: {source_names}")

        for name in source_names:
            scraper_cls = SCRAPER_TYPES.get(name.strip().lower())
            if scraper_cls is None:
                logger.warning(f"Unknown news source: {name}")
                continue
            try:
                self.scrapers.append(scraper_cls())
                logger.info(f"Initialized {name} scraper")
            except Exception as e:
                logger.error(f"Failed to initialize {name} scraper: {e}")

        logger.info(f"Total scrapers initialized: {len(self.scrapers)}")

    def resolve_company(self, company: Union[Company, str]) -> Company:
        """Look up a ticker in the configured companies, or wrap an unknown one."""
        if isinstance(company, Company):
            return company
        ticker = company.strip().upper()
        for known in self.companies:
            if known.ticker == ticker or known.symbol == ticker:
                return known
        return Company(name=ticker.split(':')[-1], ticker=ticker)

    def fetch(self, company: Union[Company, str],
              max_articles: Optional[int] = None) -> List[Article]:
        """
        Fetch recent articles for one company from every source.

        Articles are de-duplicated by id across sources and capped at
        ``max_articles``. Any failure yields an empty list.

        Args:
            company: Company or exchange-qualified ticker
            max_articles: Max articles for the company

        Returns:
            List of articles, possibly empty
        """
        company = self.resolve_company(company)
        max_articles = max_articles or SCRAPING_CONFIG['MAX_ARTICLES_PER_COMPANY']

        articles: List[Article] = []
        seen_ids = set()

        for scraper in self.scrapers:
            if len(articles) >= max_articles:
                break

            result = self._safe_fetch(scraper, company, max_articles - len(articles))
            if not result.success:
                logger.warning(f"✗ {scraper.source_name} for {company.ticker}: {result.error_message}")
                continue

            for article in result.articles:
                if article.article_id in seen_ids:
                    continue
                seen_ids.add(article.article_id)
                articles.append(article)

        articles = articles[:max_articles]
        if not articles:
            logger.warning(f"No articles found for {company.name} ({company.ticker})")
        return articles

    def fetch_companies(self,
                        companies: Optional[List[Union[Company, str]]] = None,
                        max_articles: Optional[int] = None,
                        use_parallel: bool = True,
                        max_workers: Optional[int] = None) -> Dict[str, List[Article]]:
        """
        Fetch articles for several companies.

        Args:
            companies: Companies or tickers. Uses the configured list if None.
            max_articles: Max articles per company
            use_parallel: Whether to fetch companies in parallel
            max_workers: Maximum number of concurrent workers

        Returns:
            Mapping of ticker -> articles, in the order companies were given
        """
        companies = [self.resolve_company(c) for c in (companies or self.companies)]

        if not self.scrapers:
            logger.warning("No scrapers initialized")
            return {company.ticker: [] for company in companies}

        logger.info(f"Fetching articles for {len(companies)} companies from {len(self.scrapers)} sources...")

        if use_parallel:
            fetched = self._fetch_parallel(companies, max_articles,
                                           max_workers or SCRAPING_CONFIG['MAX_WORKERS'])
        else:
            fetched = {company.ticker: self._fetch_or_empty(company, max_articles)
                       for company in companies}

        # Merge by key so completion order does not matter
        results = {company.ticker: fetched.get(company.ticker, []) for company in companies}

        total = sum(len(a) for a in results.values())
        logger.info(f"Fetching completed: {total} articles for {len(results)} companies")
        return results

    def _fetch_parallel(self, companies: List[Company], max_articles: Optional[int],
                        max_workers: int) -> Dict[str, List[Article]]:
        """
        Fetch companies in parallel using ThreadPoolExecutor.

        Companies still running after ``WORKER_TIMEOUT`` seconds get an
        empty list and their late results are discarded.
        """
        results: Dict[str, List[Article]] = {}
        timeout = SCRAPING_CONFIG['WORKER_TIMEOUT']

        executor = concurrent.futures.ThreadPoolExecutor(max_workers=max_workers)
        future_to_company = {
            executor.submit(self.fetch, company, max_articles): company
            for company in companies
        }

        try:
            for future in concurrent.futures.as_completed(future_to_company, timeout=timeout):
                company = future_to_company[future]
                try:
                    results[company.ticker] = future.result()
                    logger.info(f"Completed {company.ticker}: {len(results[company.ticker])} articles")
                except Exception as e:
                    logger.error(f"Error fetching {company.ticker}: {e}")
                    results[company.ticker] = []
        except concurrent.futures.TimeoutError:
            for company in future_to_company.values():
                if company.ticker not in results:
                    logger.error(f"Timed out fetching {company.ticker} after {timeout}s")
                    results[company.ticker] = []
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        return results

    def _fetch_or_empty(self, company: Company, max_articles: Optional[int]) -> List[Article]:
        try:
            articles = self.fetch(company, max_articles)
            logger.info(f"Completed {company.ticker}: {len(articles)} articles")
            return articles
        except Exception as e:
            logger.error(f"Error fetching {company.ticker}: {e}")
            return []

    def _safe_fetch(self, scraper: BaseScraper, company: Company,
                    max_articles: int) -> FetchResult:
        """Fetch from a single source, turning exceptions into a failed result."""
        try:
            return scraper.fetch_articles(company, max_articles=max_articles)
        except Exception as e:
            logger.error(f"Error in safe_fetch for {scraper.source_name}: {e}")
            return scraper.create_fetch_result(
                company,
                articles=[],
                success=False,
                error_message=str(e)
            )

    def get_scraper_stats(self) -> Dict[str, Any]:
        """Get statistics about configured scrapers."""
        stats = {
            'total_scrapers': len(self.scrapers),
            'by_type': {},
            'sources': []
        }

        for scraper in self.scrapers:
            source_type = scraper.source_type.value
            stats['by_type'][source_type] = stats['by_type'].get(source_type, 0) + 1
            stats['sources'].append({'name': scraper.source_name, 'type': source_type})

        return stats

    def test_scrapers(self, ticker: Optional[str] = None, max_articles: int = 1) -> Dict[str, Any]:
        """
        Test all scrapers with a small number of articles for one company.

        Args:
            ticker: Ticker to test with. Uses the first configured company if None.
            max_articles: Maximum articles to fetch for testing

        Returns:
            Dictionary with test results
        """
        company = self.resolve_company(ticker) if ticker else self.companies[0]
        logger.info(f"Testing all scrapers with {company.ticker}...")

        test_results = {
            'total_scrapers': len(self.scrapers),
            'successful': 0,
            'failed': 0,
            'results': []
        }

        for scraper in self.scrapers:
            result = self._safe_fetch(scraper, company, max_articles)

            test_results['results'].append({
                'source': scraper.source_name,
                'type': scraper.source_type.value,
                'success': result.success,
                'articles_found': len(result.articles),
                'error': result.error_message,
                'fetch_time': result.fetch_time
            })

            if result.success:
                test_results['successful'] += 1
                logger.info(f"✓ {scraper.source_name}: {len(result.articles)} articles")
            else:
                test_results['failed'] += 1
                logger.warning(f"✗ {scraper.source_name}: {result.error_message}")

        logger.info(f"Test completed: {test_results['successful']}/{test_results['total_scrapers']} scrapers working")
        return test_results
