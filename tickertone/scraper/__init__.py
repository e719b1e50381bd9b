"""
News fetching module for TickerTone.
"""

from .base_scraper import BaseScraper
from .gnews_scraper import GNewsScraper
from .yahoo_rss_scraper import YahooRSSScraper
from .scraper_manager import ScraperManager

__all__ = [
    'BaseScraper',
    'GNewsScraper',
    'YahooRSSScraper',
    'ScraperManager'
]
