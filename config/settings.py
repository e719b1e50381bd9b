"""
Configuration settings for TickerTone news fetcher and text analyzer.
"""

from decouple import config, Csv
from pathlib import Path

# Base directory
BASE_DIR = Path(__file__).parent.parent

# Companies to analyze, as "Name=EXCHANGE:SYMBOL" pairs
DEFAULT_COMPANIES = [
    ('Microsoft', 'NASDAQ:MSFT'),
    ('Apple', 'NASDAQ:AAPL'),
    ('Alphabet', 'NASDAQ:GOOGL'),
    ('Amazon', 'NASDAQ:AMZN'),
    ('Meta', 'NASDAQ:META'),
    ('IBM', 'NYSE:IBM'),
    ('Netflix', 'NASDAQ:NFLX'),
]


def parse_companies(pairs):
    """Parse ["Name=EX:SYM", ...] into (name, ticker) tuples."""
    companies = []
    for pair in pairs:
        name, sep, ticker = pair.partition('=')
        if not sep or not name.strip() or not ticker.strip():
            raise ValueError(f"Invalid company entry: {pair!r} (expected Name=EXCHANGE:SYMBOL)")
        companies.append((name.strip(), ticker.strip().upper()))
    return companies


_companies_override = config('COMPANIES', default='', cast=Csv())
COMPANIES = parse_companies(_companies_override) if _companies_override else DEFAULT_COMPANIES

# Fetching settings
SCRAPING_CONFIG = {
    'USER_AGENT': 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36',
    'REQUEST_DELAY': config('REQUEST_DELAY', default=1.0, cast=float),
    'MAX_RETRIES': config('MAX_RETRIES', default=2, cast=int),
    'TIMEOUT': config('REQUEST_TIMEOUT', default=30, cast=int),
    'MAX_ARTICLES_PER_COMPANY': config('MAX_ARTICLES_PER_COMPANY', default=20, cast=int),
    'FETCH_FULL_TEXT': config('FETCH_FULL_TEXT', default=True, cast=bool),
    'MAX_WORKERS': config('MAX_WORKERS', default=4, cast=int),
    'WORKER_TIMEOUT': config('WORKER_TIMEOUT', default=300, cast=int),
}

# News sources, queried in this order per company
NEWS_SOURCES = config('NEWS_SOURCES', default='gnews,yahoo_rss', cast=Csv())

# GNews settings
GNEWS_CONFIG = {
    'language': config('GNEWS_LANGUAGE', default='en'),
    'country': config('GNEWS_COUNTRY', default='US'),
    'max_results': config('GNEWS_MAX_RESULTS', default=20, cast=int),
    'period': config('GNEWS_PERIOD', default='7d', cast=str),
    'query_template': config('GNEWS_QUERY', default='{symbol} {name} stock'),
    # Item links are news.google.com redirects, so page bodies rarely extract
    'fetch_full_text': config('GNEWS_FETCH_FULL_TEXT', default=False, cast=bool),
}

# Yahoo Finance headline feed, one per symbol
YAHOO_RSS_CONFIG = {
    'url_template': config(
        'YAHOO_RSS_URL',
        default='https://feeds.finance.yahoo.com/rss/2.0/headline?s={symbol}&region=US&lang=en-US'
    ),
}

# Sentiment lexicons
LEXICON_CONFIG = {
    'afinn_path': config('AFINN_PATH', default=''),
    'loughran_path': config('LOUGHRAN_PATH', default=''),
    'general': config('GENERAL_LEXICON', default='vader'),
}

# Analysis settings
ANALYSIS_CONFIG = {
    'top_tf_idf': config('TOP_TF_IDF', default=10, cast=int),
    'top_contributors': config('TOP_CONTRIBUTORS', default=20, cast=int),
    'top_words_per_sentiment': config('TOP_WORDS_PER_SENTIMENT', default=5, cast=int),
}

# Logging settings
LOGGING_CONFIG = {
    'level': config('LOG_LEVEL', default='INFO'),
    'format': '{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function}:{line} | {message}',
    'rotation': '10 MB',
    'retention': '30 days',
    'log_file': BASE_DIR / 'logs' / 'tickertone.log',
}

# Data storage paths
DATA_PATHS = {
    'snapshots': BASE_DIR / 'data' / 'snapshots',
    'exports': BASE_DIR / 'data' / 'exports',
}

# Create necessary directories
for path in DATA_PATHS.values():
    path.mkdir(parents=True, exist_ok=True)
