"""
Data models for news articles, tokens and analysis results.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Dict, List, Any
from enum import Enum
import hashlib
import json

import pandas as pd


class SentimentLabel(Enum):
    """Sentiment categories used by general and finance lexicons."""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    LITIGIOUS = "litigious"
    UNCERTAINTY = "uncertainty"
    CONSTRAINING = "constraining"
    SUPERFLUOUS = "superfluous"


class SourceType(Enum):
    """Types of news sources."""
    RSS = "rss"
    API = "api"
    WEBSITE = "website"


@dataclass(frozen=True)
class Company:
    """A company and its exchange-qualified ticker (e.g. NASDAQ:MSFT)."""
    name: str
    ticker: str

    @property
    def symbol(self) -> str:
        """Bare symbol without the exchange prefix."""
        return self.ticker.split(':')[-1]


def make_article_id(url: str, heading: str = '') -> str:
    """Stable article id derived from the URL, or the heading when there is none."""
    key = url or heading
    return hashlib.sha1(key.encode('utf-8')).hexdigest()[:16]


def _parse_datetime(value) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace('Z', '+00:00'))
        except ValueError:
            pass
    return datetime.now(timezone.utc)


@dataclass
class Article:
    """News article about one company."""
    company: str
    ticker: str
    heading: str
    text: str
    url: str = ''
    source: str = ''
    published_date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    article_id: str = ''
    source_type: SourceType = SourceType.API
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Fill in the article id and normalise dates and text."""
        self.published_date = _parse_datetime(self.published_date)
        if not self.text:
            self.text = self.heading or ''
        if not self.article_id:
            self.article_id = make_article_id(self.url, self.heading)

    def to_dict(self) -> Dict[str, Any]:
        """Convert article to dictionary format."""
        return {
            'company': self.company,
            'ticker': self.ticker,
            'article_id': self.article_id,
            'published_date': self.published_date.isoformat(),
            'heading': self.heading,
            'text': self.text,
            'url': self.url,
            'source': self.source,
            'source_type': self.source_type.value,
            'metadata': self.metadata
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Article':
        """Create article from dictionary."""
        return cls(
            company=data['company'],
            ticker=data['ticker'],
            heading=data.get('heading', ''),
            text=data.get('text', ''),
            url=data.get('url', ''),
            source=data.get('source', ''),
            published_date=data.get('published_date'),
            article_id=data.get('article_id', ''),
            source_type=SourceType(data.get('source_type', 'api')),
            metadata=data.get('metadata', {})
        )

    def to_json(self) -> str:
        """Convert article to JSON string."""
        return json.dumps(self.to_dict(), indent=2, default=str)

    @classmethod
    def from_json(cls, json_str: str) -> 'Article':
        """Create article from JSON string."""
        return cls.from_dict(json.loads(json_str))


@dataclass(frozen=True)
class Token:
    """A single word of an article, linked back to its source."""
    company: str
    article_id: str
    published_date: datetime
    heading: str
    word: str


@dataclass
class FetchResult:
    """Result of fetching one company's articles from one source."""
    ticker: str
    source: str
    source_type: SourceType
    articles: List[Article]
    success: bool
    error_message: Optional[str] = None
    fetch_time: float = 0.0
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'ticker': self.ticker,
            'source': self.source,
            'source_type': self.source_type.value,
            'articles': [article.to_dict() for article in self.articles],
            'success': self.success,
            'error_message': self.error_message,
            'fetch_time': self.fetch_time,
            'timestamp': self.timestamp.isoformat(),
            'article_count': len(self.articles)
        }


@dataclass
class AnalysisResult:
    """Tables produced by one analysis run.

    Lexicon dependent tables are keyed by lexicon name. ``contributions``
    only holds entries for numeric lexicons.
    """
    tokens: pd.DataFrame
    word_counts: pd.DataFrame
    tf_idf: pd.DataFrame
    top_tf_idf: pd.DataFrame
    tallies: Dict[str, pd.DataFrame] = field(default_factory=dict)
    positivity: Dict[str, pd.DataFrame] = field(default_factory=dict)
    contributions: Dict[str, pd.DataFrame] = field(default_factory=dict)
    top_words: Dict[str, pd.DataFrame] = field(default_factory=dict)
    processing_time: float = 0.0
    timestamp: datetime = field(default_factory=datetime.now)

    def tables(self) -> Dict[str, pd.DataFrame]:
        """Flatten every table into a name -> DataFrame mapping for export."""
        tables = {
            'word_counts': self.word_counts,
            'tf_idf': self.tf_idf,
            'top_tf_idf': self.top_tf_idf,
        }
        for group_name, group in (('tallies', self.tallies),
                                  ('positivity', self.positivity),
                                  ('contributions', self.contributions),
                                  ('top_words', self.top_words)):
            for lexicon_name, frame in group.items():
                tables[f"{group_name}_{lexicon_name}"] = frame
        return tables

    def summary(self) -> Dict[str, Any]:
        """Headline numbers for logging."""
        return {
            'companies': int(self.tokens['company'].nunique()) if not self.tokens.empty else 0,
            'articles': int(self.tokens['article_id'].nunique()) if not self.tokens.empty else 0,
            'tokens': len(self.tokens),
            'distinct_words': int(self.word_counts['word'].nunique()) if not self.word_counts.empty else 0,
            'lexicons': sorted(self.tallies.keys()),
            'processing_time': self.processing_time,
            'timestamp': self.timestamp.isoformat()
        }
