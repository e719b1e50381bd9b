"""
Data models for the TickerTone news analysis system.
"""

from .article import (
    Article,
    Company,
    Token,
    SentimentLabel,
    SourceType,
    FetchResult,
    AnalysisResult,
    make_article_id
)

__all__ = [
    'Article',
    'Company',
    'Token',
    'SentimentLabel',
    'SourceType',
    'FetchResult',
    'AnalysisResult',
    'make_article_id'
]
