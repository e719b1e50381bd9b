"""
Word tokenizer producing one row per word per article.
"""

import re
from typing import Iterable, List

import pandas as pd

from tickertone.models import Article, Token
from tickertone.utils.text_utils import normalize_apostrophes

TOKEN_COLUMNS = ['company', 'article_id', 'published_date', 'heading', 'word']

# Runs of letters/digits, optionally joined by single apostrophes (don't, company's)
WORD_PATTERN = re.compile(r"[^\W_]+(?:'[^\W_]+)*")


def split_words(text: str) -> List[str]:
    """Lowercase ``text`` and split it into words without surrounding punctuation."""
    if not text:
        return []
    return WORD_PATTERN.findall(normalize_apostrophes(text).lower())


def tokenize(article: Article) -> List[Token]:
    """
    Split an article's text into tokens.

    Every token carries the article's company, id, publication date and
    heading so it can be traced back to its source.
    """
    return [
        Token(
            company=article.company,
            article_id=article.article_id,
            published_date=article.published_date,
            heading=article.heading,
            word=word
        )
        for word in split_words(article.text)
    ]


def tokens_to_frame(tokens: Iterable[Token]) -> pd.DataFrame:
    """Build the token table from Token objects."""
    rows = [
        (t.company, t.article_id, t.published_date, t.heading, t.word)
        for t in tokens
    ]
    return pd.DataFrame(rows, columns=TOKEN_COLUMNS)


def tokenize_articles(articles: Iterable[Article]) -> pd.DataFrame:
    """
    Tokenize many articles into a single table.

    Args:
        articles: Articles from any number of companies

    Returns:
        DataFrame with columns company, article_id, published_date, heading, word
    """
    tokens: List[Token] = []
    for article in articles:
        tokens.extend(tokenize(article))
    return tokens_to_frame(tokens)
