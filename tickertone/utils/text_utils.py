"""
Text processing utilities for TickerTone.
"""

import html
import re

# Common English function words, dropped before ranking lexicon contributors
STOP_WORDS = frozenset({
    'a', 'about', 'above', 'after', 'again', 'against', 'all', 'also', 'am',
    'an', 'and', 'any', 'are', 'as', 'at', 'be', 'because', 'been', 'before',
    'being', 'below', 'between', 'both', 'but', 'by', 'can', 'could', 'did',
    'do', 'does', 'doing', 'down', 'during', 'each', 'few', 'for', 'from',
    'further', 'had', 'has', 'have', 'having', 'he', 'her', 'here', 'hers',
    'herself', 'him', 'himself', 'his', 'how', 'i', 'if', 'in', 'into', 'is',
    'it', "it's", 'its', 'itself', 'just', 'may', 'me', 'might', 'more', 'most',
    'must', 'my', 'myself', 'no', 'nor', 'not', 'now', 'of', 'off', 'on', 'once',
    'only', 'or', 'other', 'our', 'ours', 'ourselves', 'out', 'over', 'own',
    'said', 'same', 'says', 'she', 'should', 'so', 'some', 'such', 'than', 'that',
    'the', 'their', 'theirs', 'them', 'themselves', 'then', 'there', 'these',
    'they', 'this', 'those', 'through', 'to', 'too', 'under', 'until', 'up',
    'us', 'very', 'was', 'we', 'were', 'what', 'when', 'where', 'which', 'while',
    'who', 'whom', 'why', 'will', 'with', 'would', 'you', 'your', 'yours',
    'yourself', 'yourselves'
})

# Typographic apostrophes seen in scraped news copy
_APOSTROPHES = re.compile(r"[‘’ʼ`´]")
_WHITESPACE = re.compile(r'\s+')
_DIGITS_ONLY = re.compile(r'^\d+$')

UNWANTED_PATTERNS = [
    'Advertisement',
    'Click here',
    'Read more',
    'Subscribe',
    'Sign up',
    'Continue reading'
]


def clean_text(text: str) -> str:
    """
    Clean and normalize scraped text content.

    Args:
        text: Raw text to clean

    Returns:
        Cleaned text
    """
    if not text:
        return ""

    text = ' '.join(text.split())

    for pattern in UNWANTED_PATTERNS:
        text = text.replace(pattern, '')

    return _WHITESPACE.sub(' ', text).strip()


def clean_html(text: str) -> str:
    """
    Remove HTML tags and decode HTML entities.

    Args:
        text: Text with HTML content

    Returns:
        Cleaned text
    """
    if not text:
        return ""

    text = re.sub(r'<[^>]+>', ' ', text)
    text = html.unescape(text)
    return _WHITESPACE.sub(' ', text).strip()


def normalize_apostrophes(text: str) -> str:
    """Replace curly and other typographic apostrophes with a plain one."""
    return _APOSTROPHES.sub("'", text) if text else ""


def is_digit_token(word: str) -> bool:
    """True for tokens made only of digits, e.g. "2024"."""
    return bool(_DIGITS_ONLY.match(word))
