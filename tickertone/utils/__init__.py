"""
Utility modules for TickerTone.
"""

from .logger import setup_logging
from .data_utils import export_tables, save_articles, load_articles
from .text_utils import clean_text, clean_html, STOP_WORDS

__all__ = [
    'setup_logging',
    'export_tables',
    'save_articles',
    'load_articles',
    'clean_text',
    'clean_html',
    'STOP_WORDS'
]
