"""
Text analysis module for TickerTone.
"""

from .tokenizer import tokenize, tokenize_articles
from .frequency import count_words, tf_idf, top_tf_idf
from .lexicon import Lexicon, load_vader_lexicon, load_afinn, load_loughran_mcdonald
from .lexicon_scorer import score, positivity, contributions, tally_table, top_words_by_sentiment
from .analyzer_manager import AnalyzerManager

__all__ = [
    'tokenize',
    'tokenize_articles',
    'count_words',
    'tf_idf',
    'top_tf_idf',
    'Lexicon',
    'load_vader_lexicon',
    'load_afinn',
    'load_loughran_mcdonald',
    'score',
    'positivity',
    'contributions',
    'tally_table',
    'top_words_by_sentiment',
    'AnalyzerManager'
]
