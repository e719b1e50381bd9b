"""
TickerTone: news text mining and lexicon sentiment for a fixed list of stocks.
"""

__version__ = '0.1.0'
