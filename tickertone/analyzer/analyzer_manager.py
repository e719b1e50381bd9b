"""
Analyzer manager: runs tokenization, frequency aggregation and lexicon scoring.
"""

from typing import List, Optional, Dict, Any, Iterable, Union
import time
from loguru import logger

from tickertone.models import Article, AnalysisResult, Company
from . import frequency, lexicon_scorer
from .lexicon import Lexicon, load_vader_lexicon, load_afinn, load_loughran_mcdonald, lexicon_summary
from .tokenizer import tokenize_articles
from config.settings import LEXICON_CONFIG, ANALYSIS_CONFIG


class AnalyzerManager:
    """Holds the loaded lexicons and runs the analysis stages over a batch of articles."""

    def __init__(self, lexicons: Optional[Union[List[Lexicon], Dict[str, Lexicon]]] = None):
        """
        Initialize analyzer manager.

        Args:
            lexicons: Lexicons to score with. If None, loads them from config.
        """
        if lexicons is None:
            self.lexicons: Dict[str, Lexicon] = {}
            self._initialize_lexicons()
        elif isinstance(lexicons, dict):
            self.lexicons = dict(lexicons)
        else:
            self.lexicons = {lexicon.name: lexicon for lexicon in lexicons}

    def _initialize_lexicons(self):
        """Load the configured general-purpose and finance lexicons."""
        logger.info("Loading sentiment lexicons...")

        loaders = []
        if LEXICON_CONFIG['afinn_path'] and LEXICON_CONFIG['general'] == 'afinn':
            loaders.append(('afinn', lambda: load_afinn(LEXICON_CONFIG['afinn_path'])))
        else:
            loaders.append(('vader', load_vader_lexicon))

        if LEXICON_CONFIG['loughran_path']:
            loaders.append(('loughran', lambda: load_loughran_mcdonald(LEXICON_CONFIG['loughran_path'])))
        else:
            logger.info("LOUGHRAN_PATH not set; finance lexicon disabled")

        for name, loader in loaders:
            try:
                self.add_lexicon(loader())
            except Exception as e:
                logger.error(f"✗ Failed to load {name} lexicon: {e}")

        if not self.lexicons:
            logger.warning("No lexicons were loaded; sentiment tables will be empty")

    def add_lexicon(self, lexicon: Lexicon):
        """Register or replace a lexicon by name."""
        self.lexicons[lexicon.name] = lexicon
        logger.info(f"Added lexicon: {lexicon!r}")

    def analyze(self,
                articles_by_ticker: Dict[str, List[Article]],
                companies: Optional[Iterable[Union[Company, str]]] = None,
                top_n: Optional[int] = None) -> AnalysisResult:
        """
        Run every analysis stage over a fixed batch of articles.

        Args:
            articles_by_ticker: Mapping of ticker -> fetched articles
            companies: Companies to report on, including ones without
                articles. Defaults to the companies found in the articles.
            top_n: Words per company in the tf-idf ranking

        Returns:
            AnalysisResult holding every table
        """
        start_time = time.time()
        top_n = top_n or ANALYSIS_CONFIG['top_tf_idf']

        articles = [article for batch in articles_by_ticker.values() for article in batch]
        company_names = self._company_names(articles, companies)

        logger.info(f"Analyzing {len(articles)} articles for {len(company_names)} companies")

        tokens = tokenize_articles(articles)
        logger.info(f"Tokenized into {len(tokens)} tokens")

        word_counts = frequency.count_words(tokens)
        tf_idf = frequency.tf_idf(word_counts)
        top_tf_idf = frequency.top_tf_idf(tf_idf, n=top_n)

        result = AnalysisResult(
            tokens=tokens,
            word_counts=word_counts,
            tf_idf=tf_idf,
            top_tf_idf=top_tf_idf
        )

        for name, lexicon in self.lexicons.items():
            self._score_lexicon(result, name, lexicon, company_names)

        result.processing_time = time.time() - start_time
        logger.info(f"Analysis completed in {result.processing_time:.2f}s")
        return result

    def _score_lexicon(self, result: AnalysisResult, name: str,
                       lexicon: Lexicon, company_names: List[str]):
        tallies = lexicon_scorer.score(result.tokens, lexicon)
        result.tallies[name] = tallies
        result.positivity[name] = lexicon_scorer.positivity(tallies, company_names)
        result.top_words[name] = lexicon_scorer.top_words_by_sentiment(
            result.tokens, lexicon, n=ANALYSIS_CONFIG['top_words_per_sentiment']
        )
        if lexicon.is_numeric:
            result.contributions[name] = lexicon_scorer.contributions(
                result.tokens, lexicon, top=ANALYSIS_CONFIG['top_contributors']
            )

        missing = result.positivity[name]['score'].isna().sum()
        if missing:
            logger.warning(f"{name}: {missing} companies have no positive or negative matches")
        logger.info(f"{name}: {int(tallies['n'].sum()) if not tallies.empty else 0} lexicon matches")

    @staticmethod
    def _company_names(articles: List[Article],
                       companies: Optional[Iterable[Union[Company, str]]]) -> List[str]:
        if companies is None:
            return sorted({article.company for article in articles})
        return [c.name if isinstance(c, Company) else c for c in companies]

    def get_lexicon_info(self) -> Dict[str, Any]:
        """Entry counts and labels of every loaded lexicon."""
        return lexicon_summary(self.lexicons)
