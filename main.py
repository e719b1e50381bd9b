#!/usr/bin/env python3
"""
TickerTone - Main application entry point.

Fetches recent news about a fixed list of technology stocks and:
- Tokenizes the article text
- Ranks each company's most distinctive words by tf-idf
- Tallies lexicon sentiment per company and computes positivity scores
- Exports the resulting tables
"""

import argparse
import sys
import time
from typing import Dict, List, Optional

import pandas as pd
from loguru import logger

from tickertone.utils.logger import setup_logging
from tickertone.scraper.scraper_manager import ScraperManager
from tickertone.analyzer.analyzer_manager import AnalyzerManager
from tickertone.models import Article, AnalysisResult
from tickertone.utils.data_utils import export_tables, save_articles, load_articles, EXPORT_FORMATS
from config.settings import ANALYSIS_CONFIG


class TickerTone:
    """Main TickerTone application class."""

    def __init__(self, scraper_manager: Optional[ScraperManager] = None,
                 analyzer_manager: Optional[AnalyzerManager] = None):
        """Initialize TickerTone application."""
        logger.info("Initializing TickerTone...")

        self.scraper_manager = scraper_manager or ScraperManager()
        self.analyzer_manager = analyzer_manager or AnalyzerManager()

        logger.info("TickerTone initialized successfully")

    @property
    def companies(self):
        return self.scraper_manager.companies

    def run_full_pipeline(self,
                          max_articles: Optional[int] = None,
                          top_n: Optional[int] = None,
                          export_format: Optional[str] = None,
                          save_snapshot: bool = False,
                          use_parallel: bool = True) -> AnalysisResult:
        """
        Run the complete fetch and analysis pipeline.

        Args:
            max_articles: Maximum articles per company
            top_n: Words per company in the tf-idf ranking
            export_format: Export format ('json', 'csv', 'excel')
            save_snapshot: Whether to save fetched articles for later re-analysis
            use_parallel: Whether to fetch companies in parallel

        Returns:
            AnalysisResult with every table
        """
        start_time = time.time()

        logger.info("Step 1: Fetching articles for all companies...")
        articles_by_ticker = self.fetch_only(max_articles=max_articles,
                                             save_snapshot=save_snapshot,
                                             use_parallel=use_parallel)

        logger.info("Step 2: Analyzing articles...")
        result = self._analyze(articles_by_ticker, top_n, export_format)

        logger.info(f"Pipeline completed in {time.time() - start_time:.2f} seconds")
        return result

    def fetch_only(self,
                   max_articles: Optional[int] = None,
                   save_snapshot: bool = False,
                   use_parallel: bool = True) -> Dict[str, List[Article]]:
        """
        Fetch articles for every configured company.

        Args:
            max_articles: Maximum articles per company
            save_snapshot: Whether to save the fetched articles as JSON
            use_parallel: Whether to fetch companies in parallel

        Returns:
            Mapping of ticker -> articles
        """
        articles_by_ticker = self.scraper_manager.fetch_companies(
            max_articles=max_articles,
            use_parallel=use_parallel
        )

        for company in self.companies:
            count = len(articles_by_ticker.get(company.ticker, []))
            status = "✓" if count else "✗"
            logger.info(f"{status} {company.name} ({company.ticker}): {count} articles")

        if save_snapshot:
            snapshot_path = save_articles(articles_by_ticker)
            logger.info(f"Article snapshot saved to: {snapshot_path}")

        return articles_by_ticker

    def analyze_snapshot(self, snapshot_path: str,
                         top_n: Optional[int] = None,
                         export_format: Optional[str] = None) -> AnalysisResult:
        """
        Re-run the analysis over a previously saved article snapshot.

        Args:
            snapshot_path: Path written by ``fetch --save``
            top_n: Words per company in the tf-idf ranking
            export_format: Export format for results

        Returns:
            AnalysisResult with every table
        """
        logger.info(f"Analyzing article snapshot: {snapshot_path}")
        articles_by_ticker = load_articles(snapshot_path)
        return self._analyze(articles_by_ticker, top_n, export_format)

    def _analyze(self, articles_by_ticker: Dict[str, List[Article]],
                 top_n: Optional[int], export_format: Optional[str]) -> AnalysisResult:
        companies = [c for c in self.companies if c.ticker in articles_by_ticker]
        # Snapshots may hold tickers that are no longer configured
        known = {c.ticker for c in companies}
        extra = sorted({a.company for t, batch in articles_by_ticker.items()
                        if t not in known for a in batch})

        result = self.analyzer_manager.analyze(
            articles_by_ticker,
            companies=[c.name for c in companies] + extra,
            top_n=top_n
        )

        if export_format:
            export_path = export_tables(result.tables(), format=export_format)
            logger.info(f"Results exported to: {export_path}")

        summary = result.summary()
        logger.info(f"Total tokens processed: {summary['tokens']}")
        logger.info(f"Lexicons used: {summary['lexicons']}")
        return result

    def test_components(self) -> dict:
        """
        Test all system components.

        Returns:
            Dictionary with test results
        """
        logger.info("Testing TickerTone components...")

        results = {
            'scrapers': self.scraper_manager.test_scrapers(max_articles=1),
            'lexicons': self.analyzer_manager.get_lexicon_info()
        }

        logger.info("Component testing completed")
        return results


def print_result(result: AnalysisResult, top_n: int):
    """Print the ranked tables to stdout."""
    with pd.option_context('display.max_rows', 200, 'display.width', 120):
        print("\n=== Most distinctive words (tf-idf) ===")
        if result.top_tf_idf.empty:
            print("  (no tokens)")
        for company, group in result.top_tf_idf.groupby('company', sort=False):
            words = ', '.join(group['word'].head(top_n))
            print(f"  {company}: {words}")

        for name, frame in result.positivity.items():
            print(f"\n=== Positivity ({name}) ===")
            print(frame.to_string(index=False, na_rep='n/a'))

        for name, frame in result.contributions.items():
            print(f"\n=== Largest contributors ({name}) ===")
            print(frame.head(10).to_string(index=False))

        for name, frame in result.top_words.items():
            print(f"\n=== Top words per sentiment ({name}) ===")
            print(frame.to_string(index=False))


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        description="TickerTone - Stock news text mining and lexicon sentiment",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py run --max-articles 20 --export csv
  python main.py fetch --save
  python main.py analyze data/snapshots/articles_20240101_120000.json --export excel
  python main.py companies
  python main.py test
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Run full pipeline
    run_parser = subparsers.add_parser('run', help='Fetch articles and run the analysis')
    run_parser.add_argument('--max-articles', type=int, help='Max articles per company')
    run_parser.add_argument('--top', type=int, default=ANALYSIS_CONFIG['top_tf_idf'],
                            help='Words per company in the tf-idf ranking')
    run_parser.add_argument('--export', choices=EXPORT_FORMATS, help='Export format')
    run_parser.add_argument('--save', action='store_true', help='Save fetched articles as a snapshot')
    run_parser.add_argument('--sequential', action='store_true', help='Fetch companies one at a time')

    # Fetch only
    fetch_parser = subparsers.add_parser('fetch', help='Fetch articles only')
    fetch_parser.add_argument('--max-articles', type=int, help='Max articles per company')
    fetch_parser.add_argument('--save', action='store_true', help='Save fetched articles as a snapshot')
    fetch_parser.add_argument('--sequential', action='store_true', help='Fetch companies one at a time')

    # Analyze snapshot
    analyze_parser = subparsers.add_parser('analyze', help='Analyze a saved article snapshot')
    analyze_parser.add_argument('snapshot', help='Path to an article snapshot JSON file')
    analyze_parser.add_argument('--top', type=int, default=ANALYSIS_CONFIG['top_tf_idf'],
                                help='Words per company in the tf-idf ranking')
    analyze_parser.add_argument('--export', choices=EXPORT_FORMATS, help='Export format')

    # Configured companies
    subparsers.add_parser('companies', help='List configured companies')

    # Test components
    subparsers.add_parser('test', help='Test news sources and lexicons')

    return parser


def main():
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    setup_logging()

    try:
        if args.command == 'companies':
            for company in ScraperManager(scrapers=[]).companies:
                print(f"{company.name:<12} {company.ticker}")
            return

        app = TickerTone()

        if args.command == 'run':
            result = app.run_full_pipeline(
                max_articles=args.max_articles,
                top_n=args.top,
                export_format=args.export,
                save_snapshot=args.save,
                use_parallel=not args.sequential
            )
            print_result(result, args.top)

        elif args.command == 'fetch':
            articles_by_ticker = app.fetch_only(
                max_articles=args.max_articles,
                save_snapshot=args.save,
                use_parallel=not args.sequential
            )
            print("\n=== Fetched articles ===")
            for ticker, articles in articles_by_ticker.items():
                print(f"  {ticker}: {len(articles)} articles")

        elif args.command == 'analyze':
            result = app.analyze_snapshot(
                args.snapshot,
                top_n=args.top,
                export_format=args.export
            )
            print_result(result, args.top)

        elif args.command == 'test':
            results = app.test_components()
            print("\n=== Test Results ===")

            scraper_results = results['scrapers']
            print(f"\nNews sources: {scraper_results['successful']}/{scraper_results['total_scrapers']} working")
            for result in scraper_results['results']:
                status = "✓" if result['success'] else "✗"
                print(f"  {status} {result['source']}: {result['articles_found']} articles")

            print("\nLexicons:")
            for name, info in results['lexicons'].items():
                kind = 'numeric' if info['numeric'] else 'categorical'
                print(f"  ✓ {name}: {info['entries']} entries ({kind}; {', '.join(info['labels'])})")

    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
    except Exception as e:
        logger.error(f"Application error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
