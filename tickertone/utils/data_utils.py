"""
Data utility functions for TickerTone.
"""

import json
import pandas as pd
from pathlib import Path
from typing import List, Dict, Optional
from datetime import datetime
from loguru import logger

from tickertone.models import Article
from config.settings import DATA_PATHS

EXPORT_FORMATS = ('json', 'csv', 'excel')


def export_tables(tables: Dict[str, pd.DataFrame],
                  format: str = 'csv',
                  filename: Optional[str] = None,
                  export_dir: Optional[Path] = None) -> str:
    """
    Export analysis tables to various formats.

    Args:
        tables: Mapping of table name -> DataFrame
        format: Export format ('json', 'csv', 'excel')
        filename: Optional base name. If None, generates timestamp-based name.
        export_dir: Target directory. Defaults to the configured exports path.

    Returns:
        Path to the exported file (or directory, for CSV)
    """
    if format.lower() not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format: {format}")

    if not tables:
        logger.warning("No tables to export")
        return ""

    if not filename:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"analysis_{timestamp}"

    export_path = Path(export_dir) if export_dir else DATA_PATHS['exports']
    export_path.mkdir(parents=True, exist_ok=True)

    if format.lower() == 'json':
        return _export_to_json(tables, export_path / f"{filename}.json")
    elif format.lower() == 'csv':
        return _export_to_csv(tables, export_path / filename)
    else:
        return _export_to_excel(tables, export_path / f"{filename}.xlsx")


def _records(frame: pd.DataFrame) -> List[Dict]:
    """DataFrame rows as dicts with missing values as None."""
    return frame.astype(object).where(frame.notna(), None).to_dict(orient='records')


def _export_to_json(tables: Dict[str, pd.DataFrame], filepath: Path) -> str:
    """Export tables to a single JSON document."""
    try:
        data = {
            'export_info': {
                'timestamp': datetime.now().isoformat(),
                'tables': sorted(tables.keys()),
                'format_version': '1.0'
            },
            'tables': {name: _records(frame) for name, frame in tables.items()}
        }

        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False, default=str)

        logger.info(f"Exported {len(tables)} tables to JSON: {filepath}")
        return str(filepath)

    except Exception as e:
        logger.error(f"Error exporting to JSON: {e}")
        raise


def _export_to_csv(tables: Dict[str, pd.DataFrame], directory: Path) -> str:
    """Export each table to its own CSV file inside ``directory``."""
    try:
        directory.mkdir(parents=True, exist_ok=True)
        for name, frame in tables.items():
            frame.to_csv(directory / f"{name}.csv", index=False)

        logger.info(f"Exported {len(tables)} tables to CSV: {directory}")
        return str(directory)

    except Exception as e:
        logger.error(f"Error exporting to CSV: {e}")
        raise


def _export_to_excel(tables: Dict[str, pd.DataFrame], filepath: Path) -> str:
    """Export tables to one Excel workbook, one sheet per table."""
    try:
        with pd.ExcelWriter(filepath, engine='openpyxl') as writer:
            for name, frame in tables.items():
                sheet = frame.copy()
                # openpyxl rejects tz-aware datetimes
                for column in sheet.select_dtypes(include=['datetimetz']).columns:
                    sheet[column] = sheet[column].dt.tz_localize(None)
                sheet.to_excel(writer, sheet_name=name[:31], index=False)

        logger.info(f"Exported {len(tables)} tables to Excel: {filepath}")
        return str(filepath)

    except Exception as e:
        logger.error(f"Error exporting to Excel: {e}")
        raise


def save_articles(articles_by_ticker: Dict[str, List[Article]],
                  filename: Optional[str] = None,
                  directory: Optional[Path] = None) -> str:
    """
    Save fetched articles as a JSON snapshot so an analysis can be re-run
    over the same frozen article set.

    Args:
        articles_by_ticker: Mapping of ticker -> list of articles
        filename: Optional filename
        directory: Target directory. Defaults to the configured snapshots path.

    Returns:
        Path to saved file
    """
    if not filename:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"articles_{timestamp}.json"

    target_dir = Path(directory) if directory else DATA_PATHS['snapshots']
    target_dir.mkdir(parents=True, exist_ok=True)
    filepath = target_dir / filename

    try:
        data = {
            'timestamp': datetime.now().isoformat(),
            'total_companies': len(articles_by_ticker),
            'total_articles': sum(len(a) for a in articles_by_ticker.values()),
            'articles': {
                ticker: [article.to_dict() for article in articles]
                for ticker, articles in articles_by_ticker.items()
            }
        }

        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False, default=str)

        logger.info(f"Saved article snapshot to: {filepath}")
        return str(filepath)

    except Exception as e:
        logger.error(f"Error saving article snapshot: {e}")
        raise


def load_articles(filepath: str) -> Dict[str, List[Article]]:
    """
    Load a JSON snapshot written by :func:`save_articles`.

    Args:
        filepath: Path to the snapshot file

    Returns:
        Mapping of ticker -> list of articles, in file order
    """
    path = Path(filepath)

    if not path.exists():
        raise FileNotFoundError(f"File not found: {filepath}")

    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    if not isinstance(data, dict) or not isinstance(data.get('articles'), dict):
        raise ValueError(f"Invalid article snapshot: {filepath}")

    articles_by_ticker = {}
    for ticker, articles_data in data['articles'].items():
        articles = []
        for article_dict in articles_data:
            try:
                articles.append(Article.from_dict(article_dict))
            except (KeyError, ValueError) as e:
                logger.warning(f"Error importing article for {ticker}: {e}")
        articles_by_ticker[ticker] = articles

    total = sum(len(a) for a in articles_by_ticker.values())
    logger.info(f"Loaded {total} articles for {len(articles_by_ticker)} companies from {path}")
    return articles_by_ticker
