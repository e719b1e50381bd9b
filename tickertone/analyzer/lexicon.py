"""
Sentiment lexicons: static word -> sentiment tables.

A lexicon is either categorical (each word carries one or more labels,
e.g. Loughran-McDonald) or numeric (each word carries a valence score,
e.g. AFINN or VADER, labelled positive/negative by the sign of the score).
"""

import csv
from numbers import Number
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Union

import pandas as pd
from loguru import logger

from tickertone.models import SentimentLabel

LEXICON_COLUMNS = ['word', 'sentiment', 'score']

# Loughran-McDonald master dictionary columns mapped to labels
LOUGHRAN_CATEGORIES = {
    'positive': SentimentLabel.POSITIVE,
    'negative': SentimentLabel.NEGATIVE,
    'litigious': SentimentLabel.LITIGIOUS,
    'uncertainty': SentimentLabel.UNCERTAINTY,
    'constraining': SentimentLabel.CONSTRAINING,
    'superfluous': SentimentLabel.SUPERFLUOUS,
}

# Alternative spellings seen in tidy exports of the dictionary
LOUGHRAN_ALIASES = {'uncertain': 'uncertainty'}


def label_for_score(score: float) -> str:
    """Polarity label for a numeric valence."""
    if score > 0:
        return SentimentLabel.POSITIVE.value
    elif score < 0:
        return SentimentLabel.NEGATIVE.value
    return SentimentLabel.NEUTRAL.value


def _label_value(label: Union[str, SentimentLabel]) -> str:
    if isinstance(label, SentimentLabel):
        return label.value
    return SentimentLabel(str(label).strip().lower()).value


class Lexicon:
    """Read-only word -> sentiment table."""

    def __init__(self, name: str, entries: pd.DataFrame):
        self.name = name
        self.entries = self._normalize(entries)

    @staticmethod
    def _normalize(entries: pd.DataFrame) -> pd.DataFrame:
        missing = {'word', 'sentiment'} - set(entries.columns)
        if missing:
            raise ValueError(f"Lexicon entries missing columns: {sorted(missing)}")

        frame = entries.copy()
        if 'score' not in frame.columns:
            frame['score'] = float('nan')

        frame['word'] = frame['word'].astype(str).str.strip().str.lower()
        frame['sentiment'] = frame['sentiment'].map(_label_value)
        frame['score'] = pd.to_numeric(frame['score'], errors='coerce').astype('float64')
        frame = frame[frame['word'] != '']

        frame = frame.drop_duplicates(subset=['word', 'sentiment'], keep='first')
        return frame[LEXICON_COLUMNS].sort_values(['word', 'sentiment'], ignore_index=True)

    @property
    def is_numeric(self) -> bool:
        """True when every entry carries a numeric score."""
        return not self.entries.empty and bool(self.entries['score'].notna().all())

    @property
    def words(self) -> set:
        return set(self.entries['word'])

    @property
    def labels(self) -> List[str]:
        return sorted(self.entries['sentiment'].unique())

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        kind = 'numeric' if self.is_numeric else 'categorical'
        return f"Lexicon(name={self.name!r}, entries={len(self)}, {kind})"

    @classmethod
    def from_mapping(cls, name: str,
                     mapping: Mapping[str, Union[str, SentimentLabel, Number, Iterable]]) -> 'Lexicon':
        """
        Build a lexicon from a dict.

        Values may be a label ("positive"), several labels, or a number;
        numbers become numeric entries labelled by their sign.
        """
        rows = []
        for word, value in mapping.items():
            if isinstance(value, Number) and not isinstance(value, bool):
                rows.append((word, label_for_score(value), float(value)))
            elif isinstance(value, (str, SentimentLabel)):
                rows.append((word, value, float('nan')))
            else:
                rows.extend((word, label, float('nan')) for label in value)
        return cls(name, pd.DataFrame(rows, columns=LEXICON_COLUMNS))

    @classmethod
    def from_scores(cls, name: str, scores: Mapping[str, float]) -> 'Lexicon':
        """Build a numeric lexicon from word -> score."""
        frame = pd.DataFrame(list(scores.items()), columns=['word', 'score'])
        frame['sentiment'] = frame['score'].map(label_for_score)
        return cls(name, frame)


def load_vader_lexicon() -> Lexicon:
    """The general-purpose VADER valence lexicon shipped with vaderSentiment."""
    from vaderSentiment.vaderSentiment import SentimentIntensityAnalyzer

    lexicon = Lexicon.from_scores('vader', SentimentIntensityAnalyzer().lexicon)
    logger.info(f"Loaded VADER lexicon: {len(lexicon)} words")
    return lexicon


def load_afinn(path: Union[str, Path]) -> Lexicon:
    """
    Load an AFINN word list (``word<TAB>score`` per line).

    Args:
        path: Path to e.g. AFINN-111.txt or AFINN-en-165.txt

    Returns:
        Numeric lexicon named "afinn"
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"AFINN file not found: {path}")

    frame = pd.read_csv(path, sep='\t', header=None, names=['word', 'score'],
                        quoting=csv.QUOTE_NONE, encoding='utf-8')
    lexicon = Lexicon.from_scores('afinn', dict(zip(frame['word'], frame['score'])))
    logger.info(f"Loaded AFINN lexicon from {path}: {len(lexicon)} words")
    return lexicon


def load_loughran_mcdonald(path: Union[str, Path]) -> Lexicon:
    """
    Load the Loughran-McDonald finance lexicon.

    Accepts either the master dictionary CSV (a ``Word`` column plus one
    column per category holding the year the word was added, negative when
    it was removed) or a tidy ``word,sentiment`` CSV.

    Args:
        path: Path to the CSV file

    Returns:
        Categorical lexicon named "loughran"
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Loughran-McDonald file not found: {path}")

    frame = pd.read_csv(path, keep_default_na=False)
    frame.columns = [str(column).strip().lower() for column in frame.columns]

    if 'word' not in frame.columns:
        raise ValueError(f"Loughran-McDonald file has no 'word' column: {path}")

    if 'sentiment' in frame.columns:
        labels = frame['sentiment'].astype(str).str.strip().str.lower().replace(LOUGHRAN_ALIASES)
        known = labels.isin(list(LOUGHRAN_CATEGORIES))
        if not known.all():
            logger.warning(f"Skipped {int((~known).sum())} Loughran-McDonald rows with unknown labels: "
                           f"{sorted(labels[~known].unique())}")
        tidy = pd.DataFrame({'word': frame.loc[known, 'word'], 'sentiment': labels[known]})
    else:
        parts = []
        for column, label in LOUGHRAN_CATEGORIES.items():
            if column not in frame.columns:
                logger.debug(f"Loughran-McDonald file has no {column} column")
                continue
            member = pd.to_numeric(frame[column], errors='coerce').fillna(0) > 0
            parts.append(pd.DataFrame({'word': frame.loc[member, 'word'], 'sentiment': label.value}))
        if not parts:
            raise ValueError(f"Loughran-McDonald file has no sentiment category columns: {path}")
        tidy = pd.concat(parts, ignore_index=True)

    lexicon = Lexicon('loughran', tidy)
    logger.info(f"Loaded Loughran-McDonald lexicon from {path}: {len(lexicon)} entries")
    return lexicon


def lexicon_summary(lexicons: Dict[str, Lexicon]) -> Dict[str, Dict]:
    """Entry counts and labels per lexicon."""
    return {
        name: {
            'entries': len(lexicon),
            'numeric': lexicon.is_numeric,
            'labels': lexicon.labels
        }
        for name, lexicon in lexicons.items()
    }
