"""
Lexicon-based sentiment scoring over token tables.

Every function here takes the lexicon as an argument, so a general-purpose
lexicon can be swapped for a finance one without touching tokenization or
frequency aggregation.
"""

from typing import Iterable, Optional

import pandas as pd

from tickertone.models import SentimentLabel
from tickertone.utils.text_utils import STOP_WORDS
from .lexicon import Lexicon

TALLY_COLUMNS = ['company', 'sentiment', 'n']
POSITIVITY_COLUMNS = ['company', 'positive', 'negative', 'score']
CONTRIBUTION_COLUMNS = ['word', 'n', 'score', 'contribution']
TOP_WORD_COLUMNS = ['sentiment', 'word', 'n']

POSITIVE = SentimentLabel.POSITIVE.value
NEGATIVE = SentimentLabel.NEGATIVE.value


def _join(tokens: pd.DataFrame, lexicon: Lexicon, columns) -> pd.DataFrame:
    """Inner join token words against lexicon words; misses drop out."""
    words = tokens[['company', 'word']].assign(word=tokens['word'].str.lower())
    return words.merge(lexicon.entries[['word'] + columns], on='word', how='inner')


def score(tokens: pd.DataFrame, lexicon: Lexicon) -> pd.DataFrame:
    """
    Count lexicon matches per company and sentiment.

    Args:
        tokens: Token table with ``company`` and ``word`` columns
        lexicon: Any lexicon

    Returns:
        DataFrame[company, sentiment, n] sorted by company and sentiment
    """
    if tokens.empty or not len(lexicon):
        return pd.DataFrame({'company': pd.Series(dtype='object'),
                             'sentiment': pd.Series(dtype='object'),
                             'n': pd.Series(dtype='int64')})

    joined = _join(tokens, lexicon, ['sentiment'])
    tallies = joined.groupby(['company', 'sentiment']).size().reset_index(name='n')
    return tallies.sort_values(['company', 'sentiment'], ignore_index=True)


def tally_table(tallies: pd.DataFrame, companies: Optional[Iterable[str]] = None) -> pd.DataFrame:
    """
    Wide company x sentiment count table with zeros for absent pairs.

    Args:
        tallies: Output of :func:`score`
        companies: Row order; companies without matches get a row of zeros

    Returns:
        DataFrame with a ``company`` column and one int column per sentiment
    """
    if tallies.empty:
        wide = pd.DataFrame(index=pd.Index([], name='company'))
    else:
        wide = tallies.pivot_table(index='company', columns='sentiment', values='n',
                                   aggfunc='sum', fill_value=0)
    if companies is not None:
        wide = wide.reindex(list(companies), fill_value=0)
    wide.index.name = 'company'
    return wide.astype('int64').rename_axis(columns=None).reset_index()


def positivity(tallies: pd.DataFrame, companies: Optional[Iterable[str]] = None) -> pd.DataFrame:
    """
    Positivity score per company: (positive - negative) / (positive + negative).

    Companies with no positive or negative matches get a missing score
    (``pd.NA``) rather than 0, since 0 is a legitimate balanced score.

    Args:
        tallies: Output of :func:`score`
        companies: Companies to report; defaults to those present in tallies

    Returns:
        DataFrame[company, positive, negative, score] sorted by score
        descending, missing scores last
    """
    wide = tally_table(tallies, companies)
    for column in (POSITIVE, NEGATIVE):
        if column not in wide.columns:
            wide[column] = 0

    positive = wide[POSITIVE].astype('int64')
    negative = wide[NEGATIVE].astype('int64')
    total = positive + negative

    frame = pd.DataFrame({
        'company': wide['company'],
        'positive': positive,
        'negative': negative,
        'score': ((positive - negative) / total.where(total > 0)).astype('Float64')
    })
    return frame.sort_values(['score', 'company'], ascending=[False, True],
                             na_position='last', ignore_index=True)


def contributions(tokens: pd.DataFrame, lexicon: Lexicon,
                  stop_words: Iterable[str] = STOP_WORDS,
                  top: Optional[int] = None) -> pd.DataFrame:
    """
    Words contributing most to a numeric lexicon's overall sentiment.

    ``contribution = n * score`` summed over every matching token, ranked
    by absolute size. Only meaningful for scored lexicons.

    Args:
        tokens: Token table
        lexicon: Numeric lexicon (AFINN, VADER)
        stop_words: Words dropped before matching
        top: Keep only the first ``top`` rows

    Returns:
        DataFrame[word, n, score, contribution]
    """
    if not lexicon.is_numeric:
        raise ValueError(f"Lexicon '{lexicon.name}' has no numeric scores")

    if tokens.empty:
        return pd.DataFrame({'word': pd.Series(dtype='object'),
                             'n': pd.Series(dtype='int64'),
                             'score': pd.Series(dtype='float64'),
                             'contribution': pd.Series(dtype='float64')})

    words = tokens['word'].str.lower()
    words = words[~words.isin(set(stop_words))]

    counts = words.to_frame('word').groupby('word').size().reset_index(name='n')
    frame = counts.merge(lexicon.entries[['word', 'score']], on='word', how='inner')
    frame['contribution'] = frame['n'] * frame['score']

    frame = (frame.assign(magnitude=frame['contribution'].abs())
                  .sort_values(['magnitude', 'word'], ascending=[False, True])
                  .drop(columns='magnitude')
                  .reset_index(drop=True))
    if top is not None:
        frame = frame.head(top)
    return frame[CONTRIBUTION_COLUMNS]


def top_words_by_sentiment(tokens: pd.DataFrame, lexicon: Lexicon, n: int = 5) -> pd.DataFrame:
    """
    Most frequent matched words within each sentiment label.

    Args:
        tokens: Token table
        lexicon: Any lexicon
        n: Words per sentiment

    Returns:
        DataFrame[sentiment, word, n]
    """
    if tokens.empty or not len(lexicon):
        return pd.DataFrame({'sentiment': pd.Series(dtype='object'),
                             'word': pd.Series(dtype='object'),
                             'n': pd.Series(dtype='int64')})

    joined = _join(tokens, lexicon, ['sentiment'])
    counts = joined.groupby(['sentiment', 'word']).size().reset_index(name='n')
    counts = counts.sort_values(['sentiment', 'n', 'word'], ascending=[True, False, True])
    return counts.groupby('sentiment', sort=False).head(n).reset_index(drop=True)[TOP_WORD_COLUMNS]
