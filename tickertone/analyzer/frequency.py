"""
Word frequency and tf-idf aggregation, treating each company's text as one document.
"""

import numpy as np
import pandas as pd

from tickertone.utils.text_utils import is_digit_token

WORD_COUNT_COLUMNS = ['company', 'word', 'n']
TF_IDF_COLUMNS = ['company', 'word', 'n', 'tf', 'idf', 'tf_idf']


COLUMN_DTYPES = {'n': 'int64', 'tf': 'float64', 'idf': 'float64', 'tf_idf': 'float64'}


def _empty_frame(columns) -> pd.DataFrame:
    return pd.DataFrame({column: pd.Series(dtype=COLUMN_DTYPES.get(column, 'object'))
                         for column in columns})


def count_words(tokens: pd.DataFrame) -> pd.DataFrame:
    """
    Count occurrences of each word per company.

    Args:
        tokens: Token table with at least ``company`` and ``word`` columns

    Returns:
        DataFrame[company, word, n], one row per (company, word), sorted by
        company, then count descending, then word
    """
    if tokens.empty:
        return _empty_frame(WORD_COUNT_COLUMNS)

    counts = tokens.groupby(['company', 'word']).size().reset_index(name='n')
    return counts.sort_values(
        ['company', 'n', 'word'], ascending=[True, False, True], ignore_index=True
    )


def tf_idf(word_counts: pd.DataFrame) -> pd.DataFrame:
    """
    Compute tf-idf per (company, word).

    tf is the word's share of all the company's tokens, idf is
    ln(companies / companies using the word). A word used by every company
    has idf == tf_idf == 0. Digit-only words still count towards tf and idf
    but are dropped from the returned rows.

    Args:
        word_counts: Output of :func:`count_words`

    Returns:
        DataFrame[company, word, n, tf, idf, tf_idf] sorted by company, then
        tf_idf descending, then word
    """
    if word_counts.empty:
        return _empty_frame(TF_IDF_COLUMNS)

    n_documents = word_counts['company'].nunique()
    totals = word_counts.groupby('company')['n'].transform('sum')
    document_frequency = word_counts.groupby('word')['company'].transform('nunique')

    frame = word_counts.assign(
        tf=word_counts['n'] / totals,
        idf=np.log(n_documents / document_frequency)
    )
    frame['tf_idf'] = frame['tf'] * frame['idf']

    # Digit-only words are a ranking filter, not a change to the totals
    frame = frame[~frame['word'].map(is_digit_token).astype(bool)]
    if frame.empty:
        return _empty_frame(TF_IDF_COLUMNS)

    return frame[TF_IDF_COLUMNS].sort_values(
        ['company', 'tf_idf', 'word'], ascending=[True, False, True], ignore_index=True
    )


def top_tf_idf(tf_idf_frame: pd.DataFrame, n: int = 10) -> pd.DataFrame:
    """The ``n`` most distinctive words of each company."""
    if tf_idf_frame.empty:
        return tf_idf_frame.copy()

    ranked = tf_idf_frame.sort_values(
        ['company', 'tf_idf', 'word'], ascending=[True, False, True]
    )
    return ranked.groupby('company', sort=False).head(n).reset_index(drop=True)
