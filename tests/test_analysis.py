"""
Tests for tokenization, frequency aggregation and lexicon scoring.
"""

import math
import tempfile
import unittest
import sys
from pathlib import Path
from datetime import datetime, timezone
from unittest.mock import patch

import pandas as pd

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from tickertone.models import Article
from tickertone.analyzer.tokenizer import tokenize, tokenize_articles, split_words
from tickertone.analyzer.frequency import count_words, tf_idf, top_tf_idf
from tickertone.analyzer.lexicon import Lexicon, load_afinn, load_loughran_mcdonald
from tickertone.analyzer import lexicon_scorer
from tickertone.analyzer.analyzer_manager import AnalyzerManager


def make_article(company, text, url=None, heading='Heading'):
    return Article(
        company=company,
        ticker=f"NASDAQ:{company.upper()[:4]}",
        heading=heading,
        text=text,
        url=url or f"https://example.com/{company}/{abs(hash(text))}",
        published_date=datetime(2024, 2, 1, tzinfo=timezone.utc)
    )


def token_frame(company, counts):
    """Token table with ``n`` copies of each word."""
    words = [word for word, n in counts.items() for _ in range(n)]
    return pd.DataFrame({'company': company, 'article_id': 'a1',
                         'published_date': datetime(2024, 2, 1, tzinfo=timezone.utc),
                         'heading': 'h', 'word': words})


class TestTokenizer(unittest.TestCase):
    """Test word tokenization."""

    def test_lowercases_and_strips_punctuation(self):
        words = split_words("Microsoft's shares rose 5% - strong results!")
        self.assertEqual(words, ["microsoft's", 'shares', 'rose', '5', 'strong', 'results'])

    def test_keeps_contractions(self):
        self.assertEqual(split_words("Investors don’t panic."), ['investors', "don't", 'panic'])

    def test_trailing_apostrophe_is_dropped(self):
        self.assertEqual(split_words("'investors' gains"), ['investors', 'gains'])

    def test_empty_text(self):
        self.assertEqual(split_words(''), [])

    def test_tokens_carry_article_fields(self):
        article = make_article('Apple', 'iPhone sales slow')
        tokens = tokenize(article)

        self.assertEqual([t.word for t in tokens], ['iphone', 'sales', 'slow'])
        for token in tokens:
            self.assertEqual(token.company, 'Apple')
            self.assertEqual(token.article_id, article.article_id)
            self.assertEqual(token.heading, article.heading)
            self.assertEqual(token.published_date, article.published_date)

    def test_tokenize_articles_columns(self):
        frame = tokenize_articles([make_article('Apple', 'one two'), make_article('IBM', 'three')])
        self.assertEqual(list(frame.columns), ['company', 'article_id', 'published_date', 'heading', 'word'])
        self.assertEqual(len(frame), 3)

    def test_tokenize_no_articles(self):
        frame = tokenize_articles([])
        self.assertTrue(frame.empty)
        self.assertIn('word', frame.columns)


class TestFrequency(unittest.TestCase):
    """Test word counts and tf-idf."""

    def setUp(self):
        self.articles = [
            make_article('Apple', 'cloud cloud growth 2024'),
            make_article('IBM', 'cloud chips'),
        ]
        self.tokens = tokenize_articles(self.articles)
        self.counts = count_words(self.tokens)

    def test_count_words(self):
        apple = self.counts[self.counts['company'] == 'Apple']
        self.assertEqual(list(apple['word']), ['cloud', '2024', 'growth'])
        self.assertEqual(list(apple['n']), [2, 1, 1])
        self.assertFalse(self.counts.duplicated(['company', 'word']).any())

    def test_counts_sum_to_token_totals(self):
        sums = self.counts.groupby('company')['n'].sum()
        totals = self.tokens.groupby('company').size()
        pd.testing.assert_series_equal(sums, totals, check_names=False)

    def test_word_in_every_company_has_zero_tf_idf(self):
        frame = tf_idf(self.counts)
        cloud = frame[frame['word'] == 'cloud']

        self.assertEqual(len(cloud), 2)
        self.assertTrue((cloud['idf'] == 0.0).all())
        self.assertTrue((cloud['tf_idf'] == 0.0).all())

    def test_tf_idf_values(self):
        frame = tf_idf(self.counts).set_index(['company', 'word'])

        # Apple has four tokens, including the digit-only "2024"
        self.assertAlmostEqual(frame.loc[('Apple', 'growth'), 'tf'], 1 / 4)
        self.assertAlmostEqual(frame.loc[('Apple', 'growth'), 'idf'], math.log(2))
        self.assertAlmostEqual(frame.loc[('IBM', 'chips'), 'tf_idf'], 0.5 * math.log(2))

    def test_digit_only_company_counts_as_document(self):
        articles = self.articles + [make_article('Netflix', '2024 2025')]
        frame = tf_idf(count_words(tokenize_articles(articles)))

        self.assertNotIn('Netflix', set(frame['company']))
        growth = frame.set_index(['company', 'word']).loc[('Apple', 'growth')]
        self.assertAlmostEqual(growth['idf'], math.log(3))
        self.assertAlmostEqual(growth['tf_idf'], 0.25 * math.log(3))

    def test_digit_tokens_excluded(self):
        frame = tf_idf(self.counts)
        self.assertNotIn('2024', set(frame['word']))

    def test_top_tf_idf_ranks_shared_words_last(self):
        top = top_tf_idf(tf_idf(self.counts), n=1)
        self.assertEqual(list(top['word']), ['growth', 'chips'])

    def test_empty_counts(self):
        empty = count_words(tokenize_articles([]))
        self.assertTrue(empty.empty)
        self.assertTrue(tf_idf(empty).empty)
        self.assertTrue(top_tf_idf(tf_idf(empty)).empty)


class TestLexicon(unittest.TestCase):
    """Test lexicon construction and loaders."""

    def test_categorical_mapping(self):
        lexicon = Lexicon.from_mapping('test', {'Strong': 'positive', 'volatility': 'negative'})

        self.assertFalse(lexicon.is_numeric)
        self.assertEqual(lexicon.words, {'strong', 'volatility'})
        self.assertEqual(lexicon.labels, ['negative', 'positive'])

    def test_numeric_mapping_labels_by_sign(self):
        lexicon = Lexicon.from_mapping('test', {'gain': 2, 'loss': -3})
        labels = dict(zip(lexicon.entries['word'], lexicon.entries['sentiment']))

        self.assertTrue(lexicon.is_numeric)
        self.assertEqual(labels, {'gain': 'positive', 'loss': 'negative'})

    def test_multiple_labels_per_word(self):
        lexicon = Lexicon.from_mapping('test', {'lawsuit': ['negative', 'litigious']})
        self.assertEqual(len(lexicon), 2)

    def test_unknown_label_rejected(self):
        with self.assertRaises(ValueError):
            Lexicon.from_mapping('test', {'word': 'happy'})

    def test_load_afinn(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / 'AFINN-111.txt'
            path.write_text("good\t3\nbad\t-3\ncan't stand\t-3\n", encoding='utf-8')
            lexicon = load_afinn(path)

        self.assertEqual(lexicon.name, 'afinn')
        self.assertTrue(lexicon.is_numeric)
        scores = dict(zip(lexicon.entries['word'], lexicon.entries['score']))
        self.assertEqual(scores, {'bad': -3.0, "can't stand": -3.0, 'good': 3.0})

    def test_load_loughran_master_dictionary(self):
        csv_text = (
            "Word,Negative,Positive,Uncertainty,Litigious,Constraining,Superfluous\n"
            "ABANDON,2009,0,0,0,0,0\n"
            "ACHIEVE,0,2009,0,0,0,0\n"
            "AMBIGUITY,0,0,2009,0,0,0\n"
            "LAWSUIT,2009,0,0,2009,0,0\n"
            "REMOVED,-2020,0,0,0,0,0\n"
        )
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / 'lm.csv'
            path.write_text(csv_text, encoding='utf-8')
            lexicon = load_loughran_mcdonald(path)

        pairs = set(zip(lexicon.entries['word'], lexicon.entries['sentiment']))
        self.assertEqual(pairs, {
            ('abandon', 'negative'),
            ('achieve', 'positive'),
            ('ambiguity', 'uncertainty'),
            ('lawsuit', 'negative'),
            ('lawsuit', 'litigious'),
        })
        self.assertFalse(lexicon.is_numeric)

    def test_load_loughran_tidy(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / 'loughran.csv'
            path.write_text("word,sentiment\nabandon,negative\nbetter,positive\n", encoding='utf-8')
            lexicon = load_loughran_mcdonald(path)

        self.assertEqual(lexicon.words, {'abandon', 'better'})

    def test_load_loughran_tidy_maps_uncertain(self):
        csv_text = "word,sentiment\nmaybe,uncertain\nabandon,negative\nfoo,bogus\n"
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / 'loughran.csv'
            path.write_text(csv_text, encoding='utf-8')
            lexicon = load_loughran_mcdonald(path)

        pairs = set(zip(lexicon.entries['word'], lexicon.entries['sentiment']))
        self.assertEqual(pairs, {('maybe', 'uncertainty'), ('abandon', 'negative')})

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_afinn('/nonexistent/AFINN-111.txt')


class TestLexiconScorer(unittest.TestCase):
    """Test sentiment tallies and positivity scores."""

    def setUp(self):
        self.lexicon = Lexicon.from_mapping('test', {'strong': 'positive', 'volatility': 'negative'})

    def test_example_tally_and_score(self):
        tokens = token_frame('Acme', {'strong': 5, 'volatility': 2, 'revenue': 4})
        tallies = lexicon_scorer.score(tokens, self.lexicon)

        self.assertEqual(list(tallies.itertuples(index=False, name=None)),
                         [('Acme', 'negative', 2), ('Acme', 'positive', 5)])

        frame = lexicon_scorer.positivity(tallies, ['Acme'])
        self.assertAlmostEqual(frame.loc[0, 'score'], 3 / 7)
        self.assertAlmostEqual(frame.loc[0, 'score'], 0.4286, places=4)

    def test_three_to_one_is_half(self):
        tokens = token_frame('Acme', {'strong': 3, 'volatility': 1})
        frame = lexicon_scorer.positivity(lexicon_scorer.score(tokens, self.lexicon))
        self.assertEqual(frame.loc[0, 'score'], 0.5)

    def test_zero_denominator_is_missing(self):
        tokens = token_frame('Acme', {'revenue': 3})
        tallies = lexicon_scorer.score(tokens, self.lexicon)
        frame = lexicon_scorer.positivity(tallies, ['Acme', 'Empty'])

        self.assertTrue(tallies.empty)
        self.assertEqual(len(frame), 2)
        self.assertTrue(frame['score'].isna().all())
        self.assertEqual(list(frame['positive']), [0, 0])

    def test_balanced_score_is_zero_not_missing(self):
        tokens = token_frame('Acme', {'strong': 2, 'volatility': 2})
        frame = lexicon_scorer.positivity(lexicon_scorer.score(tokens, self.lexicon))
        self.assertFalse(pd.isna(frame.loc[0, 'score']))
        self.assertEqual(frame.loc[0, 'score'], 0.0)

    def test_missing_scores_sort_last(self):
        tokens = pd.concat([
            token_frame('Low', {'strong': 1, 'volatility': 3}),
            token_frame('High', {'strong': 3}),
        ], ignore_index=True)
        frame = lexicon_scorer.positivity(lexicon_scorer.score(tokens, self.lexicon),
                                          ['Empty', 'Low', 'High'])

        self.assertEqual(list(frame['company']), ['High', 'Low', 'Empty'])
        self.assertTrue(pd.isna(frame.loc[2, 'score']))

    def test_scores_within_bounds(self):
        tokens = pd.concat([
            token_frame('A', {'strong': 7}),
            token_frame('B', {'volatility': 4}),
            token_frame('C', {'strong': 1, 'volatility': 9}),
        ], ignore_index=True)
        scores = lexicon_scorer.positivity(lexicon_scorer.score(tokens, self.lexicon))['score']
        self.assertTrue(((scores >= -1) & (scores <= 1)).all())

    def test_lookup_is_case_normalized(self):
        tokens = token_frame('Acme', {'STRONG': 1})
        tallies = lexicon_scorer.score(tokens, self.lexicon)
        self.assertEqual(int(tallies['n'].sum()), 1)

    def test_tally_table_fills_zeros(self):
        tokens = token_frame('Acme', {'strong': 2})
        wide = lexicon_scorer.tally_table(lexicon_scorer.score(tokens, self.lexicon), ['Acme', 'Other'])

        self.assertEqual(list(wide['company']), ['Acme', 'Other'])
        self.assertEqual(list(wide['positive']), [2, 0])

    def test_contributions(self):
        numeric = Lexicon.from_mapping('numeric', {'gain': 2, 'loss': -3, 'the': 1})
        tokens = token_frame('Acme', {'gain': 2, 'loss': 3, 'the': 5})
        frame = lexicon_scorer.contributions(tokens, numeric)

        self.assertEqual(list(frame['word']), ['loss', 'gain'])
        self.assertEqual(list(frame['contribution']), [-9.0, 4.0])

    def test_contributions_need_numeric_lexicon(self):
        tokens = token_frame('Acme', {'strong': 1})
        with self.assertRaises(ValueError):
            lexicon_scorer.contributions(tokens, self.lexicon)

    def test_top_words_by_sentiment(self):
        tokens = token_frame('Acme', {'strong': 3, 'volatility': 1})
        frame = lexicon_scorer.top_words_by_sentiment(tokens, self.lexicon, n=1)
        self.assertEqual(list(frame.itertuples(index=False, name=None)),
                         [('negative', 'volatility', 1), ('positive', 'strong', 3)])


class TestAnalyzerManager(unittest.TestCase):
    """Pipeline-level properties."""

    def setUp(self):
        self.general = Lexicon.from_mapping('general', {'strong': 2, 'share': 1, 'fool': -2, 'loss': -2})
        self.finance = Lexicon.from_mapping('finance', {'strong': 'positive', 'loss': 'negative',
                                                        'lawsuit': ['negative', 'litigious']})
        self.articles = {
            'NASDAQ:APPL': [make_article('Apple', 'Strong iPhone demand lifts share price', url='u1'),
                            make_article('Apple', 'A loss in services but strong margins', url='u2')],
            'NYSE:IBM': [make_article('IBM', 'IBM faces a lawsuit and a loss', url='u3')],
            'NASDAQ:NFLX': [],
        }
        self.companies = ['Apple', 'IBM', 'Netflix']

    def test_company_without_articles(self):
        result = AnalyzerManager([self.finance]).analyze(self.articles, self.companies)

        self.assertNotIn('Netflix', set(result.word_counts['company']))
        self.assertNotIn('Netflix', set(result.tf_idf['company']))
        self.assertNotIn('Netflix', set(result.tallies['finance']['company']))

        positivity = result.positivity['finance'].set_index('company')
        self.assertTrue(pd.isna(positivity.loc['Netflix', 'score']))
        self.assertAlmostEqual(positivity.loc['Apple', 'score'], 1 / 3)
        self.assertEqual(positivity.loc['IBM', 'score'], -1.0)

    def test_deterministic_rerun(self):
        manager = AnalyzerManager([self.general, self.finance])
        first = manager.analyze(self.articles, self.companies)
        second = manager.analyze(self.articles, self.companies)

        for name, frame in first.tables().items():
            pd.testing.assert_frame_equal(frame, second.tables()[name])

    def test_swapping_lexicon_only_changes_scores(self):
        general = AnalyzerManager([self.general]).analyze(self.articles, self.companies)
        finance = AnalyzerManager([self.finance]).analyze(self.articles, self.companies)

        pd.testing.assert_frame_equal(general.tokens, finance.tokens)
        pd.testing.assert_frame_equal(general.word_counts, finance.word_counts)
        pd.testing.assert_frame_equal(general.tf_idf, finance.tf_idf)

        general_positivity = general.positivity['general'].set_index('company')['score']
        finance_positivity = finance.positivity['finance'].set_index('company')['score']
        self.assertNotEqual(general_positivity.loc['Apple'], finance_positivity.loc['Apple'])

    def test_contributions_only_for_numeric_lexicons(self):
        result = AnalyzerManager([self.general, self.finance]).analyze(self.articles, self.companies)
        self.assertIn('general', result.contributions)
        self.assertNotIn('finance', result.contributions)

    def test_default_lexicons_from_settings(self):
        vader = Lexicon.from_mapping('vader', {'strong': 2, 'loss': -2})
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / 'loughran.csv'
            path.write_text("word,sentiment\nlawsuit,litigious\n", encoding='utf-8')
            settings = {'afinn_path': '', 'loughran_path': str(path), 'general': 'vader'}

            with patch.dict('tickertone.analyzer.analyzer_manager.LEXICON_CONFIG', settings), \
                    patch('tickertone.analyzer.analyzer_manager.load_vader_lexicon', return_value=vader):
                manager = AnalyzerManager()

        self.assertEqual(set(manager.get_lexicon_info()), {'vader', 'loughran'})
        self.assertEqual(manager.lexicons['loughran'].labels, ['litigious'])

    def test_broken_lexicon_file_is_skipped(self):
        vader = Lexicon.from_mapping('vader', {'strong': 2})
        settings = {'afinn_path': '', 'loughran_path': '/nonexistent/lm.csv', 'general': 'vader'}

        with patch.dict('tickertone.analyzer.analyzer_manager.LEXICON_CONFIG', settings), \
                patch('tickertone.analyzer.analyzer_manager.load_vader_lexicon', return_value=vader):
            manager = AnalyzerManager()

        self.assertEqual(list(manager.lexicons), ['vader'])

    def test_summary(self):
        result = AnalyzerManager([self.finance]).analyze(self.articles, self.companies)
        summary = result.summary()

        self.assertEqual(summary['companies'], 2)
        self.assertEqual(summary['articles'], 3)
        self.assertEqual(summary['tokens'], len(result.tokens))
        self.assertEqual(summary['lexicons'], ['finance'])


if __name__ == '__main__':
    unittest.main()
