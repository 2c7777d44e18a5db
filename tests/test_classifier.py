import unittest

from analysis import TextClassifier, classify, complexity_score
from analysis.classifier import has_technical_terms, is_common_word
from core import TextCategory


class TestClassify(unittest.TestCase):
    """Tests for text category classification."""

    def test_empty_text(self):
        """Empty text should be short with no complexity signals."""
        result = classify("")

        self.assertEqual(result.category, TextCategory.SHORT)
        self.assertEqual(result.character_count, 0)
        self.assertEqual(result.complexity_score, 0.0)
        self.assertFalse(result.has_formulas)
        self.assertFalse(result.has_technical_terms)

    def test_formula_detected(self):
        """An equation should be flagged as a formula."""
        self.assertTrue(classify("Energy: E = mc^2").has_formulas)
        self.assertTrue(classify("√x ≤ 3").has_formulas)
        self.assertFalse(classify("just plain words").has_formulas)

    def test_long_by_length_alone(self):
        """450 plain characters should be long without any bump."""
        text = "lorem " * 75
        result = classify(text)

        self.assertEqual(result.character_count, 450)
        self.assertEqual(result.complexity_score, 0.0)
        self.assertEqual(result.category, TextCategory.LONG)

    def test_medium_by_length_alone(self):
        self.assertEqual(classify("word " * 40).category, TextCategory.MEDIUM)

    def test_moderate_complexity_bumps_short_text(self):
        """80 characters at 17.5% weighted symbols should move short to medium."""
        text = "a" * 76 + "(())"
        result = classify(text)

        self.assertEqual(result.character_count, 80)
        self.assertGreaterEqual(result.complexity_score, 0.15)
        self.assertLess(result.complexity_score, 0.30)
        self.assertEqual(result.category, TextCategory.MEDIUM)

    def test_moderate_complexity_ignores_tiny_text(self):
        """Texts at or under half the short threshold should stay short."""
        text = "a" * 56 + "(())"
        result = classify(text)

        self.assertGreaterEqual(result.complexity_score, 0.15)
        self.assertEqual(result.category, TextCategory.SHORT)

    def test_high_complexity_bumps_medium_to_long(self):
        text = "a" * 140 + "+" * 20
        result = classify(text)

        self.assertGreaterEqual(result.complexity_score, 0.30)
        self.assertEqual(result.category, TextCategory.LONG)

    def test_long_stays_long(self):
        result = classify("+" * 500)

        self.assertEqual(result.complexity_score, 1.0)
        self.assertEqual(result.category, TextCategory.LONG)

    def test_idempotent(self):
        """Classifying the same text twice should give identical results."""
        text = "The Krebs Cycle (citric acid cycle) yields 2 ATP per glucose."
        self.assertEqual(classify(text), classify(text))

    def test_custom_thresholds(self):
        classifier = TextClassifier(short_threshold=10, medium_threshold=20)
        self.assertEqual(classifier.base_category("a" * 15), TextCategory.MEDIUM)
        self.assertEqual(classifier.base_category("a" * 25), TextCategory.LONG)

    def test_detail_description(self):
        """Details should list count, complexity and detected flags."""
        self.assertEqual(classify("12.5%").detail_description, "5 characters, 70% complex")
        self.assertEqual(classify("").detail_description, "0 characters")


class TestComplexityScore(unittest.TestCase):
    """Tests for the weighted complexity score."""

    def test_sentence_initial_capitals_ignored(self):
        """Capitals that start a sentence should not count."""
        self.assertEqual(complexity_score("Hello world. Again here."), 0.0)

    def test_mid_sentence_capitals_counted(self):
        self.assertAlmostEqual(complexity_score("hello World"), 1 / 11)

    def test_numbers_and_percent(self):
        """A percentage counts as a number match and a symbol character."""
        self.assertAlmostEqual(complexity_score("12.5%"), 3.5 / 5)

    def test_capped_at_one(self):
        self.assertEqual(complexity_score("∑∫√"), 1.0)


class TestTechnicalTerms(unittest.TestCase):
    """Tests for technical term detection."""

    def test_consecutive_capitalized_words(self):
        self.assertTrue(has_technical_terms("theory by Albert Einstein"))

    def test_common_words_break_runs(self):
        """Capitalized common words should not start a technical run."""
        self.assertFalse(has_technical_terms("The Cat sat"))

    def test_acronyms(self):
        self.assertTrue(has_technical_terms("NASA and ESA launched it"))
        self.assertFalse(has_technical_terms("only NASA here"))

    def test_affixes(self):
        self.assertTrue(has_technical_terms("a bio-engineering topic"))

    def test_common_word_lookup_is_case_insensitive(self):
        self.assertTrue(is_common_word("The"))
        self.assertTrue(is_common_word("WHEN,"))
        self.assertFalse(is_common_word("Einstein"))


if __name__ == "__main__":
    unittest.main()
