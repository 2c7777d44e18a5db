"""Text complexity classification.

Length picks a base category; a heuristic complexity score can bump it one
level. Everything here is pure and deterministic so it can run on every
(debounced) edit.
"""
import re
import string
import unicodedata
from dataclasses import dataclass

from core import TextCategory
from core.constants import (
    HIGH_COMPLEXITY_THRESHOLD,
    LOW_COMPLEXITY_THRESHOLD,
    MEDIUM_TEXT_THRESHOLD,
    SHORT_TEXT_THRESHOLD,
)

MATH_SYMBOLS = frozenset("+-*/=∑∏∫√∂∞≈≠≤≥±×÷^")
FORMULA_INDICATORS = ("=", "∑", "∏", "∫", "√", "∂", "^", "≈", "≠", "≤", "≥")
SENTENCE_PUNCTUATION = frozenset(".,!?;:")
BRACKETS = frozenset("()[]{}")
TECHNICAL_AFFIXES = ("-tion", "-ity", "-ism", "-ology", "bio-", "geo-", "neo-")

MATH_WEIGHT = 3.0
NUMBER_WEIGHT = 1.5
SPECIAL_CHAR_WEIGHT = 2.0
CAPITALIZED_WEIGHT = 1.0
BRACKET_WEIGHT = 1.5

NUMBER_PATTERN = re.compile(r"\d+\.?\d*%?")
ACRONYM_PATTERN = re.compile(r"\b[A-Z]{2,}\b")

COMMON_WORDS = frozenset({
    # articles, demonstratives
    "a", "an", "the", "this", "that", "these", "those",
    # pronouns
    "i", "you", "he", "she", "it", "we", "they", "me", "him", "her", "us", "them",
    "my", "your", "his", "its", "our", "their", "mine", "yours", "hers", "ours", "theirs",
    "myself", "yourself", "himself", "herself", "itself", "ourselves", "themselves",
    "who", "whom", "whose", "which", "what",
    # question words
    "when", "where", "why", "how",
    # verbs
    "is", "am", "are", "was", "were", "be", "been", "being",
    "have", "has", "had", "having", "do", "does", "did", "doing",
    "will", "would", "shall", "should", "can", "could", "may", "might", "must",
    "go", "going", "went", "gone", "get", "getting", "got", "gotten",
    "make", "making", "made", "take", "taking", "took", "taken",
    "come", "coming", "came", "see", "seeing", "saw", "seen",
    "know", "knowing", "knew", "known", "think", "thinking", "thought",
    "say", "saying", "said", "tell", "telling", "told",
    "find", "finding", "found", "give", "giving", "gave", "given",
    "use", "using", "used", "work", "working", "worked",
    "call", "calling", "called", "try", "trying", "tried",
    "ask", "asking", "asked", "need", "needing", "needed",
    "feel", "feeling", "felt", "become", "becoming", "became",
    "leave", "leaving", "left", "put", "putting",
    # prepositions
    "in", "on", "at", "to", "for", "with", "from", "by", "about", "as",
    "into", "through", "during", "before", "after", "above", "below", "between",
    "under", "over", "against", "among", "of", "off", "up", "down", "out",
    # conjunctions
    "and", "but", "or", "nor", "so", "yet",
    "because", "since", "unless", "if", "while", "although",
    # adverbs
    "not", "no", "yes", "very", "too", "also", "just", "only", "even",
    "now", "then", "there", "here", "still", "already", "always", "never",
    "often", "sometimes", "usually", "again", "back", "well", "really",
    # adjectives
    "good", "new", "first", "last", "long", "great", "little", "own",
    "other", "old", "right", "big", "high", "different", "small", "large",
    "next", "early", "young", "important", "few", "public", "bad", "same",
    # numbers
    "one", "two", "three", "four", "five", "six", "seven", "eight", "nine", "ten",
    # other
    "all", "each", "every", "some", "any", "many", "much", "more", "most",
    "such", "like", "than", "way", "people", "time", "day", "year",
    "thing", "man", "woman", "child", "world", "life", "hand", "part",
    "place", "case", "point", "fact", "name", "number", "group", "problem",
    "company", "system", "program", "question", "government", "family",
})


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of classifying one text."""
    category: TextCategory
    character_count: int
    complexity_score: float
    has_formulas: bool
    has_technical_terms: bool

    @property
    def detail_description(self) -> str:
        details = [f"{self.character_count} characters"]
        if self.complexity_score > 0:
            details.append(f"{self.complexity_score * 100:.0f}% complex")
        if self.has_formulas:
            details.append("formulas detected")
        if self.has_technical_terms:
            details.append("technical terms")
        return ", ".join(details)


def is_common_word(word: str) -> bool:
    return word.strip(string.punctuation).lower() in COMMON_WORDS


def _is_capitalized(word: str) -> bool:
    return len(word) > 1 and word[0].isupper()


def _ends_sentence(word: str) -> bool:
    return word.rstrip("\"')]}").endswith((".", "!", "?"))


def _is_special_char(char: str) -> bool:
    return unicodedata.category(char)[0] in "PS" and char not in SENTENCE_PUNCTUATION


def complexity_score(text: str) -> float:
    """Weighted share of complexity signals per character, capped at 1.0."""
    if not text:
        return 0.0

    score = 0.0
    score += sum(1 for char in text if char in MATH_SYMBOLS) * MATH_WEIGHT
    score += len(NUMBER_PATTERN.findall(text)) * NUMBER_WEIGHT
    score += sum(1 for char in text if _is_special_char(char)) * SPECIAL_CHAR_WEIGHT

    # Capitals at the start of a sentence carry no signal
    capitalized = 0
    sentence_start = True
    for word in text.split():
        if _is_capitalized(word) and not sentence_start:
            capitalized += 1
        sentence_start = _ends_sentence(word)
    score += capitalized * CAPITALIZED_WEIGHT

    score += sum(1 for char in text if char in BRACKETS) * BRACKET_WEIGHT
    return min(score / len(text), 1.0)


def has_formulas(text: str) -> bool:
    return any(indicator in text for indicator in FORMULA_INDICATORS)


def has_technical_terms(text: str) -> bool:
    run = 0
    for word in text.split():
        if _is_capitalized(word) and not is_common_word(word):
            run += 1
            if run >= 2:
                return True
        else:
            run = 0

    if len(ACRONYM_PATTERN.findall(text)) >= 2:
        return True

    lowered = text.lower()
    return any(affix in lowered for affix in TECHNICAL_AFFIXES)


class TextClassifier:
    """Resolves text size and complexity into a TextCategory."""

    def __init__(
        self,
        short_threshold: int = SHORT_TEXT_THRESHOLD,
        medium_threshold: int = MEDIUM_TEXT_THRESHOLD,
        low_complexity: float = LOW_COMPLEXITY_THRESHOLD,
        high_complexity: float = HIGH_COMPLEXITY_THRESHOLD,
    ):
        self.short_threshold = short_threshold
        self.medium_threshold = medium_threshold
        self.low_complexity = low_complexity
        self.high_complexity = high_complexity

    def base_category(self, text: str) -> TextCategory:
        """Category from character count alone."""
        count = len(text)
        if count < self.short_threshold:
            return TextCategory.SHORT
        if count < self.medium_threshold:
            return TextCategory.MEDIUM
        return TextCategory.LONG

    def classify(self, text: str) -> ClassificationResult:
        """Analyze text and return the recommended category with details."""
        count = len(text)
        score = complexity_score(text)
        category = self.base_category(text)

        if score >= self.high_complexity:
            category = category.bumped()
        elif score >= self.low_complexity:
            # Moderate complexity only lifts short texts that are not tiny
            if category is TextCategory.SHORT and count > self.short_threshold / 2:
                category = TextCategory.MEDIUM

        return ClassificationResult(
            category=category,
            character_count=count,
            complexity_score=score,
            has_formulas=has_formulas(text),
            has_technical_terms=has_technical_terms(text),
        )


default_classifier = TextClassifier()


def classify(text: str) -> ClassificationResult:
    return default_classifier.classify(text)
