"""
Built-in pattern matchers: regex, exact string and fuzzy similarity
"""
from typing import Dict, Optional
import re

from .base import PatternMatcher, PatternMatchResult
from .similarity import calculate_similarity
from config import settings
from fingerprints.exceptions import PatternCompileError
from metrics import record_pattern_matcher_call

MATCHED_STRING_PARAM = "matched_string"
SIMILARITY_PARAM = "similarity"


class RegexPatternMatcher(PatternMatcher):
    """
    Regular expression matcher

    Each participating capture group i is emitted as "capture_<i>".
    """

    def __init__(self, pattern: str, description: str = "", flags: int = 0):
        try:
            self._compiled = re.compile(pattern, flags)
        except re.error as e:
            raise PatternCompileError(pattern, e)
        self.pattern = pattern
        self.flags = flags
        self._description = description

    def matches(self, text: str) -> PatternMatchResult:
        match = self._compiled.search(text)
        if match is None:
            record_pattern_matcher_call(self.name, False)
            return PatternMatchResult.failure()

        parameters: Dict[str, str] = {}
        for index, captured in enumerate(match.groups(), start=1):
            if captured is not None:
                parameters[f"capture_{index}"] = captured

        record_pattern_matcher_call(self.name, True)
        return PatternMatchResult.success(parameters)

    def description(self) -> str:
        return self._description

    def duplicate(self) -> "RegexPatternMatcher":
        return RegexPatternMatcher(self.pattern, self._description, self.flags)


class StringPatternMatcher(PatternMatcher):
    """Exact string matcher"""

    def __init__(self, pattern: str, description: str = ""):
        self.pattern = pattern
        self._description = description

    def matches(self, text: str) -> PatternMatchResult:
        matched = text == self.pattern
        record_pattern_matcher_call(self.name, matched)
        if not matched:
            return PatternMatchResult.failure()
        return PatternMatchResult.success({MATCHED_STRING_PARAM: text})

    def description(self) -> str:
        return self._description

    def duplicate(self) -> "StringPatternMatcher":
        return StringPatternMatcher(self.pattern, self._description)


class FuzzyPatternMatcher(PatternMatcher):
    """
    Similarity matcher built on Levenshtein distance

    Matches when similarity to the reference string is at least the
    threshold (inclusive). Confidence is the similarity itself.

    Example:
        matcher = FuzzyPatternMatcher("apache", "Fuzzy Apache", threshold=0.8)
        matcher.matches("apach").confidence  # 0.833...
    """

    def __init__(self, pattern: str, description: str = "", threshold: Optional[float] = None):
        if threshold is None:
            threshold = settings.default_fuzzy_threshold
        self.pattern = pattern
        self.threshold = min(1.0, max(0.0, threshold))
        self._description = description

    def similarity(self, text: str) -> float:
        return calculate_similarity(self.pattern, text)

    def matches(self, text: str) -> PatternMatchResult:
        similarity = self.similarity(text)
        matched = similarity >= self.threshold
        record_pattern_matcher_call(self.name, matched)
        if not matched:
            return PatternMatchResult.failure()

        parameters = {
            MATCHED_STRING_PARAM: text,
            SIMILARITY_PARAM: f"{similarity:.3f}",
        }
        return PatternMatchResult.with_confidence(parameters, similarity)

    def description(self) -> str:
        return self._description

    def duplicate(self) -> "FuzzyPatternMatcher":
        return FuzzyPatternMatcher(self.pattern, self._description, self.threshold)
