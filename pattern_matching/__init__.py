"""
Pattern Matching Module

Pluggable matching strategies that decouple "does this text match, and
what does it yield" from the fingerprint machinery:
- Regular expressions (capture groups emitted as capture_<n>)
- Exact strings
- Fuzzy similarity based on Levenshtein distance
- Any user-defined PatternMatcher subclass

Quick Start:
    from pattern_matching import FuzzyPatternMatcher, get_global_registry

    registry = get_global_registry()
    registry.register("apache-fuzzy", FuzzyPatternMatcher("apache", "Apache", 0.8))

    result = registry.lookup("apache-fuzzy").matches("apach")
"""

# Base classes
from .base import (
    PatternMatchResult,
    PatternMatcher
)

# Built-in matchers
from .matchers import (
    RegexPatternMatcher,
    StringPatternMatcher,
    FuzzyPatternMatcher
)
from .similarity import calculate_similarity, levenshtein_distance

# Registry
from .registry import (
    PatternMatcherRegistry,
    get_global_registry,
    reset_global_registry
)

from .plugin_fingerprint import PluginFingerprint

__all__ = [
    # Base classes
    "PatternMatchResult",
    "PatternMatcher",

    # Built-in matchers
    "RegexPatternMatcher",
    "StringPatternMatcher",
    "FuzzyPatternMatcher",
    "calculate_similarity",
    "levenshtein_distance",

    # Registry
    "PatternMatcherRegistry",
    "get_global_registry",
    "reset_global_registry",

    # Fingerprints
    "PluginFingerprint",
]
