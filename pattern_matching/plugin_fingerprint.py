"""
Fingerprints backed by an arbitrary pattern matcher
"""
from typing import List, Optional

from .base import PatternMatcher, PatternMatchResult
from .matchers import RegexPatternMatcher
from fingerprints.fingerprint import Example
from fingerprints.params import ParameterRule


class PluginFingerprint:
    """
    A fingerprint whose matching strategy is a PatternMatcher plugin

    Unlike Fingerprint, the matcher decides what parameters it yields;
    parameter rules are carried as metadata for loaders and verifiers.
    """

    def __init__(
        self,
        id: str,
        description: str,
        matcher: PatternMatcher,
        examples: Optional[List[Example]] = None,
        parameter_rules: Optional[List[ParameterRule]] = None
    ):
        self.id = id
        self.description = description
        self.matcher = matcher
        self.examples = list(examples or [])
        self.parameter_rules = list(parameter_rules or [])

    @classmethod
    def with_regex(
        cls,
        id: str,
        pattern: str,
        description: str,
        examples: Optional[List[Example]] = None,
        parameter_rules: Optional[List[ParameterRule]] = None
    ) -> "PluginFingerprint":
        """Create a fingerprint backed by a RegexPatternMatcher"""
        matcher = RegexPatternMatcher(pattern, description)
        return cls(id, description, matcher, examples, parameter_rules)

    def test_match(self, text: str) -> PatternMatchResult:
        """Evaluate text with this fingerprint's matcher"""
        return self.matcher.matches(text)

    def validate_examples(self) -> List[bool]:
        """
        Check every example against the matcher

        Returns:
            One flag per example, in example order

        Raises:
            DecodeError, TextEncodingError: a base64 example could not be decoded
        """
        return [self.test_match(example.decoded_value()).matched for example in self.examples]

    def duplicate(self) -> "PluginFingerprint":
        return PluginFingerprint(
            self.id,
            self.description,
            self.matcher.duplicate(),
            [Example(e.value, e.is_base64, dict(e.expected_parameters)) for e in self.examples],
            list(self.parameter_rules)
        )
