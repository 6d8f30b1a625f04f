"""
Fingerprint data model

A fingerprint is a compiled pattern with a description, parameter rules
that name its capture groups, and verification examples. A database is an
ordered list of fingerprints where declaration order is match precedence.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple
import re

from .encoding import decode_base64_text
from .exceptions import PatternCompileError
from .params import ParameterRule
from logger import get_logger

logger = get_logger(__name__)


@dataclass
class Example:
    """A sample input a fingerprint is expected to match"""
    value: str
    is_base64: bool = False
    expected_parameters: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def base64(cls, value: str) -> "Example":
        """Create a base64-encoded example"""
        return cls(value=value, is_base64=True)

    def add_expected(self, name: str, value: str):
        """Add an expected parameter value"""
        self.expected_parameters[name] = value

    def decoded_value(self) -> str:
        """Text to match, base64-decoded when flagged"""
        if self.is_base64:
            return decode_base64_text(self.value)
        return self.value


class Fingerprint:
    """
    A single classification rule

    Construction compiles the pattern; an invalid pattern raises
    PatternCompileError.

    Example:
        fp = Fingerprint(r"^Apache/(\\d+\\.\\d+)", "Apache HTTP Server")
        fp.add_parameter_rule(ParameterRule(1, "service.version"))

        fp.evaluate("Apache/2.4")  # {"service.version": "2.4"}
    """

    def __init__(self, pattern: str, description: str = "", flags: int = 0):
        try:
            self.compiled_pattern = re.compile(pattern, flags)
        except re.error as e:
            raise PatternCompileError(pattern, e)

        self.pattern = pattern
        self.flags = flags
        self.description = description
        self.parameter_rules: List[ParameterRule] = []
        self.examples: List[Example] = []

    def __repr__(self):
        return f"Fingerprint(pattern={self.pattern!r}, description={self.description!r})"

    def add_parameter_rule(self, rule: ParameterRule):
        self.parameter_rules.append(rule)

    def add_example(self, example: Example):
        self.examples.append(example)

    def evaluate(self, text: str) -> Optional[Dict[str, str]]:
        """
        Match text against this fingerprint

        Rules are applied in declaration order. A rule whose capture group
        does not exist or did not participate in the match is skipped;
        fingerprint authors write rules that are optional across pattern
        variants.

        Args:
            text: Input text

        Returns:
            Extracted parameters, or None if the pattern does not match
        """
        match = self.compiled_pattern.search(text)
        if match is None:
            return None

        results: Dict[str, str] = {}
        group_count = self.compiled_pattern.groups
        for rule in self.parameter_rules:
            if rule.position > group_count:
                continue
            captured = match.group(rule.position)
            if captured is not None:
                results[rule.name] = captured

        return results

    def clone(self) -> "Fingerprint":
        """Return an independent copy"""
        copy = Fingerprint.__new__(Fingerprint)
        copy.compiled_pattern = self.compiled_pattern
        copy.pattern = self.pattern
        copy.flags = self.flags
        copy.description = self.description
        copy.parameter_rules = list(self.parameter_rules)
        copy.examples = [
            Example(e.value, e.is_base64, dict(e.expected_parameters))
            for e in self.examples
        ]
        return copy


class FingerprintDatabase:
    """
    Ordered collection of fingerprints

    Matching is a linear scan in declaration order. Once loaded, a database
    is treated as read-only and can be shared between threads.
    """

    def __init__(self, fingerprints: Optional[List[Fingerprint]] = None):
        self.fingerprints: List[Fingerprint] = list(fingerprints or [])

    def __len__(self) -> int:
        return len(self.fingerprints)

    def __iter__(self) -> Iterator[Fingerprint]:
        return iter(self.fingerprints)

    def add(self, fingerprint: Fingerprint):
        """Append a fingerprint"""
        self.fingerprints.append(fingerprint)

    def find_all_matches(self, text: str) -> List[Tuple[Fingerprint, Dict[str, str]]]:
        """Return every matching fingerprint with its parameters, in declaration order"""
        matches = []
        for fingerprint in self.fingerprints:
            parameters = fingerprint.evaluate(text)
            if parameters is not None:
                matches.append((fingerprint, parameters))

        logger.debug(f"{len(matches)} of {len(self.fingerprints)} fingerprints matched")
        return matches

    def find_best_match(self, text: str) -> Optional[Tuple[Fingerprint, Dict[str, str]]]:
        """Return the first matching fingerprint, if any"""
        matches = self.find_all_matches(text)
        return matches[0] if matches else None
