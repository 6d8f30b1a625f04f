"""
Base classes and interfaces for pattern matching plugins
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict


@dataclass
class PatternMatchResult:
    """Outcome of a single pattern matcher evaluation"""
    matched: bool
    parameters: Dict[str, str] = field(default_factory=dict)
    confidence: float = 0.0

    @classmethod
    def success(cls, parameters: Dict[str, str]) -> "PatternMatchResult":
        """Exact or regex match, confidence 1.0"""
        return cls(matched=True, parameters=parameters, confidence=1.0)

    @classmethod
    def failure(cls) -> "PatternMatchResult":
        return cls(matched=False, parameters={}, confidence=0.0)

    @classmethod
    def with_confidence(cls, parameters: Dict[str, str], confidence: float) -> "PatternMatchResult":
        """Similarity-based match; confidence is clamped to [0, 1]"""
        return cls(
            matched=True,
            parameters=parameters,
            confidence=min(1.0, max(0.0, confidence))
        )

    def to_dict(self) -> Dict[str, object]:
        return {
            'matched': self.matched,
            'parameters': dict(self.parameters),
            'confidence': self.confidence,
        }


class PatternMatcher(ABC):
    """
    Abstract base class for pattern matching strategies

    Implementations hold immutable configuration fixed at construction, so
    a matcher can be shared between threads. Third-party matchers signal
    evaluation failures by raising MatchError.
    """

    @abstractmethod
    def matches(self, text: str) -> PatternMatchResult:
        """
        Evaluate text against this matcher

        Args:
            text: Input text

        Returns:
            Pattern match result
        """
        pass

    @abstractmethod
    def description(self) -> str:
        """Human-readable description of this matcher"""
        pass

    @abstractmethod
    def duplicate(self) -> "PatternMatcher":
        """Return a new matcher with identical configuration"""
        pass

    @property
    def name(self) -> str:
        """Matcher type name used for metrics labels"""
        return type(self).__name__

    def __repr__(self):
        return f"{self.name}({self.description()!r})"
