"""
Pattern Matcher Registry

Named lookup of pattern matcher plugins so that callers can pick a
matching strategy (regex, exact, fuzzy or their own) at runtime.
"""
from typing import Dict, Optional, Set

from .base import PatternMatcher
from logger import get_logger

logger = get_logger(__name__)


class PatternMatcherRegistry:
    """
    Registry of pattern matchers keyed by name

    Example:
        registry = PatternMatcherRegistry()
        registry.register("apache", RegexPatternMatcher(r"^Apache/(\\S+)", "Apache"))
        registry.register("nginx", StringPatternMatcher("nginx", "nginx"))

        matcher = registry.lookup("apache")
        result = matcher.matches("Apache/2.4.41")
    """

    def __init__(self):
        self._matchers: Dict[str, PatternMatcher] = {}

    def __len__(self) -> int:
        return len(self._matchers)

    def __contains__(self, name: str) -> bool:
        return name in self._matchers

    def register(self, name: str, matcher: PatternMatcher):
        """
        Register a pattern matcher under a name

        Args:
            name: Lookup key
            matcher: PatternMatcher instance; replaces any existing entry
        """
        if not isinstance(matcher, PatternMatcher):
            raise TypeError(f"Expected a PatternMatcher, got {type(matcher).__name__}")

        if name in self._matchers:
            logger.warning(f"Overwriting existing pattern matcher: {name}")

        self._matchers[name] = matcher
        logger.info(f"Registered pattern matcher: {name}")

    def lookup(self, name: str) -> Optional[PatternMatcher]:
        """Get a matcher by name"""
        return self._matchers.get(name)

    def list_names(self) -> Set[str]:
        """Names of all registered matchers"""
        return set(self._matchers)

    def unregister(self, name: str) -> bool:
        """
        Remove a matcher

        Returns:
            True if an entry existed and was removed
        """
        if name not in self._matchers:
            logger.warning(f"Cannot unregister non-existent pattern matcher: {name}")
            return False

        del self._matchers[name]
        logger.info(f"Unregistered pattern matcher: {name}")
        return True


# Global registry instance
_global_registry: Optional[PatternMatcherRegistry] = None


def get_global_registry() -> PatternMatcherRegistry:
    """Get the global pattern matcher registry (singleton)"""
    global _global_registry

    if _global_registry is None:
        _global_registry = PatternMatcherRegistry()
        logger.info("Created global pattern matcher registry")

    return _global_registry


def reset_global_registry():
    """Reset the global registry (mainly for testing)"""
    global _global_registry
    _global_registry = None
    logger.info("Reset global pattern matcher registry")
