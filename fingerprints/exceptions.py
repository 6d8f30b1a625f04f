"""
Recog Exception Hierarchy

Structured error types surfaced by fingerprint loading and matching.
Extraction edge cases (missing capture groups, unresolved placeholders)
are not errors and never raise.
"""
from typing import Optional


class RecogError(Exception):
    """
    Base class for all Recog errors

    Attributes:
        message: Human-readable error message
        original_error: Original exception if wrapped
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self):
        return self.message


class PatternCompileError(RecogError, ValueError):
    """
    A fingerprint pattern could not be compiled

    Fatal to the construction of that fingerprint; a fingerprint with a
    broken pattern never exists in a "never matches" state.
    """

    def __init__(self, pattern: str, original_error: Optional[Exception] = None):
        detail = f": {original_error}" if original_error else ""
        super().__init__(f"Invalid pattern '{pattern}'{detail}", original_error)
        self.pattern = pattern


class DecodeError(RecogError):
    """Input was not valid base64"""


class TextEncodingError(RecogError):
    """Decoded bytes are not valid UTF-8 text"""


class InvalidFingerprintDataError(RecogError):
    """
    Fingerprint database content is malformed

    Examples: missing pattern attribute, non-integer parameter position,
    example with neither a value nor a filename
    """


class XmlParseError(RecogError):
    """The fingerprint database is not well-formed XML"""


class MatchError(RecogError):
    """A pattern matcher plugin failed while evaluating text"""
