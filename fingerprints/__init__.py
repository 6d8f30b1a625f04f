"""
Fingerprint Matching Module

Classifies banners, headers and protocol handshakes against a database of
named pattern rules and extracts structured parameters from each match.

Quick Start:
    from fingerprints import Matcher, load_fingerprints_from_file

    matcher = Matcher(load_fingerprints_from_file("http_servers.xml"))

    for result in matcher.match_text("Server: Apache/2.4.41 (Ubuntu)"):
        print(result.description, result.parameters)
"""

from .exceptions import (
    RecogError,
    PatternCompileError,
    DecodeError,
    TextEncodingError,
    InvalidFingerprintDataError,
    XmlParseError,
    MatchError
)

from .params import ParameterRule, ParameterInterpolator
from .fingerprint import Example, Fingerprint, FingerprintDatabase
from .matcher import MatchResult, Matcher

# Loading and verification
from .loader import (
    load_fingerprints_from_xml,
    load_fingerprints_from_file,
    save_fingerprints_to_xml,
    save_fingerprints_to_file
)
from .async_loader import (
    load_fingerprints_from_xml_async,
    load_fingerprints_from_file_async,
    load_multiple_databases_async,
    merge_databases
)
from .verifier import VerificationReport, verify_database

__all__ = [
    # Errors
    "RecogError",
    "PatternCompileError",
    "DecodeError",
    "TextEncodingError",
    "InvalidFingerprintDataError",
    "XmlParseError",
    "MatchError",

    # Data model
    "ParameterRule",
    "ParameterInterpolator",
    "Example",
    "Fingerprint",
    "FingerprintDatabase",

    # Matching
    "MatchResult",
    "Matcher",

    # Loading
    "load_fingerprints_from_xml",
    "load_fingerprints_from_file",
    "save_fingerprints_to_xml",
    "save_fingerprints_to_file",
    "load_fingerprints_from_xml_async",
    "load_fingerprints_from_file_async",
    "load_multiple_databases_async",
    "merge_databases",

    # Verification
    "VerificationReport",
    "verify_database",
]
__version__ = '1.0.0'
