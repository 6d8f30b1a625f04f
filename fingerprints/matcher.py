"""
Matcher engine for running text against a fingerprint database
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence
import json

from .encoding import decode_base64_text
from .fingerprint import Fingerprint, FingerprintDatabase
from .params import ParameterInterpolator
from config import settings
from logger import get_logger
from metrics import record_match, track_duration

logger = get_logger(__name__)


@dataclass
class MatchResult:
    """A fingerprint that matched an input, with its output parameters"""
    fingerprint: Fingerprint
    parameters: Dict[str, str] = field(default_factory=dict)
    confidence: float = 1.0

    @property
    def description(self) -> str:
        return self.fingerprint.description

    def to_dict(self) -> Dict[str, Any]:
        return {
            'description': self.fingerprint.description,
            'params': dict(self.parameters),
            'confidence': self.confidence,
        }

    def to_json(self) -> str:
        """Render as pretty-printed JSON with description and params"""
        return json.dumps(
            {'description': self.fingerprint.description, 'params': self.parameters},
            indent=2,
            ensure_ascii=False
        )


class Matcher:
    """
    Runs input text against every fingerprint of a database

    The database is never mutated, so a single Matcher can serve
    concurrent callers without locking.

    Example:
        matcher = Matcher(load_fingerprints_from_file("http_servers.xml"))

        results = matcher.match_text("Apache/2.4.41 (Ubuntu)")
        best = matcher.match_text_best("Apache/2.4.41 (Ubuntu)")
    """

    def __init__(self, database: Optional[FingerprintDatabase] = None):
        self._database = database if database is not None else FingerprintDatabase()
        self._interpolator = ParameterInterpolator()

    @property
    def database(self) -> FingerprintDatabase:
        return self._database

    @property
    def interpolator(self) -> ParameterInterpolator:
        """Interpolator applied to every result, exposed for configuration"""
        return self._interpolator

    def _match(self, text: str) -> List[MatchResult]:
        results = []
        for fingerprint, raw_parameters in self._database.find_all_matches(text):
            parameters = self._interpolator.process_output_parameters(raw_parameters)
            results.append(MatchResult(fingerprint.clone(), parameters, 1.0))
        return results

    @track_duration('text')
    def match_text(self, text: str) -> List[MatchResult]:
        """
        Match text against all fingerprints

        Args:
            text: Input text (banner, header, handshake...)

        Returns:
            All matches in fingerprint declaration order; empty when nothing matches
        """
        results = self._match(text)
        record_match('text', len(results))
        return results

    def match_text_best(self, text: str) -> Optional[MatchResult]:
        """Return the first match, if any"""
        results = self.match_text(text)
        return results[0] if results else None

    @track_duration('base64')
    def match_base64(self, text: str) -> List[MatchResult]:
        """
        Decode base64 input and match the resulting text

        Raises:
            DecodeError: input is not valid base64
            TextEncodingError: decoded bytes are not valid UTF-8
        """
        decoded = decode_base64_text(text)
        results = self._match(decoded)
        record_match('base64', len(results))
        return results

    @track_duration('batch')
    def match_batch(self, texts: Sequence[str]) -> List[List[MatchResult]]:
        """
        Match several inputs independently

        Returns:
            One result list per input, in input order
        """
        warn_threshold = settings.batch_warn_threshold
        if warn_threshold and len(texts) > warn_threshold:
            logger.warning(
                f"Batch of {len(texts)} inputs exceeds batch_warn_threshold {warn_threshold}"
            )

        batch_results = []
        for text in texts:
            results = self._match(text)
            record_match('batch', len(results))
            batch_results.append(results)
        return batch_results
