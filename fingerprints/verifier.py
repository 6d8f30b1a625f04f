"""
Verification of fingerprint examples

Every example declared on a fingerprint is run through a Matcher over the
whole database. An example passes when its own fingerprint is among the
matches; expected parameters are compared for matched examples.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .exceptions import DecodeError, TextEncodingError
from .fingerprint import FingerprintDatabase
from .matcher import Matcher
from logger import get_logger

logger = get_logger(__name__)


@dataclass
class VerificationFailure:
    """An example that did not match its fingerprint"""
    description: str
    input: str
    reason: str = "no match"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'description': self.description,
            'input': self.input,
            'reason': self.reason,
        }


@dataclass
class ParameterMismatch:
    """An expected example parameter that was not extracted as declared"""
    description: str
    input: str
    name: str
    expected: str
    actual: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'description': self.description,
            'input': self.input,
            'name': self.name,
            'expected': self.expected,
            'actual': self.actual,
        }


@dataclass
class VerificationReport:
    """Summary of an example verification run"""
    total_examples: int = 0
    matched_examples: int = 0
    failures: List[VerificationFailure] = field(default_factory=list)
    parameter_mismatches: List[ParameterMismatch] = field(default_factory=list)

    @property
    def failed_examples(self) -> int:
        return len(self.failures)

    @property
    def success_rate(self) -> float:
        if self.total_examples == 0:
            return 0.0
        return self.matched_examples / self.total_examples

    def to_dict(self, verbose: bool = False) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            'total_examples': self.total_examples,
            'matched_examples': self.matched_examples,
            'failed_examples': self.failed_examples,
            'parameter_mismatches': len(self.parameter_mismatches),
            'success_rate': self.success_rate,
        }
        if verbose:
            result['failures'] = [f.to_dict() for f in self.failures]
            result['mismatches'] = [m.to_dict() for m in self.parameter_mismatches]
        return result


def verify_database(database: FingerprintDatabase) -> VerificationReport:
    """
    Check every fingerprint example against the database

    Args:
        database: Database whose examples are verified

    Returns:
        Verification report
    """
    matcher = Matcher(database)
    report = VerificationReport()

    for fingerprint in database:
        for example in fingerprint.examples:
            report.total_examples += 1

            try:
                text = example.decoded_value()
            except (DecodeError, TextEncodingError) as e:
                report.failures.append(
                    VerificationFailure(fingerprint.description, example.value, str(e))
                )
                continue

            # Identify the owning fingerprint by pattern, flags and description;
            # results carry clones, not the database instances
            own = [
                r for r in matcher.match_text(text)
                if r.fingerprint.pattern == fingerprint.pattern
                and r.fingerprint.flags == fingerprint.flags
                and r.fingerprint.description == fingerprint.description
            ]
            if not own:
                report.failures.append(VerificationFailure(fingerprint.description, text))
                continue

            report.matched_examples += 1
            parameters = own[0].parameters
            for name, expected in example.expected_parameters.items():
                actual = parameters.get(name)
                if actual != expected:
                    report.parameter_mismatches.append(
                        ParameterMismatch(fingerprint.description, text, name, expected, actual)
                    )

    logger.info(
        f"Verified {report.total_examples} examples: "
        f"{report.matched_examples} matched, {report.failed_examples} failed"
    )
    return report
