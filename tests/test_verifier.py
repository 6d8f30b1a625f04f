"""
Tests for fingerprint example verification
"""
import re

from fingerprints.fingerprint import Example, Fingerprint, FingerprintDatabase
from fingerprints.params import ParameterRule
from fingerprints.verifier import VerificationReport, verify_database


def build_database():
    database = FingerprintDatabase()

    apache = Fingerprint(r"^Apache/(\d+\.\d+(?:\.\d+)?)", "Apache HTTP Server")
    apache.add_parameter_rule(ParameterRule(1, "service.version"))
    good = Example("Apache/2.4.41")
    good.add_expected("service.version", "2.4.41")
    apache.add_example(good)
    wrong_param = Example("Apache/2.2")
    wrong_param.add_expected("service.version", "2.2.1")
    apache.add_example(wrong_param)
    database.add(apache)

    nginx = Fingerprint(r"^nginx/(\S+)", "nginx")
    nginx.add_example(Example.base64("bmdpbngvMS4yMC4w"))  # nginx/1.20.0
    nginx.add_example(Example("Apache/2.4"))  # belongs elsewhere
    nginx.add_example(Example.base64("!!!"))
    database.add(nginx)

    return database


class TestVerifyDatabase:
    """Tests for verify_database"""

    def test_counts(self):
        report = verify_database(build_database())

        assert report.total_examples == 5
        assert report.matched_examples == 3
        assert report.failed_examples == 2

    def test_failures_recorded(self):
        report = verify_database(build_database())

        reasons = {(f.description, f.input): f.reason for f in report.failures}
        assert reasons[("nginx", "Apache/2.4")] == "no match"
        assert any(desc == "nginx" and inp == "!!!" for desc, inp in reasons)

    def test_parameter_mismatch(self):
        report = verify_database(build_database())

        assert len(report.parameter_mismatches) == 1
        mismatch = report.parameter_mismatches[0]
        assert mismatch.name == "service.version"
        assert mismatch.expected == "2.2.1"
        assert mismatch.actual == "2.2"

    def test_success_rate(self):
        report = verify_database(build_database())
        assert report.success_rate == 3 / 5

    def test_owner_distinguished_by_flags(self):
        case_sensitive = Fingerprint("^apache", "Apache")
        case_sensitive.add_example(Example("APACHE"))
        case_insensitive = Fingerprint("^apache", "Apache", flags=re.IGNORECASE)
        case_insensitive.add_example(Example("APACHE"))

        report = verify_database(FingerprintDatabase([case_sensitive, case_insensitive]))

        assert report.total_examples == 2
        assert report.matched_examples == 1
        assert [(f.description, f.input) for f in report.failures] == [("Apache", "APACHE")]

    def test_empty_database(self):
        report = verify_database(FingerprintDatabase())

        assert report.total_examples == 0
        assert report.success_rate == 0.0


class TestVerificationReport:
    """Tests for VerificationReport serialisation"""

    def test_to_dict(self):
        report = VerificationReport(total_examples=4, matched_examples=3)
        data = report.to_dict()

        assert data["total_examples"] == 4
        assert data["matched_examples"] == 3
        assert data["failed_examples"] == 0
        assert data["success_rate"] == 0.75
        assert "failures" not in data

    def test_to_dict_verbose(self):
        report = verify_database(build_database())
        data = report.to_dict(verbose=True)

        assert len(data["failures"]) == 2
        assert data["mismatches"][0]["expected"] == "2.2.1"
