"""
Tests for the fingerprint data model and database
"""
import base64
import re

import pytest

from fingerprints.exceptions import DecodeError, PatternCompileError
from fingerprints.fingerprint import Example, Fingerprint, FingerprintDatabase
from fingerprints.params import ParameterRule


def make_fingerprint(pattern, description, *rules):
    fingerprint = Fingerprint(pattern, description)
    for position, name in rules:
        fingerprint.add_parameter_rule(ParameterRule(position, name))
    return fingerprint


class TestFingerprint:
    """Tests for Fingerprint construction and evaluation"""

    def test_invalid_pattern_fails_construction(self):
        with pytest.raises(PatternCompileError) as exc_info:
            Fingerprint("Apache/(\\d+", "Broken")

        assert exc_info.value.pattern == "Apache/(\\d+"
        assert isinstance(exc_info.value, ValueError)

    def test_empty_description_allowed(self):
        fingerprint = Fingerprint("^test$")
        assert fingerprint.description == ""

    def test_capture_extraction(self):
        fingerprint = make_fingerprint(r"^Apache/(\d+\.\d+)", "Apache", (1, "version"))
        # Pattern only captures major.minor
        assert fingerprint.evaluate("Apache/2.4.41") == {"version": "2.4"}

    def test_capture_extraction_full_version(self):
        fingerprint = make_fingerprint(r"^Apache/(\d+(?:\.\d+)*)", "Apache", (1, "version"))
        assert fingerprint.evaluate("Apache/2.4.41") == {"version": "2.4.41"}

    def test_no_match_returns_none(self):
        fingerprint = make_fingerprint(r"^Apache/", "Apache")
        assert fingerprint.evaluate("nginx/1.20.0") is None

    def test_match_without_rules_returns_empty_dict(self):
        fingerprint = make_fingerprint(r"Apache", "Apache")
        assert fingerprint.evaluate("Server: Apache") == {}

    def test_search_is_unanchored(self):
        fingerprint = make_fingerprint(r"Apache/(\S+)", "Apache", (1, "version"))
        assert fingerprint.evaluate("Server: Apache/2.4.41 (Ubuntu)") == {"version": "2.4.41"}

    def test_position_zero_is_whole_match(self):
        fingerprint = make_fingerprint(r"Apache/\S+", "Apache", (0, "banner"))
        assert fingerprint.evaluate("Server: Apache/2.4.41") == {"banner": "Apache/2.4.41"}

    def test_out_of_range_position_is_skipped(self):
        fingerprint = make_fingerprint(
            r"^Apache/(\d+)", "Apache", (1, "major"), (5, "missing")
        )
        assert fingerprint.evaluate("Apache/2") == {"major": "2"}

    def test_non_participating_group_is_skipped(self):
        fingerprint = make_fingerprint(
            r"^(IIS)(?:/(\d+))?", "IIS", (1, "product"), (2, "version")
        )
        assert fingerprint.evaluate("IIS") == {"product": "IIS"}

    def test_rules_applied_in_declaration_order(self):
        fingerprint = make_fingerprint(
            r"^(\w+)/(\w+)", "Two captures", (1, "name"), (2, "name")
        )
        # Later rule wins for the same name
        assert fingerprint.evaluate("a/b") == {"name": "b"}

    def test_flags_are_applied(self):
        fingerprint = Fingerprint(r"^apache", "Apache", flags=re.IGNORECASE)
        assert fingerprint.evaluate("APACHE") == {}

    def test_clone_is_independent(self):
        fingerprint = make_fingerprint(r"^x(\d)", "X", (1, "digit"))
        fingerprint.add_example(Example("x1", expected_parameters={"digit": "1"}))

        copy = fingerprint.clone()
        copy.add_parameter_rule(ParameterRule(0, "whole"))
        copy.examples[0].add_expected("other", "y")

        assert len(fingerprint.parameter_rules) == 1
        assert fingerprint.examples[0].expected_parameters == {"digit": "1"}
        assert copy.description == fingerprint.description
        assert copy.evaluate("x1") == {"digit": "1", "whole": "x1"}


class TestExample:
    """Tests for Example"""

    def test_plain_value(self):
        example = Example("Apache/2.4.41")
        assert example.decoded_value() == "Apache/2.4.41"
        assert example.is_base64 is False

    def test_base64_value(self):
        encoded = base64.b64encode(b"Apache/2.4.41").decode()
        example = Example.base64(encoded)
        assert example.is_base64 is True
        assert example.decoded_value() == "Apache/2.4.41"

    def test_invalid_base64_value(self):
        example = Example.base64("not base64!!")
        with pytest.raises(DecodeError):
            example.decoded_value()

    def test_add_expected(self):
        example = Example("Apache/2.4.41")
        example.add_expected("service.version", "2.4.41")
        assert example.expected_parameters == {"service.version": "2.4.41"}


class TestFingerprintDatabase:
    """Tests for FingerprintDatabase queries"""

    def test_order_preserved(self):
        database = FingerprintDatabase()
        database.add(make_fingerprint(r"X", "A"))
        database.add(make_fingerprint(r"Y", "B"))
        database.add(make_fingerprint(r"X", "C"))

        matches = database.find_all_matches("X")

        assert [fp.description for fp, _ in matches] == ["A", "C"]

    def test_find_best_match_is_first(self):
        database = FingerprintDatabase()
        database.add(make_fingerprint(r"Apache", "Generic"))
        database.add(make_fingerprint(r"Apache/(\S+)", "Versioned", (1, "version")))

        fingerprint, params = database.find_best_match("Apache/2.4")

        assert fingerprint.description == "Generic"
        assert params == {}

    def test_find_best_match_none(self):
        database = FingerprintDatabase([make_fingerprint(r"^Apache/", "Apache")])
        assert database.find_best_match("nginx/1.20.0") is None
        assert database.find_all_matches("nginx/1.20.0") == []

    def test_duplicate_descriptions_allowed(self):
        database = FingerprintDatabase()
        database.add(make_fingerprint(r"a", "Same"))
        database.add(make_fingerprint(r"b", "Same"))

        assert len(database) == 2
        assert len(database.find_all_matches("ab")) == 2

    def test_iteration(self):
        fingerprints = [make_fingerprint(r"a", "A"), make_fingerprint(r"b", "B")]
        database = FingerprintDatabase(fingerprints)
        assert list(database) == fingerprints

    def test_empty_database(self):
        assert FingerprintDatabase().find_all_matches("anything") == []
