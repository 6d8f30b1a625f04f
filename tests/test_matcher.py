"""
Tests for the Matcher engine
"""
import base64
import json
from concurrent.futures import ThreadPoolExecutor

import pytest

from fingerprints.exceptions import DecodeError, TextEncodingError
from fingerprints.fingerprint import Fingerprint, FingerprintDatabase
from fingerprints.matcher import Matcher, MatchResult
from fingerprints.params import ParameterRule


@pytest.fixture
def apache_database():
    database = FingerprintDatabase()

    apache = Fingerprint(r"Apache/(\d+\.\d+(?:\.\d+)?)", "Apache HTTP Server")
    apache.add_parameter_rule(ParameterRule(1, "version"))
    database.add(apache)

    nginx = Fingerprint(r"nginx/(\S+)", "nginx")
    nginx.add_parameter_rule(ParameterRule(1, "service.version"))
    nginx.add_parameter_rule(ParameterRule(0, "_tmp.banner"))
    database.add(nginx)

    generic = Fingerprint(r"/\d", "Generic versioned server")
    database.add(generic)

    return database


class TestMatchText:
    """Tests for Matcher.match_text"""

    def test_basic_match(self, apache_database):
        matcher = Matcher(apache_database)

        results = matcher.match_text("Server: Apache/2.4.41")

        assert len(results) == 2
        assert results[0].description == "Apache HTTP Server"
        assert results[0].parameters == {"version": "2.4.41"}
        assert results[0].confidence == 1.0
        assert results[1].description == "Generic versioned server"

    def test_no_match(self):
        database = FingerprintDatabase([Fingerprint(r"^Apache/", "Apache")])
        matcher = Matcher(database)

        assert matcher.match_text("nginx/1.20.0") == []

    def test_temporary_parameters_removed(self, apache_database):
        matcher = Matcher(apache_database)

        result = matcher.match_text_best("nginx/1.20.0")

        assert result.description == "nginx"
        assert result.parameters == {"service.version": "1.20.0"}

    def test_interpolator_configuration_applies(self, apache_database):
        matcher = Matcher(apache_database)
        matcher.interpolator.mark_temporary("version")

        result = matcher.match_text_best("Apache/2.4")

        assert result.parameters == {}

    def test_results_carry_fingerprint_copies(self, apache_database):
        matcher = Matcher(apache_database)

        result = matcher.match_text_best("Apache/2.4")
        result.fingerprint.add_parameter_rule(ParameterRule(0, "extra"))

        assert len(apache_database.fingerprints[0].parameter_rules) == 1
        assert result.fingerprint is not apache_database.fingerprints[0]

    def test_deterministic(self, apache_database):
        matcher = Matcher(apache_database)

        first = [r.to_dict() for r in matcher.match_text("Apache/2.4.41 nginx/1.2")]
        second = [r.to_dict() for r in matcher.match_text("Apache/2.4.41 nginx/1.2")]

        assert first == second

    def test_default_matcher_is_empty(self):
        matcher = Matcher()
        assert len(matcher.database) == 0
        assert matcher.match_text("Apache/2.4") == []

    def test_match_text_best_none(self, apache_database):
        matcher = Matcher(apache_database)
        assert matcher.match_text_best("no version here") is None

    def test_database_not_mutated(self, apache_database):
        matcher = Matcher(apache_database)
        before = [(fp.pattern, len(fp.parameter_rules)) for fp in apache_database]

        matcher.match_text("nginx/1.20.0 Apache/2.4")

        assert [(fp.pattern, len(fp.parameter_rules)) for fp in apache_database] == before


class TestMatchBase64:
    """Tests for Matcher.match_base64"""

    def test_base64_match(self):
        database = FingerprintDatabase([Fingerprint("test", "Test pattern")])
        matcher = Matcher(database)

        results = matcher.match_base64("dGVzdA==")  # "test"

        assert len(results) == 1
        assert results[0].description == "Test pattern"

    def test_invalid_base64(self):
        matcher = Matcher(FingerprintDatabase([Fingerprint("test", "Test")]))

        with pytest.raises(DecodeError):
            matcher.match_base64("%%% not base64 %%%")

    def test_invalid_utf8(self):
        matcher = Matcher(FingerprintDatabase([Fingerprint("test", "Test")]))
        encoded = base64.b64encode(b"\xff\xfe\xfd").decode()

        with pytest.raises(TextEncodingError):
            matcher.match_base64(encoded)


class TestMatchBatch:
    """Tests for Matcher.match_batch"""

    def test_batch_preserves_input_order(self, apache_database):
        matcher = Matcher(apache_database)

        results = matcher.match_batch(["nginx/1.20.0", "nothing", "Apache/2.4"])

        assert len(results) == 3
        assert results[0][0].description == "nginx"
        assert results[1] == []
        assert results[2][0].description == "Apache HTTP Server"

    def test_empty_batch(self, apache_database):
        assert Matcher(apache_database).match_batch([]) == []

    def test_concurrent_matching(self, apache_database):
        matcher = Matcher(apache_database)
        inputs = ["Apache/2.4.41", "nginx/1.20.0"] * 50

        with ThreadPoolExecutor(max_workers=8) as executor:
            outputs = list(executor.map(matcher.match_text, inputs))

        for text, results in zip(inputs, outputs):
            assert results[0].to_dict() == matcher.match_text(text)[0].to_dict()


class TestMatchResult:
    """Tests for MatchResult serialisation"""

    def test_to_json(self):
        result = MatchResult(Fingerprint("x", "Example"), {"version": "1.0"})

        data = json.loads(result.to_json())

        assert data == {"description": "Example", "params": {"version": "1.0"}}

    def test_to_dict(self):
        result = MatchResult(Fingerprint("x", "Example"), {"a": "b"}, 1.0)
        assert result.to_dict() == {
            "description": "Example",
            "params": {"a": "b"},
            "confidence": 1.0,
        }
