"""
Unit tests for Query String Hash computation and verification.
"""

import hashlib

import pytest

from connect_auth.errors import AuthError, AuthErrorCode, QshInfo
from connect_auth.types import CONTEXT_QSH, ConnectJwt, QueryStringHashType
from connect_auth.validation.qsh import (
    SKIPPED_QSH,
    create_canonical_request,
    create_query_string_hash,
    verify_query_string_hash,
)

COMPUTED_QSH = "computed-hash"


def compute():
    return COMPUTED_QSH


class TestCanonicalRequest:
    """Test cases for request canonicalisation."""

    def test_method_path_and_sorted_query(self):
        """Test method is upper-cased and parameters are sorted."""
        result = create_canonical_request("get", "/rest/api/issue?b=2&a=1")

        assert result == "GET&/rest/api/issue&a=1&b=2"

    def test_jwt_parameter_excluded(self):
        """Test the jwt parameter does not take part in the hash."""
        result = create_canonical_request("GET", "/page?jwt=abc.def.ghi&lic=none")

        assert result == "GET&/page&lic=none"

    def test_repeated_parameters_sorted_and_joined(self):
        """Test repeated values are sorted and comma separated."""
        result = create_canonical_request("GET", "/search?tag=b&tag=a&tag=c")

        assert result == "GET&/search&tag=a,b,c"

    def test_values_percent_encoded(self):
        """Test keys and values use RFC 3986 encoding."""
        result = create_canonical_request("GET", "/search?q=a+b*c~&x%20y=1,2")

        assert result == "GET&/search&q=a%20b%2Ac~&x%20y=1%2C2"

    def test_path_relative_to_base_url(self):
        """Test the base URL path prefix is removed."""
        result = create_canonical_request(
            "POST",
            "https://app.example.com/context/installed",
            "https://app.example.com/context",
        )

        assert result == "POST&/installed&"

    def test_empty_path_and_trailing_slash(self):
        """Test empty paths become / and trailing slashes are dropped."""
        assert create_canonical_request("GET", "https://app.example.com") == "GET&/&"
        assert create_canonical_request("GET", "/path/") == "GET&/path&"

    def test_ampersand_in_path_encoded(self):
        """Test & inside the path is encoded."""
        assert create_canonical_request("GET", "/a&b") == "GET&/a%26b&"

    def test_hash_is_sha256_of_canonical_request(self):
        """Test the QSH is the hex SHA-256 of the canonical request."""
        expected = hashlib.sha256(b"GET&/rest/api/issue&a=1").hexdigest()

        assert create_query_string_hash("GET", "/rest/api/issue?a=1&jwt=x") == expected

    def test_hash_sensitive_to_method_path_and_query(self):
        """Test any change to the request changes the hash."""
        base = create_query_string_hash("GET", "/path?a=1")

        assert create_query_string_hash("get", "/path?a=1") == base
        assert create_query_string_hash("POST", "/path?a=1") != base
        assert create_query_string_hash("GET", "/other?a=1") != base
        assert create_query_string_hash("GET", "/path?a=2") != base


class TestVerifyQueryStringHash:
    """Test cases for verify_query_string_hash."""

    def test_skip_ignores_missing_claim(self):
        """Test skip accepts tokens without qsh."""
        verify_query_string_hash(ConnectJwt(iss="a"), compute, QueryStringHashType.SKIP)

    @pytest.mark.parametrize("qsh_type", ["computed", "context", "any"])
    def test_missing_claim(self, qsh_type):
        """Test a missing qsh claim is rejected unless skipped."""
        connect_jwt = ConnectJwt(iss="a")

        with pytest.raises(AuthError) as exc_info:
            verify_query_string_hash(connect_jwt, compute, qsh_type)

        assert exc_info.value.code == AuthErrorCode.MISSING_QSH
        assert exc_info.value.connect_jwt == connect_jwt

    def test_computed_match(self):
        """Test the default policy compares with the computed hash."""
        verify_query_string_hash(ConnectJwt(qsh=COMPUTED_QSH), compute)

    def test_computed_mismatch(self):
        """Test computed mismatch reports both values."""
        with pytest.raises(AuthError) as exc_info:
            verify_query_string_hash(ConnectJwt(qsh="received"), compute, "computed")

        assert exc_info.value.code == AuthErrorCode.INVALID_QSH
        assert exc_info.value.qsh_info == QshInfo(computed=COMPUTED_QSH, received="received")

    def test_computed_rejects_context_sentinel(self):
        """Test context tokens are not accepted by the computed policy."""
        with pytest.raises(AuthError) as exc_info:
            verify_query_string_hash(ConnectJwt(qsh=CONTEXT_QSH), compute, "computed")

        assert exc_info.value.code == AuthErrorCode.INVALID_QSH

    def test_context_match_does_not_compute(self):
        """Test the context policy never hashes the request."""
        calls = []

        def tracking_compute():
            calls.append(1)
            return COMPUTED_QSH

        verify_query_string_hash(ConnectJwt(qsh=CONTEXT_QSH), tracking_compute, "context")

        assert calls == []

    def test_context_mismatch(self):
        """Test the context policy reports the computed side as skipped."""
        with pytest.raises(AuthError) as exc_info:
            verify_query_string_hash(ConnectJwt(qsh=COMPUTED_QSH), compute, "context")

        assert exc_info.value.code == AuthErrorCode.INVALID_QSH
        assert exc_info.value.qsh_info == QshInfo(computed=SKIPPED_QSH, received=COMPUTED_QSH)

    def test_any_accepts_context_sentinel(self):
        """Test the any policy accepts context tokens whatever the request hash."""
        verify_query_string_hash(ConnectJwt(qsh=CONTEXT_QSH), lambda: "something-else", "any")

    def test_any_accepts_computed(self):
        """Test the any policy falls back to the computed hash."""
        verify_query_string_hash(ConnectJwt(qsh=COMPUTED_QSH), compute, "any")

    def test_any_mismatch(self):
        """Test the any policy rejects other values with both sides populated."""
        with pytest.raises(AuthError) as exc_info:
            verify_query_string_hash(ConnectJwt(qsh="bogus"), compute, QueryStringHashType.ANY)

        assert exc_info.value.qsh_info == QshInfo(computed=COMPUTED_QSH, received="bogus")
        assert exc_info.value.details["qsh_info"] == {"computed": COMPUTED_QSH, "received": "bogus"}
