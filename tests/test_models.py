"""Tests for Pydantic models and error types."""

import pytest
from pydantic import ValidationError

from safedialer.models import (
    ERRORS_BY_REASON,
    DenialReason,
    FetchError,
    FetchResult,
    InvalidAddressError,
    InvalidIPError,
    UnsafeDialError,
    UnsafeIPError,
    UnsafeNetworkError,
    UnsafePortError,
    Verdict,
)


class TestVerdict:
    """Test cases for Verdict."""

    def test_allow(self):
        verdict = Verdict.allow()
        assert verdict.allowed is True
        assert verdict.reason is None
        assert verdict.message == "allowed"
        assert verdict.to_error() is None

    def test_deny(self):
        verdict = Verdict.deny(DenialReason.UNSAFE_PORT)
        assert verdict.allowed is False
        assert verdict.reason is DenialReason.UNSAFE_PORT
        assert verdict.message == "unsafe port number"

    def test_frozen(self):
        verdict = Verdict.deny(DenialReason.UNSAFE_IP)
        with pytest.raises(ValidationError):
            verdict.allowed = True

    def test_equality_and_hash(self):
        assert Verdict.deny(DenialReason.INVALID_IP) == Verdict.deny(DenialReason.INVALID_IP)
        assert hash(Verdict.allow()) == hash(Verdict(allowed=True))

    def test_to_error(self):
        error = Verdict.deny(DenialReason.UNSAFE_IP).to_error("tcp4", "10.0.0.1:80")
        assert isinstance(error, UnsafeIPError)
        assert error.network == "tcp4"
        assert error.address == "10.0.0.1:80"

    def test_serialisation(self):
        data = Verdict.deny(DenialReason.UNSAFE_NETWORK).model_dump(mode="json")
        assert data == {"allowed": False, "reason": "unsafe_network"}

    def test_denied_without_reason_is_rejected(self):
        with pytest.raises(ValidationError):
            Verdict(allowed=False)

    def test_allowed_with_reason_is_rejected(self):
        with pytest.raises(ValidationError):
            Verdict(allowed=True, reason=DenialReason.UNSAFE_IP)


class TestDialErrors:
    """Test cases for the denial exception hierarchy."""

    @pytest.mark.parametrize(
        "cls,reason,message",
        [
            (UnsafeNetworkError, DenialReason.UNSAFE_NETWORK, "unsafe network type"),
            (InvalidAddressError, DenialReason.INVALID_ADDRESS, "invalid host/port pair in address"),
            (UnsafePortError, DenialReason.UNSAFE_PORT, "unsafe port number"),
            (InvalidIPError, DenialReason.INVALID_IP, "invalid IP address"),
            (UnsafeIPError, DenialReason.UNSAFE_IP, "unsafe IP address"),
        ],
    )
    def test_error_classes(self, cls, reason, message):
        error = cls("tcp4", "1.2.3.4:80")
        assert isinstance(error, UnsafeDialError)
        assert error.reason is reason
        assert str(error) == message
        assert ERRORS_BY_REASON[reason] is cls

    def test_every_reason_has_an_error(self):
        assert set(ERRORS_BY_REASON) == set(DenialReason)

    def test_to_dict(self):
        error = UnsafePortError("tcp4", "1.2.3.4:22")
        assert error.to_dict() == {
            "reason": "unsafe_port",
            "message": "unsafe port number",
            "network": "tcp4",
            "address": "1.2.3.4:22",
        }


class TestFetchModels:
    """Test cases for fetch result and error types."""

    def test_fetch_result_status(self):
        result = FetchResult(
            url="https://example.com/",
            status_code=201,
            reason_phrase="Created",
            http_version="HTTP/1.1",
            headers={},
        )
        assert result.status == "201 Created"
        assert result.content_length is None

    def test_fetch_error_message(self):
        error = FetchError("Connection failed", url="https://example.com", details="timed out", retryable=True)
        assert str(error) == "Connection failed: timed out"
        assert error.to_dict() == {
            "error": "Connection failed",
            "url": "https://example.com",
            "details": "timed out",
            "retryable": True,
        }
