"""Pydantic models and error types for dial decisions and safe fetches."""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, model_validator


class DenialReason(str, Enum):
    """Why a connection attempt was refused."""
    UNSAFE_NETWORK = "unsafe_network"
    INVALID_ADDRESS = "invalid_address"
    UNSAFE_PORT = "unsafe_port"
    INVALID_IP = "invalid_ip"
    UNSAFE_IP = "unsafe_ip"


class UnsafeDialError(Exception):
    """Base class for connection attempts refused by the address gate."""

    reason: DenialReason
    message: str = "unsafe dial"

    def __init__(self, network: str = "", address: str = "") -> None:
        self.network = network
        self.address = address
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Return a serialisable representation of the error."""
        return {
            "reason": self.reason.value,
            "message": self.message,
            "network": self.network,
            "address": self.address,
        }


class UnsafeNetworkError(UnsafeDialError):
    """Transport is neither TCP over IPv4 nor TCP over IPv6."""
    reason = DenialReason.UNSAFE_NETWORK
    message = "unsafe network type"


class InvalidAddressError(UnsafeDialError):
    """Address is not a well-formed host:port pair."""
    reason = DenialReason.INVALID_ADDRESS
    message = "invalid host/port pair in address"


class UnsafePortError(UnsafeDialError):
    """Port is not 80 or 443."""
    reason = DenialReason.UNSAFE_PORT
    message = "unsafe port number"


class InvalidIPError(UnsafeDialError):
    """Host is not a literal IP address."""
    reason = DenialReason.INVALID_IP
    message = "invalid IP address"


class UnsafeIPError(UnsafeDialError):
    """IP address is not public."""
    reason = DenialReason.UNSAFE_IP
    message = "unsafe IP address"


ERRORS_BY_REASON: Dict[DenialReason, type[UnsafeDialError]] = {
    cls.reason: cls
    for cls in (
        UnsafeNetworkError,
        InvalidAddressError,
        UnsafePortError,
        InvalidIPError,
        UnsafeIPError,
    )
}


class Verdict(BaseModel):
    """Outcome of evaluating one connection attempt."""
    allowed: bool
    reason: Optional[DenialReason] = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _reason_matches_outcome(self) -> "Verdict":
        if self.allowed and self.reason is not None:
            raise ValueError("an allowed verdict cannot carry a denial reason")
        if not self.allowed and self.reason is None:
            raise ValueError("a denied verdict requires a denial reason")
        return self

    @classmethod
    def allow(cls) -> "Verdict":
        return ALLOW

    @classmethod
    def deny(cls, reason: DenialReason) -> "Verdict":
        return cls(allowed=False, reason=reason)

    @property
    def message(self) -> str:
        if self.allowed:
            return "allowed"
        return ERRORS_BY_REASON[self.reason].message

    def to_error(self, network: str = "", address: str = "") -> Optional[UnsafeDialError]:
        """Return the exception matching this verdict, or None when allowed."""
        if self.allowed:
            return None
        return ERRORS_BY_REASON[self.reason](network, address)


ALLOW = Verdict(allowed=True)


class FetchResult(BaseModel):
    """Summary of a response obtained through the safe client."""
    url: str
    status_code: int
    reason_phrase: str
    http_version: str
    headers: Dict[str, str]
    content_length: Optional[int] = None

    @property
    def status(self) -> str:
        return f"{self.status_code} {self.reason_phrase}".strip()


class FetchError(Exception):
    """Exception raised when a safe fetch fails for reasons other than a denial."""

    def __init__(
        self,
        error: str,
        *,
        url: str,
        details: Optional[str] = None,
        retryable: bool = False,
    ) -> None:
        self.error = error
        self.url = url
        self.details = details
        self.retryable = retryable
        message = error
        if details:
            message = f"{message}: {details}"
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Return a serialisable representation of the error."""
        return {
            "error": self.error,
            "url": self.url,
            "details": self.details,
            "retryable": self.retryable,
        }
