"""Pre-connection address gate that blocks server-side request forgery.

Only TCP connections to port 80 or 443 on public IP addresses are permitted.
"""

from .gate import ALLOWED_NETWORKS, ALLOWED_PORTS, control, evaluate
from .models import (
    DenialReason,
    InvalidAddressError,
    InvalidIPError,
    UnsafeDialError,
    UnsafeIPError,
    UnsafeNetworkError,
    UnsafePortError,
    Verdict,
)
from .utils.ip_utils import is_public_ip

__version__ = "0.1.0"

__all__ = [
    "ALLOWED_NETWORKS",
    "ALLOWED_PORTS",
    "DenialReason",
    "InvalidAddressError",
    "InvalidIPError",
    "UnsafeDialError",
    "UnsafeIPError",
    "UnsafeNetworkError",
    "UnsafePortError",
    "Verdict",
    "control",
    "evaluate",
    "is_public_ip",
]
