"""Pre-connection address gate.

Permits only TCP connections to port 80 and 443 on public IP addresses, so
that an application may safely connect to URLs supplied by untrusted clients.
The gate runs after name resolution and before the TCP handshake; the address
it sees is the literal IP about to be dialled, which closes the DNS rebinding
window that URL-level checks leave open.
"""

from typing import Any, Optional

from .models import DenialReason, Verdict
from .utils.hostport import AddressError, split_host_port
from .utils.ip_utils import is_public_ip, parse_ip

ALLOWED_NETWORKS = frozenset({"tcp4", "tcp6"})
ALLOWED_PORTS = frozenset({"80", "443"})


def evaluate(network: str, address: str) -> Verdict:
    """Decide whether dialling *address* over *network* is safe.

    Checks run in a fixed order and stop at the first failure: network type,
    host/port syntax, port, IP syntax, IP classification.
    """
    if network not in ALLOWED_NETWORKS:
        return Verdict.deny(DenialReason.UNSAFE_NETWORK)

    try:
        host, port = split_host_port(address)
    except AddressError:
        return Verdict.deny(DenialReason.INVALID_ADDRESS)

    if port not in ALLOWED_PORTS:
        return Verdict.deny(DenialReason.UNSAFE_PORT)

    ip = parse_ip(host)
    if ip is None:
        return Verdict.deny(DenialReason.INVALID_IP)

    if not is_public_ip(ip):
        return Verdict.deny(DenialReason.UNSAFE_IP)

    return Verdict.allow()


def control(network: str, address: str, conn: Optional[Any] = None) -> None:
    """Dial-control hook form of :func:`evaluate`.

    Returns None when the connection may proceed and raises the matching
    :class:`~safedialer.models.UnsafeDialError` subclass otherwise. *conn* is
    the raw connection handle some connectors pass along; it is not used.
    """
    verdict = evaluate(network, address)
    error = verdict.to_error(network, address)
    if error is not None:
        raise error
