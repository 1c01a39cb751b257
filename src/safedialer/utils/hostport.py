"""Splitting and joining of ``host:port`` strings."""

from __future__ import annotations

MISSING_PORT = "missing port in address"
TOO_MANY_COLONS = "too many colons in address"


class AddressError(ValueError):
    """Raised when a ``host:port`` string is malformed."""

    def __init__(self, address: str, error: str) -> None:
        self.address = address
        self.error = error
        super().__init__(f"address {address}: {error}")


def split_host_port(hostport: str) -> tuple[str, str]:
    """Split *hostport* into host and port.

    IPv6 literal hosts must be bracketed (``[::1]:443``). The host and port
    may be empty; only the shape of the string is checked here.
    """
    i = hostport.rfind(":")
    if i < 0:
        raise AddressError(hostport, MISSING_PORT)

    if hostport.startswith("["):
        end = hostport.find("]")
        if end < 0:
            raise AddressError(hostport, "missing ']' in address")
        if end + 1 == len(hostport):
            raise AddressError(hostport, MISSING_PORT)
        if end + 1 != i:
            # Either junk after "]" or more colons past the bracketed host.
            if hostport[end + 1] == ":":
                raise AddressError(hostport, TOO_MANY_COLONS)
            raise AddressError(hostport, MISSING_PORT)
        host = hostport[1:end]
        j, k = 1, end + 1
    else:
        host = hostport[:i]
        if ":" in host:
            raise AddressError(hostport, TOO_MANY_COLONS)
        j, k = 0, 0

    if "[" in hostport[j:]:
        raise AddressError(hostport, "unexpected '[' in address")
    if "]" in hostport[k:]:
        raise AddressError(hostport, "unexpected ']' in address")

    return host, hostport[i + 1:]


def join_host_port(host: str, port: int | str) -> str:
    """Combine *host* and *port*, bracketing IPv6 literals."""
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"
