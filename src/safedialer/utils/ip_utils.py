"""IP address classification helpers."""

from __future__ import annotations

import ipaddress
from typing import Optional, Union

IPv4Address = ipaddress.IPv4Address
IPv6Address = ipaddress.IPv6Address
IPv4Network = ipaddress.IPv4Network
IPv6Network = ipaddress.IPv6Network
IPAddress = Union[IPv4Address, IPv6Address]

RESERVED_IPV4_NETWORKS: tuple[IPv4Network, ...] = (
    IPv4Network("0.0.0.0/8"),  # current network
    IPv4Network("10.0.0.0/8"),  # private
    IPv4Network("100.64.0.0/10"),  # shared address space, RFC 6598
    IPv4Network("127.0.0.0/8"),  # loopback
    IPv4Network("169.254.0.0/16"),  # link-local
    IPv4Network("172.16.0.0/12"),  # private
    IPv4Network("192.0.0.0/24"),  # IETF protocol assignments, RFC 6890
    IPv4Network("192.0.2.0/24"),  # TEST-NET-1
    IPv4Network("192.88.99.0/24"),  # 6to4 relay anycast
    IPv4Network("192.168.0.0/16"),  # private
    IPv4Network("198.18.0.0/15"),  # benchmarking
    IPv4Network("198.51.100.0/24"),  # TEST-NET-2
    IPv4Network("203.0.113.0/24"),  # TEST-NET-3
    IPv4Network("224.0.0.0/4"),  # multicast
    IPv4Network("240.0.0.0/4"),  # reserved, includes 255.255.255.255
)

GLOBAL_UNICAST_IPV6_NETWORK: IPv6Network = IPv6Network("2000::/3")


def parse_ip(text: str) -> Optional[IPAddress]:
    """Parse a literal IPv4 or IPv6 address, returning None if *text* is not one.

    Hostnames are never resolved. Scoped IPv6 literals (``fe80::1%eth0``) are
    not plain addresses and are rejected.
    """
    if not text or "%" in text:
        return None
    try:
        return ipaddress.ip_address(text)
    except ValueError:
        return None


def to_ipv4(ip: IPAddress) -> Optional[IPv4Address]:
    """Return the 4-byte form of *ip*, or None if it has no such form."""
    if isinstance(ip, IPv4Address):
        return ip
    return ip.ipv4_mapped


def is_ipv4_reserved(ip: IPv4Address) -> bool:
    """Return True if *ip* falls inside any reserved IPv4 block."""
    return any(ip in network for network in RESERVED_IPV4_NETWORKS)


def is_ipv6_global_unicast(ip: IPv6Address) -> bool:
    """Return True if *ip* is inside 2000::/3."""
    return ip in GLOBAL_UNICAST_IPV6_NETWORK


def is_public_ip(ip: IPAddress) -> bool:
    """Return True if *ip* is a public, globally routable address.

    IPv4 (including IPv4-mapped IPv6) is checked against the reserved
    deny-list; every other IPv6 address must be global unicast.
    """
    ipv4 = to_ipv4(ip)
    if ipv4 is not None:
        return not is_ipv4_reserved(ipv4)
    return is_ipv6_global_unicast(ip)
