"""httpcore network backends that run the address gate before every TCP connect.

Name resolution happens inside ``connect_tcp`` and each resolved address is
passed through :func:`safedialer.gate.control` immediately before it is
dialled, so the address that is checked is exactly the address that is used.
"""

from __future__ import annotations

import logging
import socket
from typing import Any, Iterable, List, Optional, Tuple

import anyio
import httpcore

from .gate import control
from .models import UnsafeDialError, UnsafeNetworkError
from .utils.hostport import join_host_port

logger = logging.getLogger(__name__)

AddrInfo = Tuple[int, int, int, str, Tuple[Any, ...]]

_NETWORK_BY_FAMILY = {
    socket.AF_INET: "tcp4",
    socket.AF_INET6: "tcp6",
}


def _check_resolved(host: str, port: int, family: int, sockaddr: Tuple[Any, ...]) -> str:
    """Gate one resolved address and return the literal IP to dial."""
    ip = str(sockaddr[0])
    network = _NETWORK_BY_FAMILY.get(family, f"family-{family}")
    address = join_host_port(ip, port)
    try:
        control(network, address)
    except UnsafeDialError as e:
        logger.warning("Refusing to dial %s %s for host %r: %s", network, address, host, e)
        raise
    logger.debug("Dialing %s %s for host %r", network, address, host)
    return ip


def _no_addresses(host: str) -> httpcore.ConnectError:
    return httpcore.ConnectError(f"DNS resolution returned no results for {host!r}")


class SafeNetworkBackend(httpcore.NetworkBackend):
    """Synchronous backend that refuses unsafe destinations."""

    def __init__(self, inner: Optional[httpcore.NetworkBackend] = None) -> None:
        self._inner = inner if inner is not None else httpcore.SyncBackend()

    def _resolve(self, host: str, port: int) -> List[AddrInfo]:
        try:
            return socket.getaddrinfo(host, port, type=socket.SOCK_STREAM)
        except socket.gaierror as e:
            raise httpcore.ConnectError(f"DNS resolution failed for {host!r}: {e}") from e

    def connect_tcp(
        self,
        host: str,
        port: int,
        timeout: Optional[float] = None,
        local_address: Optional[str] = None,
        socket_options: Optional[Iterable[Any]] = None,
    ) -> httpcore.NetworkStream:
        infos = self._resolve(host, port)
        if not infos:
            raise _no_addresses(host)

        last_error: Optional[Exception] = None
        for family, _type, _proto, _canonname, sockaddr in infos:
            ip = _check_resolved(host, port, family, sockaddr)
            try:
                return self._inner.connect_tcp(
                    ip,
                    port,
                    timeout=timeout,
                    local_address=local_address,
                    socket_options=socket_options,
                )
            except (httpcore.ConnectError, httpcore.ConnectTimeout) as e:
                logger.debug("Connect to %s port %s failed: %s", ip, port, e)
                last_error = e
        raise last_error

    def connect_unix_socket(
        self,
        path: str,
        timeout: Optional[float] = None,
        socket_options: Optional[Iterable[Any]] = None,
    ) -> httpcore.NetworkStream:
        logger.warning("Refusing to dial unix socket %s", path)
        raise UnsafeNetworkError("unix", path)

    def sleep(self, seconds: float) -> None:
        self._inner.sleep(seconds)


class AsyncSafeNetworkBackend(httpcore.AsyncNetworkBackend):
    """Asynchronous backend that refuses unsafe destinations."""

    def __init__(self, inner: Optional[httpcore.AsyncNetworkBackend] = None) -> None:
        self._inner = inner if inner is not None else httpcore.AnyIOBackend()

    async def _resolve(self, host: str, port: int) -> List[AddrInfo]:
        try:
            return await anyio.getaddrinfo(host, port, type=socket.SOCK_STREAM)
        except socket.gaierror as e:
            raise httpcore.ConnectError(f"DNS resolution failed for {host!r}: {e}") from e

    async def connect_tcp(
        self,
        host: str,
        port: int,
        timeout: Optional[float] = None,
        local_address: Optional[str] = None,
        socket_options: Optional[Iterable[Any]] = None,
    ) -> httpcore.AsyncNetworkStream:
        infos = await self._resolve(host, port)
        if not infos:
            raise _no_addresses(host)

        last_error: Optional[Exception] = None
        for family, _type, _proto, _canonname, sockaddr in infos:
            ip = _check_resolved(host, port, family, sockaddr)
            try:
                return await self._inner.connect_tcp(
                    ip,
                    port,
                    timeout=timeout,
                    local_address=local_address,
                    socket_options=socket_options,
                )
            except (httpcore.ConnectError, httpcore.ConnectTimeout) as e:
                logger.debug("Connect to %s port %s failed: %s", ip, port, e)
                last_error = e
        raise last_error

    async def connect_unix_socket(
        self,
        path: str,
        timeout: Optional[float] = None,
        socket_options: Optional[Iterable[Any]] = None,
    ) -> httpcore.AsyncNetworkStream:
        logger.warning("Refusing to dial unix socket %s", path)
        raise UnsafeNetworkError("unix", path)

    async def sleep(self, seconds: float) -> None:
        await self._inner.sleep(seconds)
