"""Command-line demo: fetch URLs through the safe client or evaluate an address."""

import argparse
import asyncio
import sys
from typing import List, Optional, Sequence

from .client import SafeHTTPClient
from .gate import evaluate
from .models import FetchError, UnsafeDialError
from .settings import Settings, configure_logging


def print_result(url: str, status: Optional[str] = None, error: Optional[BaseException] = None) -> None:
    """Print one URL followed by its status line or error."""
    if error is not None:
        print(f"{url}\n❌ {error}\n")
    else:
        print(f"{url}\n✅ {status}\n")


async def fetch_all(settings: Settings, urls: Sequence[str], method: str = "GET") -> bool:
    """Fetch each URL in turn, printing the outcome. Return True if all succeeded."""
    ok = True
    async with SafeHTTPClient(settings) as client:
        for url in urls:
            try:
                fetched = await client.fetch(url, method=method)
            except (UnsafeDialError, FetchError) as e:
                print_result(url, error=e)
                ok = False
            else:
                print_result(url, status=fetched.status)
    return ok


def check(network: str, address: str) -> bool:
    """Evaluate one address, print the verdict and return whether it was allowed."""
    verdict = evaluate(network, address)
    if verdict.allowed:
        print(f"✅ {network} {address}: allowed")
    else:
        print(f"❌ {network} {address}: {verdict.message} ({verdict.reason.value})")
    return verdict.allowed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="safedialer-fetch",
        description="Fetch URLs, refusing connections to non-public addresses",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  safedialer-fetch https://httpbingo.org/status/201 http://www.10.0.0.1.nip.io
  safedialer-fetch --check tcp4 10.0.0.1:80
        """,
    )
    parser.add_argument("urls", nargs="*", help="URLs to fetch")
    parser.add_argument("--method", default="GET", choices=["GET", "HEAD"], help="HTTP method")
    parser.add_argument(
        "--check",
        nargs=2,
        metavar=("NETWORK", "ADDRESS"),
        help="Evaluate NETWORK and ADDRESS (host:port) without connecting",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.urls and not args.check:
        parser.error("provide at least one URL or --check NETWORK ADDRESS")

    settings = Settings()
    configure_logging(settings)

    success = True
    if args.check:
        success &= check(*args.check)
    if args.urls:
        success &= asyncio.run(fetch_all(settings, args.urls, method=args.method))

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
