"""Tool for fetching a URL through the SSRF-safe client."""

import logging
from typing import Any, Dict
from urllib.parse import urlparse

from mcp.types import Tool, TextContent, CallToolResult

from ..client import SafeHTTPClient
from ..models import FetchError, UnsafeDialError
from ..settings import Settings

logger = logging.getLogger(__name__)

_ALLOWED_SCHEMES = {"http", "https"}
_ALLOWED_METHODS = {"GET", "HEAD"}


class FetchURLTool:
    """Tool for fetching untrusted URLs safely."""

    def __init__(self, settings: Settings):
        self.settings = settings

    async def get_tool_definition(self) -> Tool:
        """Get the tool definition for MCP."""
        return Tool(
            name="fetch_url",
            description=(
                "Fetch an http(s) URL, refusing to connect to private, loopback, "
                "link-local or otherwise non-public addresses"
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "url": {
                        "type": "string",
                        "description": "URL to fetch",
                    },
                    "method": {
                        "type": "string",
                        "description": "HTTP method",
                        "enum": sorted(_ALLOWED_METHODS),
                        "default": "GET",
                    },
                },
                "required": ["url"],
            },
        )

    def _validate_url(self, url: str) -> str:
        url = url.strip()
        parsed = urlparse(url)
        if parsed.scheme.lower() not in _ALLOWED_SCHEMES:
            raise ValueError(f"Only http/https URLs are allowed, got '{parsed.scheme}'")
        if not parsed.hostname:
            raise ValueError("URL must include a hostname")
        return url

    def _error_result(self, text: str, data: Dict[str, Any]) -> CallToolResult:
        return CallToolResult(
            content=[TextContent(type="text", text=text)],
            structuredContent=data,
            isError=True,
        )

    async def execute(self, arguments: Dict[str, Any]) -> CallToolResult:
        """Execute the fetch_url tool."""
        try:
            url = arguments.get("url")
            if not url or not isinstance(url, str):
                raise ValueError("url is required")
            url = self._validate_url(url)

            method = str(arguments.get("method") or "GET").upper()
            if method not in _ALLOWED_METHODS:
                raise ValueError(f"method must be one of {sorted(_ALLOWED_METHODS)}")

            async with SafeHTTPClient(self.settings) as client:
                try:
                    fetched = await client.fetch(url, method=method)
                except UnsafeDialError as e:
                    logger.warning(f"Blocked fetch of {url}: {e}")
                    return self._error_result(f"❌ {url}\nBlocked: {e}", e.to_dict())
                except FetchError as e:
                    logger.error(f"Fetch error for {url}: {e}")
                    return self._error_result(f"❌ {url}\nFetch Error: {e}", e.to_dict())

            summary_lines = [
                url,
                f"✅ {fetched.status}",
                f"Final URL: {fetched.url}",
                f"HTTP Version: {fetched.http_version}",
            ]
            if fetched.content_length is not None:
                summary_lines.append(f"Content-Length: {fetched.content_length}")

            return CallToolResult(
                content=[TextContent(type="text", text="\n".join(summary_lines))],
                structuredContent=fetched.model_dump(),
            )

        except ValueError as e:
            logger.error(f"Validation error in fetch_url: {e}")
            return CallToolResult(
                content=[TextContent(type="text", text=f"Validation Error: {e}")],
                isError=True,
            )
        except Exception as e:
            logger.error(f"Unexpected error in fetch_url: {e}")
            return CallToolResult(
                content=[TextContent(type="text", text=f"Unexpected Error: {e}")],
                isError=True,
            )
