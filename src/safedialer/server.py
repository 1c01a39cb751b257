"""MCP Server exposing the SSRF address gate and a safe URL fetcher."""

import asyncio
import logging
import sys
from typing import Any

from mcp.server import Server, NotificationOptions
from mcp.server.models import InitializationOptions
from mcp.server.stdio import stdio_server
from mcp.types import (
    Resource,
    Tool,
    TextContent,
    TextResourceContents,
    CallToolResult,
)
from pydantic import AnyUrl

from .settings import Settings, configure_logging
from .tools.check_address import CheckAddressTool
from .tools.fetch_url import FetchURLTool

logger = logging.getLogger(__name__)

SERVER_NAME = "safedialer"
SERVER_VERSION = "0.1.0"

USAGE_DOC = """# safedialer Usage Documentation

Connections are only permitted over TCP (tcp4/tcp6) to port 80 or 443 on
public IP addresses. Every resolved address is checked immediately before it
is dialled.

## Available Tools

### check_address
Evaluate a resolved address without connecting.
- **address** (required): literal host:port, IPv6 hosts in brackets
- **network** (optional): tcp4 or tcp6 (default: tcp4)

Denial reasons: unsafe_network, invalid_address, unsafe_port, invalid_ip,
unsafe_ip.

### fetch_url
Fetch an http(s) URL through the safe client.
- **url** (required): URL to fetch
- **method** (optional): GET or HEAD (default: GET)

## Examples

```json
{
  "tool": "check_address",
  "arguments": {"network": "tcp6", "address": "[2606:2800:220:1:248:1893:25c8:1946]:443"}
}
```

```json
{
  "tool": "fetch_url",
  "arguments": {"url": "https://httpbingo.org/status/201"}
}
```
"""


class SafeDialerServer:
    """MCP Server wrapping the address gate."""

    def __init__(self):
        self.settings = Settings()
        self.server = Server(SERVER_NAME)

        self.tools = {
            "check_address": CheckAddressTool(self.settings),
            "fetch_url": FetchURLTool(self.settings),
        }

        self._register_handlers()
        logger.debug("Server initialized with tools: %s", ", ".join(self.tools))

    async def list_tools(self) -> list[Tool]:
        """List available tools."""
        tools: list[Tool] = []
        for tool in self.tools.values():
            tools.append(await tool.get_tool_definition())
        return tools

    async def call_tool(self, name: str, arguments: dict) -> Any:
        """Dispatch a tool call, raising on tool errors so MCP reports them."""
        if name not in self.tools:
            raise ValueError(f"Unknown tool: {name}")

        result = await self.tools[name].execute(arguments or {})

        if isinstance(result, CallToolResult):
            if result.isError:
                message = "Tool execution failed."
                for block in result.content:
                    if isinstance(block, TextContent):
                        message = block.text
                        break
                raise RuntimeError(message)

            content = list(result.content) if result.content else []
            if result.structuredContent is not None:
                return content, result.structuredContent
            return content

        return result

    def _register_handlers(self):
        """Register MCP handlers."""

        @self.server.list_tools()
        async def handle_list_tools() -> list[Tool]:
            return await self.list_tools()

        @self.server.call_tool()
        async def handle_call_tool(name: str, arguments: dict) -> Any:
            return await self.call_tool(name, arguments)

        @self.server.list_resources()
        async def handle_list_resources() -> list[Resource]:
            return [
                Resource(
                    uri=AnyUrl("doc://usage"),
                    name="Usage Documentation",
                    description="Address gate rules and tool usage",
                    mimeType="text/markdown",
                ),
            ]

        @self.server.read_resource()
        async def handle_read_resource(uri: AnyUrl) -> list[TextResourceContents]:
            if str(uri) == "doc://usage":
                return [TextResourceContents(uri=uri, text=USAGE_DOC, mimeType="text/markdown")]
            raise ValueError(f"Unknown resource: {uri}")

    async def run(self):
        """Run the MCP server over stdio."""
        configure_logging(self.settings)
        logger.info("Starting safedialer MCP server")

        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                InitializationOptions(
                    server_name=SERVER_NAME,
                    server_version=SERVER_VERSION,
                    capabilities=self.server.get_capabilities(
                        notification_options=NotificationOptions(),
                        experimental_capabilities={},
                    ),
                ),
            )


def main():
    """Main entry point."""
    server = SafeDialerServer()
    try:
        asyncio.run(server.run())
    except KeyboardInterrupt:
        logger.info("Shutting down server")
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
