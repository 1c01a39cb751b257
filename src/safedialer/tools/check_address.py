"""Tool for evaluating a resolved network address against the address gate."""

import logging
from typing import Any, Dict

from mcp.types import Tool, TextContent, CallToolResult

from ..gate import ALLOWED_NETWORKS, evaluate
from ..settings import Settings

logger = logging.getLogger(__name__)


class CheckAddressTool:
    """Tool for checking whether a host:port may be dialled."""

    def __init__(self, settings: Settings):
        self.settings = settings

    async def get_tool_definition(self) -> Tool:
        """Get the tool definition for MCP."""
        return Tool(
            name="check_address",
            description=(
                "Check whether a resolved IP address and port may be connected to "
                "without risking server-side request forgery"
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "network": {
                        "type": "string",
                        "description": "Network type of the connection (tcp4 or tcp6)",
                        "default": "tcp4",
                    },
                    "address": {
                        "type": "string",
                        "description": "Literal host:port, e.g. '93.184.216.34:443' or '[2001:db8::1]:80'",
                    },
                },
                "required": ["address"],
            },
        )

    async def execute(self, arguments: Dict[str, Any]) -> CallToolResult:
        """Execute the check_address tool."""
        try:
            address = arguments.get("address")
            if not address or not isinstance(address, str):
                raise ValueError("address is required")

            network = arguments.get("network") or "tcp4"
            if not isinstance(network, str):
                raise ValueError("network must be a string")

            verdict = evaluate(network, address)
            result = {
                "network": network,
                "address": address,
                "allowed": verdict.allowed,
                "reason": verdict.reason.value if verdict.reason else None,
                "message": verdict.message,
            }

            if verdict.allowed:
                summary = f"✅ {network} {address}: allowed"
            else:
                logger.info(f"Denied {network} {address}: {verdict.message}")
                summary = f"❌ {network} {address}: {verdict.message}"
                if network not in ALLOWED_NETWORKS:
                    summary += f" (accepted networks: {', '.join(sorted(ALLOWED_NETWORKS))})"

            return CallToolResult(
                content=[TextContent(type="text", text=summary)],
                structuredContent=result,
            )

        except ValueError as e:
            logger.error(f"Validation error in check_address: {e}")
            return CallToolResult(
                content=[TextContent(type="text", text=f"Validation Error: {e}")],
                isError=True,
            )
