"""Tests for check_address tool."""

import pytest
from mcp.types import CallToolResult

from safedialer.tools.check_address import CheckAddressTool


@pytest.fixture
def check_address_tool(settings):
    """Create CheckAddressTool instance for testing."""
    return CheckAddressTool(settings)


class TestCheckAddressTool:
    """Test cases for CheckAddressTool."""

    @pytest.mark.asyncio
    async def test_get_tool_definition(self, check_address_tool):
        definition = await check_address_tool.get_tool_definition()

        assert definition.name == "check_address"
        assert "address" in definition.inputSchema["properties"]
        assert "network" in definition.inputSchema["properties"]
        assert definition.inputSchema["required"] == ["address"]

    @pytest.mark.asyncio
    async def test_execute_allowed(self, check_address_tool):
        result = await check_address_tool.execute({"network": "tcp4", "address": "93.184.216.34:443"})

        assert isinstance(result, CallToolResult)
        assert not result.isError
        assert result.structuredContent["allowed"] is True
        assert result.structuredContent["reason"] is None
        assert "allowed" in result.content[0].text

    @pytest.mark.asyncio
    async def test_execute_defaults_to_tcp4(self, check_address_tool):
        result = await check_address_tool.execute({"address": "10.0.0.1:80"})

        assert result.structuredContent["network"] == "tcp4"
        assert result.structuredContent["allowed"] is False
        assert result.structuredContent["reason"] == "unsafe_ip"
        assert "unsafe IP address" in result.content[0].text

    @pytest.mark.asyncio
    async def test_execute_ipv6(self, check_address_tool):
        result = await check_address_tool.execute(
            {"network": "tcp6", "address": "[2606:2800:220:1:248:1893:25c8:1946]:443"}
        )
        assert result.structuredContent["allowed"] is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "arguments,reason",
        [
            ({"network": "udp", "address": "93.184.216.34:80"}, "unsafe_network"),
            ({"address": "93.184.216.34"}, "invalid_address"),
            ({"address": "93.184.216.34:8080"}, "unsafe_port"),
            ({"address": "not-an-ip:80"}, "invalid_ip"),
            ({"network": "tcp6", "address": "[::1]:443"}, "unsafe_ip"),
        ],
    )
    async def test_execute_denials_are_not_tool_errors(self, check_address_tool, arguments, reason):
        result = await check_address_tool.execute(arguments)

        assert not result.isError
        assert result.structuredContent["reason"] == reason

    @pytest.mark.asyncio
    async def test_unsafe_network_lists_accepted_networks(self, check_address_tool):
        result = await check_address_tool.execute({"network": "udp", "address": "93.184.216.34:80"})
        assert "tcp4, tcp6" in result.content[0].text

    @pytest.mark.asyncio
    async def test_execute_missing_address(self, check_address_tool):
        result = await check_address_tool.execute({})

        assert result.isError
        assert "address is required" in result.content[0].text

    @pytest.mark.asyncio
    async def test_execute_non_string_network(self, check_address_tool):
        result = await check_address_tool.execute({"network": 4, "address": "93.184.216.34:80"})

        assert result.isError
        assert "network must be a string" in result.content[0].text
