"""Memory Box MCP server — Memory Box API exposed as agent tools."""

__version__ = "0.2.0"
