"""MCP server exposing a CuraQ reading queue (list, search, fetch, update, save)."""

__version__ = "0.1.0"
