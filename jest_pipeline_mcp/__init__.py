"""Jest test generation, healing and coverage pipeline exposed over MCP."""

__version__ = "0.1.0"
