"""chronoctl — batch time arithmetic over MCP and the command line."""

__version__ = "0.1.0"
