"""Service layer — the calculator pipeline and clock operations returning ServiceResult.

Services may import from domain and config.
They must never import from commands, output, or mcp.
"""
