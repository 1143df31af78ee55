"""Domain layer: timestamps, planning, and time arithmetic.

This layer depends only on the stdlib.
It must never import from services, commands, output, mcp, or config.
"""
