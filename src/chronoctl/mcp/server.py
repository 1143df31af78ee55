"""FastMCP server setup.

Optional extra — guarded behind try/except ImportError.
Transport: stdio default, SSE and streamable HTTP optional.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from chronoctl.config.settings import ChronoSettings

mcp_available = False
_FastMCP: Any = None

try:
    from mcp.server.fastmcp import FastMCP as _FastMCP  # type: ignore[no-redef,import-not-found]

    mcp_available = True
except ImportError:
    pass

__all__ = ["create_server", "mcp_available"]


def create_server(
    *,
    settings: ChronoSettings | None = None,
    host: str | None = None,
    port: int | None = None,
) -> Any:
    """Create and configure the MCP server.

    Uses *settings* (or settings discovered from CWD and env vars) and
    registers the calculator and clock tools. Returns the FastMCP instance.

    *host* and *port* override ``[mcp]`` for HTTP transports (sse,
    streamable-http). They are ignored when using stdio.

    Raises RuntimeError if the mcp extra is not installed.
    """
    if not mcp_available or _FastMCP is None:
        msg = "MCP extra not installed. Install with: pip install chronoctl[mcp]"
        raise RuntimeError(msg)

    from chronoctl.mcp.tools import register_tools

    if settings is None:
        from chronoctl.config.settings import ChronoSettings

        settings = ChronoSettings.from_cli()

    server = _FastMCP(
        "chronoctl",
        host=host or settings.mcp.host,
        port=port or settings.mcp.port,
    )
    register_tools(server, settings)
    return server
