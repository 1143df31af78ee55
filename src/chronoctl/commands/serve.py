"""serve — start the MCP server (requires chronoctl[mcp] extra)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from chronoctl.commands._base import ChronoCommand

if TYPE_CHECKING:
    from chronoctl.commands._context import AppContext


@click.command(
    cls=ChronoCommand,
    examples="""\
  # Start the MCP server (stdio transport, default)
  chronoctl serve

  # Streamable HTTP on custom host/port
  chronoctl serve --transport streamable-http --host 0.0.0.0 --port 9000

  # SSE transport on the address from chronoctl.toml
  chronoctl serve --transport sse""",
)
@click.option(
    "--transport",
    default=None,
    type=click.Choice(["stdio", "sse", "streamable-http"]),
    help="MCP transport protocol (default: mcp.transport).",
)
@click.option("--host", default=None, help="Bind address (HTTP transports only).")
@click.option("--port", default=None, type=int, help="Listen port (HTTP transports only).")
@click.pass_obj
def serve(app: AppContext, transport: str | None, host: str | None, port: int | None) -> None:
    """Start the MCP server (requires chronoctl[mcp] extra)."""
    from chronoctl.mcp.server import create_server, mcp_available

    if not mcp_available:
        click.echo("MCP not installed. Install with: pip install chronoctl[mcp]", err=True)
        raise SystemExit(1)

    mcp_config = app.settings.mcp
    server = create_server(
        settings=app.settings,
        host=host or mcp_config.host,
        port=port or mcp_config.port,
    )
    server.run(transport=transport or mcp_config.transport)
