from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from pyjadx.cli.decompile import _fail, _open
from pyjadx.errors import JadxError

console = Console(stderr=True)


def serve(
    ctx: typer.Context,
    input_path: Annotated[Path, typer.Argument(help="APK, Dex, jar or class file to decompile.")],
    transport: str = "stdio",
) -> None:
    """Start an MCP server over a decompiled input."""
    from pyjadx.mcp.server import create_mcp_server

    try:
        decompiler = _open(ctx, input_path)
    except JadxError as exc:
        raise _fail(exc) from exc

    with decompiler:
        server = create_mcp_server(decompiler)
        console.print(f"[green]Starting MCP server (transport: {transport})[/green]")
        server.run(transport=transport)  # type: ignore[arg-type]
