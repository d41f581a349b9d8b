"""FastMCP server exposing a loaded jadx decompiler."""

from __future__ import annotations

from typing import Any

from fastmcp import FastMCP

from pyjadx.core.decompiler import JadxDecompiler
from pyjadx.core.query import (
    query_class_detail as _query_class_detail,
)
from pyjadx.core.query import (
    query_classes as _query_classes,
)
from pyjadx.core.query import (
    query_methods as _query_methods,
)
from pyjadx.core.query import (
    query_packages as _query_packages,
)
from pyjadx.errors import NotFoundError


def create_mcp_server(decompiler: JadxDecompiler) -> FastMCP:
    """Create a FastMCP server wired to the given decompiler."""

    mcp = FastMCP("pyjadx", instructions="Browse classes, methods and Java code decompiled from an APK or Dex file.")

    @mcp.tool()
    def list_classes(package: str | None = None, limit: int = 100) -> list[dict[str, Any]] | str:
        """List decompiled classes, optionally restricted to one package."""
        try:
            rows = _query_classes(decompiler, package, limit)
        except NotFoundError as exc:
            return f"Error: {exc}"
        return [{"fullname": r[0], "methods": r[1], "decompiled_line": r[2]} for r in rows]

    @mcp.tool()
    def list_packages() -> list[dict[str, Any]]:
        """List packages and their class count."""
        return [{"fullname": r[0], "classes": r[1]} for r in _query_packages(decompiler)]

    @mcp.tool()
    def class_methods(class_name: str) -> list[dict[str, Any]] | str:
        """List the methods of a class."""
        try:
            rows = _query_methods(decompiler, class_name)
        except NotFoundError as exc:
            return f"Error: {exc}"
        return [{"access": r[0], "return_type": r[1], "signature": r[2], "decompiled_line": r[3]} for r in rows]

    @mcp.tool()
    def class_info(class_name: str) -> dict[str, Any] | str:
        """Describe a class: access flags, package and methods."""
        try:
            return _query_class_detail(decompiler.get_class(class_name))
        except NotFoundError as exc:
            return f"Error: {exc}"

    @mcp.tool()
    def class_source(class_name: str) -> str:
        """Return the decompiled Java code of a class."""
        try:
            return decompiler.get_class(class_name).code
        except NotFoundError as exc:
            return f"Error: {exc}"

    @mcp.tool()
    def save_class(class_name: str, output_path: str) -> str:
        """Write the decompiled code of a class to a file."""
        try:
            cls = decompiler.get_class(class_name)
        except NotFoundError as exc:
            return f"Error: {exc}"
        if not cls.save(output_path):
            return f"Error: could not write {output_path}"
        return f"Saved {cls.fullname} to {output_path}"

    return mcp
