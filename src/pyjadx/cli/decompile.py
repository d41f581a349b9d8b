from collections.abc import Sequence
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from pyjadx.core.decompiler import JadxDecompiler
from pyjadx.core.ports.engine import DecompilerEngine
from pyjadx.core.query import query_classes, query_methods, query_packages
from pyjadx.errors import JadxError
from pyjadx.models import LoadOptions

console = Console()

InputArg = Annotated[Path, typer.Argument(help="APK, Dex, jar or class file to decompile.")]


def _render_table(headers: Sequence[str], rows: Sequence[tuple[Any, ...]]) -> None:
    table = Table(show_lines=False)
    for h in headers:
        table.add_column(h)
    for row in rows:
        table.add_row(*(str(v) for v in row))
    console.print(table)
    console.print(f"({len(rows)} rows)")


def _get_engine() -> DecompilerEngine:
    from pyjadx.runtime.jvm import JadxEngine

    return JadxEngine()


def _open(ctx: typer.Context, input_path: Path) -> JadxDecompiler:
    options = ctx.obj if isinstance(ctx.obj, LoadOptions) else LoadOptions()
    return JadxDecompiler(_get_engine()).load(input_path, options)


def _fail(exc: JadxError) -> typer.Exit:
    console.print(f"[red]{type(exc).__name__}:[/red] {escape(str(exc))}", highlight=False)
    return typer.Exit(1)


def classes(
    ctx: typer.Context,
    input_path: InputArg,
    package: Annotated[str | None, typer.Option(help="Only list classes of this package.")] = None,
    limit: Annotated[int, typer.Option(help="Max rows to return.")] = 100,
) -> None:
    """List decompiled classes."""
    try:
        with _open(ctx, input_path) as decompiler:
            rows = query_classes(decompiler, package, limit)
    except JadxError as exc:
        raise _fail(exc) from exc
    _render_table(["class", "methods", "line"], rows)


def packages(ctx: typer.Context, input_path: InputArg) -> None:
    """List packages."""
    try:
        with _open(ctx, input_path) as decompiler:
            rows = query_packages(decompiler)
    except JadxError as exc:
        raise _fail(exc) from exc
    _render_table(["package", "classes"], rows)


def methods(
    ctx: typer.Context,
    input_path: InputArg,
    class_name: Annotated[str, typer.Argument(help="Fully qualified class name.")],
) -> None:
    """List the methods of a class."""
    try:
        with _open(ctx, input_path) as decompiler:
            rows = query_methods(decompiler, class_name)
    except JadxError as exc:
        raise _fail(exc) from exc
    _render_table(["access", "returns", "method", "line"], rows)


def show(
    ctx: typer.Context,
    input_path: InputArg,
    class_name: Annotated[str, typer.Argument(help="Fully qualified class name.")],
    plain: Annotated[bool, typer.Option("--plain", help="Print without syntax highlighting.")] = False,
) -> None:
    """Print the decompiled code of a class."""
    try:
        with _open(ctx, input_path) as decompiler:
            code = decompiler.get_class(class_name).code
    except JadxError as exc:
        raise _fail(exc) from exc
    if plain:
        typer.echo(code, nl=False)
    else:
        console.print(Syntax(code, "java", theme="monokai", line_numbers=True))


def save(
    ctx: typer.Context,
    input_path: InputArg,
    output: Annotated[Path, typer.Argument(help="Output file (with --class) or directory.")],
    class_name: Annotated[str | None, typer.Option("--class", help="Save only this class.")] = None,
    package: Annotated[str | None, typer.Option(help="Save only this package.")] = None,
) -> None:
    """Save decompiled code to disk."""
    try:
        with _open(ctx, input_path) as decompiler:
            if class_name:
                saved = decompiler.get_class(class_name).save(output)
                targets = [class_name]
            elif package:
                saved = decompiler.get_package(package).save(output)
                targets = [package]
            else:
                pkgs = decompiler.packages
                results = [pkg.save(output) for pkg in pkgs]
                saved = all(results)
                targets = [pkg.fullname for pkg in pkgs]
    except JadxError as exc:
        raise _fail(exc) from exc

    if not saved:
        console.print(f"[red]Some files could not be written to {output}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Saved[/green] {', '.join(targets) or 'nothing'} to {output}")
