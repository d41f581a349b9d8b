import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from pyjadx.cli.decompile import classes, methods, packages, save, show
from pyjadx.cli.names import normalize, pretty
from pyjadx.cli.serve import serve
from pyjadx.models import LoadOptions

app = typer.Typer(
    name="pyjadx",
    help="pyjadx CLI: browse and save code decompiled by jadx.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def options(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
    escape_unicode: Annotated[bool, typer.Option(help="Escape non-ASCII characters in strings.")] = True,
    show_inconsistent_code: Annotated[bool, typer.Option(help="Keep code of methods that failed to decompile.")] = True,
    deobf: Annotated[bool, typer.Option("--deobf", help="Rename too short or too long identifiers.")] = False,
    deobf_min: Annotated[int, typer.Option(help="Minimum identifier length kept by --deobf.")] = 3,
    deobf_max: Annotated[int, typer.Option(help="Maximum identifier length kept by --deobf.")] = 64,
) -> None:
    """Decompile Android Dex and APK files."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    try:
        ctx.obj = LoadOptions(
            escape_unicode=escape_unicode,
            show_inconsistent_code=show_inconsistent_code,
            deobfuscation_on=deobf,
            deobfuscation_min_length=deobf_min,
            deobfuscation_max_length=deobf_max,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


app.command("classes")(classes)
app.command("packages")(packages)
app.command("methods")(methods)
app.command("show")(show)
app.command("save")(save)
app.command("normalize")(normalize)
app.command("pretty")(pretty)
app.command("serve")(serve)


def main() -> None:
    app()
