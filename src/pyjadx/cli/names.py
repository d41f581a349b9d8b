from typing import Annotated

import typer

from pyjadx.core.names import normalize_class_name, pretty_class_name


def normalize(name: Annotated[str, typer.Argument(help="Class name, slashed or descriptor form.")]) -> None:
    """Print the canonical dotted form of a class name."""
    typer.echo(normalize_class_name(name))


def pretty(
    name: Annotated[str, typer.Argument(help="Class name.")],
    with_ext: Annotated[bool, typer.Option("--with-ext", help="Append the .java extension.")] = False,
) -> None:
    """Print the source path of a class."""
    typer.echo(pretty_class_name(name, with_ext=with_ext))
