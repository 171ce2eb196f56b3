"""``binembed encode INPUT OUTPUT``: embed a binary in a generated module.

Reads the input binary, encodes it, and writes the generated Python module
to OUTPUT.  OUTPUT must not exist yet.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel

from binembed.core.encoder import encode_file
from binembed.core.errors import BinEmbedError, DestinationExistsError
from binembed.core.renderer import write_artifact

console = Console()


def encode_cmd(
    binary: Path = typer.Argument(..., help="Binary file to embed."),
    output: Path = typer.Argument(..., help="Generated module to create."),
    name: str = typer.Option(
        "",
        "--name",
        "-n",
        help="Executable filename recorded in the artifact.",
    ),
    tags: str = typer.Option(
        "",
        "--tags",
        "-t",
        help="Build tags written into the artifact header.",
    ),
    version: str = typer.Option(
        "",
        "--version",
        "-v",
        help="Version string of the embedded executable.",
    ),
) -> None:
    """Encode BINARY and write it to OUTPUT as a generated Python module."""
    if output.exists():
        console.print(f"[bold red]Output exists:[/bold red] {output}")
        raise typer.Exit(code=1)

    try:
        artifact = encode_file(
            binary, binary_name=name or None, version=version, build_tags=tags
        )
        write_artifact(artifact, output)
    except DestinationExistsError as exc:
        console.print(f"[bold red]Output exists:[/bold red] {exc}")
        raise typer.Exit(code=1)
    except BinEmbedError as exc:
        console.print(f"[bold red]Encoding failed:[/bold red] {exc}")
        raise typer.Exit(code=1)

    console.print(
        Panel(
            "\n".join([
                f"[bold]Binary:[/bold]   {binary}",
                f"[bold]Name:[/bold]     {artifact.binary_name}",
                f"[bold]Length:[/bold]   {artifact.decoded_len}",
                f"[bold]Payload:[/bold]  {len(artifact.payload)} chars",
                f"[bold]SHA-256:[/bold]  {artifact.digests.sha256}",
                f"[bold]Output:[/bold]   {output}",
            ]),
            title="[bold green]Encoded[/bold green]",
            border_style="green",
        )
    )
