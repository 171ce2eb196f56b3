"""``binembed extract ARTIFACT DEST``: materialize an embedded executable."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from binembed.core.errors import BinEmbedError, IntegrityFault
from binembed.core.materializer import write_file
from binembed.core.renderer import load_artifact_file

console = Console()


def extract_cmd(
    artifact_path: Path = typer.Argument(..., help="Generated artifact module."),
    dest: Path = typer.Argument(..., help="Executable to create."),
    verify: bool = typer.Option(
        True,
        "--verify/--no-verify",
        help="Check both digests while writing.",
    ),
) -> None:
    """Write the executable stored in ARTIFACT to DEST."""
    try:
        artifact = load_artifact_file(artifact_path)
        write_file(artifact, dest, verify=verify)
    except IntegrityFault as exc:
        console.print(f"[bold red]Integrity fault:[/bold red] {exc}")
        raise typer.Exit(code=2)
    except BinEmbedError as exc:
        console.print(f"[bold red]Extract failed:[/bold red] {exc}")
        raise typer.Exit(code=1)

    console.print(
        f"[green]Wrote[/green] {artifact.binary_name} "
        f"({artifact.decoded_len} bytes) to {dest}"
    )
