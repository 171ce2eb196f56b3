"""``binembed verify ARTIFACT FILE`` and ``binembed inspect ARTIFACT``."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from binembed.core.errors import BinEmbedError, IntegrityFault
from binembed.core.renderer import load_artifact_file
from binembed.core.verifier import verify_file

console = Console()


def verify_cmd(
    artifact_path: Path = typer.Argument(..., help="Generated artifact module."),
    file: Path = typer.Argument(..., help="File to check."),
) -> None:
    """Check FILE against the digests stored in ARTIFACT."""
    try:
        artifact = load_artifact_file(artifact_path)
        verify_file(artifact, file)
    except IntegrityFault as exc:
        console.print(f"[bold red]Mismatch:[/bold red] {exc}")
        raise typer.Exit(code=2)
    except (BinEmbedError, OSError) as exc:
        console.print(f"[bold red]Verify failed:[/bold red] {exc}")
        raise typer.Exit(code=1)

    console.print(f"[green]OK[/green] {file} matches {artifact.binary_name}")


def inspect_cmd(
    artifact_path: Path = typer.Argument(..., help="Generated artifact module."),
) -> None:
    """Show the metadata stored in ARTIFACT."""
    try:
        artifact = load_artifact_file(artifact_path)
    except BinEmbedError as exc:
        console.print(f"[bold red]Cannot load artifact:[/bold red] {exc}")
        raise typer.Exit(code=1)

    table = Table(title=str(artifact_path))
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Name", artifact.binary_name)
    table.add_row("Version", artifact.version or "[dim]-[/dim]")
    table.add_row("Decoded length", str(artifact.decoded_len))
    table.add_row("Payload chars", str(len("".join(artifact.payload.split()))))
    table.add_row("SHA-1", artifact.digests.sha1)
    table.add_row("SHA-256", artifact.digests.sha256)
    console.print(table)
