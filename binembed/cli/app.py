"""Main Typer application: imports and registers all CLI commands.

Entry point: ``binembed`` (configured via pyproject.toml project.scripts).
"""

from __future__ import annotations

import logging

import typer
from rich.logging import RichHandler

from binembed.cli.commands.encode import encode_cmd
from binembed.cli.commands.extract import extract_cmd
from binembed.cli.commands.verify import inspect_cmd, verify_cmd
from binembed.config import settings

app = typer.Typer(
    name="binembed",
    help="binembed: embed executables in generated Python modules.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="encode", help="Embed a binary in a generated module.")(encode_cmd)
app.command(name="extract", help="Write an embedded executable to disk.")(extract_cmd)
app.command(name="verify", help="Check a file against an artifact's digests.")(verify_cmd)
app.command(name="inspect", help="Show artifact metadata.")(inspect_cmd)


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        settings.log_level, "--log-level", help="Logging level."
    ),
) -> None:
    """Configure logging for every subcommand."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
