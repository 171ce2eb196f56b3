"""binembed CLI: Typer-based command-line interface.

Provides the ``binembed`` command with subcommands for encoding a binary
into a generated module, extracting it again, verifying a file against an
artifact, and inspecting artifact metadata.

All output uses Rich for formatted terminal display.
"""
