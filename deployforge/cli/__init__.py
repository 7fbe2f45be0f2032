"""deployforge CLI — Typer-based command-line interface.

Provides the ``deployforge`` command with subcommands for deploying,
upgrading, checking status, building, and requesting source verification.

All output uses Rich for formatted terminal display.
"""
