"""Command line interface."""

from __future__ import annotations

from ccseed.cli.main import cli, main

__all__ = ["cli", "main"]
