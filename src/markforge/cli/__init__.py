"""Command-line interface for markforge.

This module provides the CLI using Typer with rich output for
user-friendly feedback.

Key features:
- Motif mark generation from a JSON specification
- Plan-driven wordmark customization with a device manifest
- Candidate evaluation and variant ranking
"""

from markforge.cli.app import app, main

__all__ = ["app", "main"]
