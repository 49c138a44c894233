"""
Nostr Publisher CLI Package.

Command-line interface for compiling and publishing documents.
"""

from .cli import app, cli_main

__all__ = ["app", "cli_main"]
