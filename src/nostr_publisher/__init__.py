"""
Nostr publisher.

Compiles AsciiDoc and Markdown documents into Nostr publication events:
long-form articles, publication indexes with content sections, and wiki
articles.
"""

__version__ = "0.1.0"
