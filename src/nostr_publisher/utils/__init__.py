"""Utilities: logging setup and configuration management."""
