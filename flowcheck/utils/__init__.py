"""Shared utilities: logging setup and bounded polling."""
