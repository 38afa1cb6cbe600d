"""Command line interface for proxylite."""

from .main import create_parser, main

__all__ = ["create_parser", "main"]
