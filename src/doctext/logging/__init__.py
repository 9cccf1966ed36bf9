"""Logging configuration for the doctext command-line entry point."""

from .setup import setup_logging

__all__ = ["setup_logging"]
