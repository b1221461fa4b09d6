"""
Presentation Layer Package

This package contains the command line interface and the rendering of
execution reports for the terminal.
"""

from uptimer.presentation import formatters

__all__ = ["formatters"]
