"""
Application Layer Package

This package contains the use cases of the monitor and the DTOs that
carry configuration documents in and reports out.
"""

# Re-export submodules
from uptimer.application import dtos, use_cases

__all__ = ["dtos", "use_cases"]
