"""
Use Cases Package - Application Layer

This package contains use cases that orchestrate loading a realm,
expanding it into work and running its checks.
"""

from .realm_use_cases import DescribeRealmUseCase, LoadRealmUseCase, RunChecksUseCase

__all__ = [
    "LoadRealmUseCase",
    "RunChecksUseCase",
    "DescribeRealmUseCase",
]
