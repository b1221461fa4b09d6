"""Infrastructure services package."""

from .execution_engine import ExecutionEngine, default_max_concurrency, run_realm

__all__ = ["ExecutionEngine", "default_max_concurrency", "run_realm"]
