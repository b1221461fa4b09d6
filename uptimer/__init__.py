"""
Uptimer - host availability monitor

Executes every (service, check, host) combination of a realm through a
pluggable checker and aggregates the outcomes into a report.

Layer Structure:
- Domain: Realm model, checker port, expansion and aggregation
- Application: Use cases and DTOs
- Infrastructure: Network checkers and the execution engine
- Presentation: Command line interface and report rendering
- Shared: Cross-cutting concerns and shared utilities
- Main: Composition root, entry point and configuration
"""

__version__ = "0.1.0"
