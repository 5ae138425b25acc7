"""
Utilities package for the Conductor producer service.

Exports shared helpers for cross-cutting concerns such as logging.
Keep this package lightweight and free of domain-specific logic.
"""

from conductor.utils.logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
]
