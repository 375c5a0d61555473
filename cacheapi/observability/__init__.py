"""
CacheAPI — Observability

Structured logging setup.
"""

from .logs import JSONFormatter, setup_logging

__all__ = ["JSONFormatter", "setup_logging"]
