"""
Logging Module

Provides structured JSON logging.
"""

from .logger import configure_logging, bind_router, StructuredFormatter, PACKAGE_LOGGER

__all__ = ['configure_logging', 'bind_router', 'StructuredFormatter', 'PACKAGE_LOGGER']
