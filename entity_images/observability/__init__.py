"""
Observability module.

Logging configuration and HTTP middleware.
"""

from entity_images.observability.logger import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
