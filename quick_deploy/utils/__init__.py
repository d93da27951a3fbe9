"""Utility functions for Quick Deploy."""

from quick_deploy.utils.crypto import seal_secret
from quick_deploy.utils.logging import configure_logging, get_logger
from quick_deploy.utils.slug import generate_slug

__all__ = [
    "configure_logging",
    "generate_slug",
    "get_logger",
    "seal_secret",
]
