"""
Task modules for background processing.

This package contains all background task implementations.
"""

from . import feed_cache

__all__ = ["feed_cache"]
