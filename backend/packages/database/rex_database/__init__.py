"""
Rex Database Package.

This package contains SQLAlchemy models and database session management
for the Rex application.
"""

__version__ = "0.1.0"

from .models import Base

__all__ = ["Base"]
