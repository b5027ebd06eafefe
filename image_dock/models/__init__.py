"""
SQLAlchemy models for the Image Dock service.
"""

from .base import Base
from .image import ImageRecord

__all__: list[str] = ["Base", "ImageRecord"]
