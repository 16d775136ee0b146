"""
Item storage package.

Provides the ItemRepository protocol and its file-per-item implementation.
"""

from .base import ItemRepository
from .file_repository import FileItemRepository

__all__ = [
    "FileItemRepository",
    "ItemRepository",
]
