"""
ImageLink - link images into date-based folders

ImageLink turns a shamble of image files into a single date-based
hierarchy of symbolic links, using the date stored in their EXIF metadata.
"""

from .core import main

__all__ = ["main"]
