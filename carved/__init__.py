"""
Virtual seam-carved image views.

A Carved view removes vertical seams from an image by remapping column
indices instead of rebuilding the pixel buffer on every removal.
"""

__version__ = "0.1.0"

from .pos import Pos
from .matrix import IndexMatrix, InvalidSeamError
from .image import ImageView, TensorImage
from .carved import Carved
from .materialize import materialize, to_image
from .logging_config import setup_logging

__all__ = [
    'Pos',
    'IndexMatrix',
    'InvalidSeamError',
    'ImageView',
    'TensorImage',
    'Carved',
    'materialize',
    'to_image',
    'setup_logging',
]
