"""
Materialize image views into dense tensors.

Reading pixels through a Carved view costs an index lookup per access. Once
carving is done, materialize the view once and work on the packed result.
"""

import logging
import torch

from .carved import Carved
from .image import ImageView, TensorImage

logger = logging.getLogger(__name__)


def _gather_carved(view: Carved, base: TensorImage) -> torch.Tensor:
    """Gather all rows of a carved TensorImage chain in one pass."""
    src = base.tensor
    C = src.shape[0]
    cols = view.column_map().to(src.device)
    index = cols.unsqueeze(0).expand(C, -1, -1)
    return torch.gather(src, 2, index)


def _walk_pixels(view: ImageView) -> torch.Tensor:
    """Generic path: read every pixel through get_pixel."""
    W, H = view.dimensions()
    first = view.get_pixel(0, 0)
    out = torch.empty((first.shape[0], H, W), dtype=first.dtype, device=first.device)

    for y in range(H):
        for x in range(W):
            out[:, y, x] = view.get_pixel(x, y)

    return out


def materialize(view: ImageView) -> torch.Tensor:
    """
    Copy an image view into an owned, dense tensor.

    Args:
        view: Any ImageView, typically a Carved view

    Returns:
        Tensor (C, H, W) where [:, y, x] equals view.get_pixel(x, y) and
        (W, H) equals view.dimensions(). The dtype is the source's.
    """
    if isinstance(view, Carved):
        base = view.base()
        if isinstance(base, TensorImage):
            out = _gather_carved(view, base)
            logger.debug(f"Materialized {view.width}x{view.height} carved view by gather")
            return out

    if isinstance(view, TensorImage):
        return view.tensor.clone()

    out = _walk_pixels(view)
    logger.debug(f"Materialized {view.width}x{view.height} view pixel by pixel")
    return out


def to_image(view: ImageView) -> TensorImage:
    """Materialize a view and wrap the result as a TensorImage."""
    return TensorImage(materialize(view))
