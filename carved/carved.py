"""
Carved image views.

A Carved view is an image with some vertical seams removed. The source
image is never copied or modified: an IndexMatrix records which source
column each virtual column refers to, so removing a seam only rewrites
index rows and reading a pixel is a single lookup.

To save or further process the result, materialize it into a dense tensor
(see carved.materialize); reading from a packed tensor is faster than going
through the index matrix for every pixel.
"""

import logging
import torch
from typing import Iterable, Tuple

from .image import ImageView, TensorImage
from .matrix import IndexMatrix, SeamLike
from .pos import Pos

logger = logging.getLogger(__name__)


def _as_view(img) -> ImageView:
    if isinstance(img, ImageView):
        return img
    if isinstance(img, torch.Tensor):
        return TensorImage(img)
    raise TypeError(f"Expected an ImageView or torch.Tensor, got {type(img).__name__}")


def _device_of(img: ImageView) -> torch.device:
    if isinstance(img, TensorImage):
        return img.tensor.device
    if isinstance(img, Carved):
        return img.matrix.device
    return torch.device('cpu')


class Carved(ImageView):
    """
    An image with some vertical seams carved out.

    Invariant: for every virtual (x, y), pixel (x, y) of this view is pixel
    (matrix[x, y], y) of the source.

    The view holds a reference to its source; the source must not be
    mutated while the view is in use. Seam removals must be applied one at
    a time. Concurrent get_pixel calls are fine as long as no removal runs
    at the same time.
    """

    def __init__(self, img):
        """
        Args:
            img: Source ImageView, or a (C, H, W) / (H, W) tensor which is
                 wrapped in a TensorImage without copying
        """
        self._img = _as_view(img)
        self._removed = 0
        w, h = self._img.dimensions()
        self._matrix = IndexMatrix.identity(w, h, device=_device_of(self._img))

    @property
    def source(self) -> ImageView:
        return self._img

    @property
    def removed(self) -> int:
        """Number of seams removed so far."""
        return self._removed

    @property
    def matrix(self) -> IndexMatrix:
        return self._matrix

    def base(self) -> ImageView:
        """The innermost non-carved image this view ultimately reads from."""
        img = self._img
        while isinstance(img, Carved):
            img = img.source
        return img

    def remove_seam(self, seam: SeamLike):
        """
        Remove one vertical seam.

        Args:
            seam: One entry per row of the current view: Pos(x, y) in row
                  order, plain column ints, or a (H,) integer tensor or
                  array of columns. Columns are
                  in the coordinates of the current view, i.e. after all
                  previous removals.

        Raises:
            InvalidSeamError: seam is malformed or the view is 1 pixel wide;
                              the view is left unchanged
        """
        self._matrix.remove_seam(seam)
        self._removed += 1
        logger.debug(f"Carved seam {self._removed}, view is now {self.width}x{self.height}")

    def remove_seams(self, seams: Iterable[SeamLike]):
        """
        Remove several seams in order.

        Each seam is expressed in the coordinates left by the previous one.
        If a seam is rejected, the seams before it stay removed.
        """
        for seam in seams:
            self.remove_seam(seam)

    def transform_pos(self, pos: Pos) -> Pos:
        """Given a position in the carved view, return the position in the source."""
        return Pos(self._matrix.lookup(pos), pos[1])

    def column_map(self) -> torch.Tensor:
        """
        Source columns in the innermost image for every virtual pixel.

        Nested views are composed, so entry [y, x] is the column of base()
        that pixel (x, y) of this view comes from.

        Returns:
            Long tensor (H, W) with W the current width
        """
        index = self._matrix.as_index()
        if isinstance(self._img, Carved):
            return torch.gather(self._img.column_map(), 1, index)
        return index.clone()

    def dimensions(self) -> Tuple[int, int]:
        w, h = self._img.dimensions()
        return w - self._removed, h

    def get_pixel(self, x: int, y: int) -> torch.Tensor:
        # The matrix keeps stale cells past the live width, so check here
        if not self.in_bounds(x, y):
            w, h = self.dimensions()
            raise IndexError(f"Pixel ({x}, {y}) out of bounds for {w}x{h} carved view")
        u, v = self.transform_pos(Pos(x, y))
        return self._img.get_pixel(u, v)

    def inner(self):
        return self._img.inner()

    def __repr__(self) -> str:
        w, h = self.dimensions()
        return f"Carved(width={w}, height={h}, removed={self._removed}, source={self._img!r})"
