"""
Index matrix for virtual seam removal.

An IndexMatrix stores, for every (column, row) cell of a carved image, the
column of the source image that the cell refers to. Removing a seam deletes
one cell per row and compacts the rest of that row to the left, so later
lookups skip removed columns without touching the pixel data.

The backing tensor keeps its original width for the lifetime of the matrix;
only the first `width` cells of each row are live.
"""

import logging
import numbers
import numpy as np
import torch
from typing import Callable, Optional, Sequence, Tuple, Union

from .pos import Pos

logger = logging.getLogger(__name__)

SeamLike = Union[Sequence[Pos], Sequence[Tuple[int, int]], Sequence[int], np.ndarray, torch.Tensor]


class InvalidSeamError(ValueError):
    """Raised when a seam cannot be removed from the current matrix."""


def _is_integer_dtype(dtype: torch.dtype) -> bool:
    return not dtype.is_floating_point and not dtype.is_complex and dtype != torch.bool


def _as_int(value) -> Optional[int]:
    """Column or row index as an int, or None if value is not an integer."""
    if isinstance(value, torch.Tensor):
        if value.dim() != 0 or not _is_integer_dtype(value.dtype):
            return None
        return int(value)
    # bool is Integral but never a meaningful index
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, numbers.Integral):
        return None
    return int(value)


class IndexMatrix:
    """
    Dense (height, width) grid of source-column indices.

    Lookups outside the live area are programming errors and raise
    IndexError instead of wrapping around like tensor indexing does.
    """

    def __init__(self, data: torch.Tensor):
        """
        Wrap an existing index tensor.

        Args:
            data: Integer tensor (H, W); cell [y, x] is the source column
                  for virtual position (x, y). The tensor is owned by the
                  matrix from here on.
        """
        if data.dim() != 2:
            raise ValueError(f"Index data must be 2D (H, W), got shape {tuple(data.shape)}")
        if data.dtype.is_floating_point or data.dtype == torch.bool:
            raise ValueError(f"Index data must be an integer tensor, got {data.dtype}")
        if data.shape[0] == 0 or data.shape[1] == 0:
            raise ValueError(f"Index data must be non-empty, got shape {tuple(data.shape)}")

        self._data = data.long()
        self._width = data.shape[1]

    @classmethod
    def identity(cls, width: int, height: int, device='cpu'):
        """
        Create the identity mapping: cell (x, y) holds x.

        Args:
            width: Number of columns
            height: Number of rows
            device: torch device

        Returns:
            IndexMatrix with every row equal to [0, 1, ..., width - 1]
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Dimensions must be positive, got {width}x{height}")
        cols = torch.arange(width, dtype=torch.long, device=device)
        return cls(cols.unsqueeze(0).expand(height, width).clone())

    @classmethod
    def from_fn(cls, width: int, height: int, fn: Callable[[int, int], int],
                device='cpu'):
        """Create a matrix whose cell (x, y) holds fn(x, y)."""
        if width <= 0 or height <= 0:
            raise ValueError(f"Dimensions must be positive, got {width}x{height}")
        rows = [[int(fn(x, y)) for x in range(width)] for y in range(height)]
        return cls(torch.tensor(rows, dtype=torch.long, device=device))

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._data.shape[0]

    @property
    def shape(self) -> Tuple[int, int]:
        """(width, height) of the live area."""
        return self._width, self.height

    @property
    def device(self) -> torch.device:
        return self._data.device

    def lookup(self, pos: Union[Pos, Tuple[int, int]]) -> int:
        """
        Return the source column stored at pos.

        Raises:
            IndexError: pos lies outside the live (width, height) area
        """
        x, y = pos
        if not (0 <= x < self._width and 0 <= y < self.height):
            raise IndexError(
                f"Position ({x}, {y}) out of bounds for {self._width}x{self.height} index matrix")
        return int(self._data[y, x])

    def __getitem__(self, pos: Union[Pos, Tuple[int, int]]) -> int:
        return self.lookup(pos)

    def row(self, y: int) -> torch.Tensor:
        """Live cells of row y (a view, do not modify)."""
        if not 0 <= y < self.height:
            raise IndexError(f"Row {y} out of bounds for height {self.height}")
        return self._data[y, :self._width]

    def as_index(self) -> torch.Tensor:
        """Live (H, width) area as a view, suitable for torch.gather."""
        return self._data[:, :self._width]

    def to_tensor(self) -> torch.Tensor:
        """Detached copy of the live (H, width) area."""
        return self._data[:, :self._width].clone()

    def _seam_columns(self, seam: SeamLike) -> list:
        """Validate a seam against the current state and return its columns."""
        H, W = self.height, self._width

        if isinstance(seam, torch.Tensor):
            if seam.dim() != 1:
                raise InvalidSeamError(f"Seam tensor must be 1D, got shape {tuple(seam.shape)}")
            if not _is_integer_dtype(seam.dtype):
                raise InvalidSeamError(f"Seam tensor must hold integers, got {seam.dtype}")
            columns = [int(c) for c in seam.tolist()]
        else:
            columns = []
            for y, entry in enumerate(seam):
                if isinstance(entry, tuple):
                    if len(entry) != 2:
                        raise InvalidSeamError(
                            f"Seam entry {y} must be a (column, row) pair, got {entry!r}")
                    x, row = entry
                    if _as_int(row) != y:
                        raise InvalidSeamError(
                            f"Seam entry {y} refers to row {row}; entries must be in row order")
                else:
                    x = entry
                col = _as_int(x)
                if col is None:
                    raise InvalidSeamError(f"Seam column in row {y} must be an integer, got {x!r}")
                columns.append(col)

        if len(columns) != H:
            raise InvalidSeamError(f"Seam has {len(columns)} rows, expected {H}")
        if W <= 1:
            raise InvalidSeamError(f"Cannot remove a seam from a matrix of width {W}")

        for y, col in enumerate(columns):
            if not 0 <= col < W:
                raise InvalidSeamError(f"Seam column {col} in row {y} out of range [0, {W})")

        return columns

    def remove_seam(self, seam: SeamLike):
        """
        Remove one cell per row.

        For row y with seam column c, cells left of c are untouched and every
        cell from c onwards takes the value of its right neighbour. The live
        width shrinks by one.

        The whole seam is validated before anything is written, so a rejected
        seam leaves the matrix unchanged.

        Args:
            seam: One entry per row: Pos / (x, y) pairs in row order, plain
                  column ints, or a (H,) integer tensor or array of columns

        Raises:
            InvalidSeamError: wrong row count, column out of range, rows out
                              of order, or width already 1
        """
        columns = self._seam_columns(seam)
        W = self._width

        for y, col in enumerate(columns):
            if col < W - 1:
                # Overlapping slices, so copy the tail first
                self._data[y, col:W - 1] = self._data[y, col + 1:W].clone()

        self._width = W - 1
        logger.debug(f"Removed seam, index matrix now {self._width}x{self.height}")

    def __repr__(self) -> str:
        return f"IndexMatrix(width={self._width}, height={self.height})"
