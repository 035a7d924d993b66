"""
Image coordinates.

Positions are (x, y) = (column, row), matching how seams are described:
one column index per row.
"""

import torch
from typing import List, NamedTuple, Sequence, Union


class Pos(NamedTuple):
    """A (column, row) location in an image."""

    x: int
    y: int

    @classmethod
    def from_seam(cls, columns: Union[Sequence[int], torch.Tensor]) -> List['Pos']:
        """
        Convert a per-row column sequence into a list of positions.

        Seam finders return vertical seams as a (H,) long tensor holding the
        column to remove in each row; entry y becomes Pos(columns[y], y).

        Args:
            columns: Column index per row, list of ints or (H,) tensor

        Returns:
            List of Pos, one per row, in row order
        """
        if isinstance(columns, torch.Tensor):
            if columns.dim() != 1:
                raise ValueError(f"Seam tensor must be 1D, got shape {tuple(columns.shape)}")
            columns = columns.tolist()
        return [cls(int(x), y) for y, x in enumerate(columns)]
