"""
Read-only image views.

ImageView is the minimal capability shared by concrete images and carved
views: dimensions, bounds, per-pixel access and access to the backing
storage. Anything implementing it can be carved, materialized, or wrapped
again.
"""

import numpy as np
import torch
from PIL import Image
from abc import ABC, abstractmethod
from typing import Tuple

from .pos import Pos


class ImageView(ABC):
    """Immutable 2D image addressed by (x, y) = (column, row)."""

    @abstractmethod
    def dimensions(self) -> Tuple[int, int]:
        """(width, height)"""

    @abstractmethod
    def get_pixel(self, x: int, y: int) -> torch.Tensor:
        """Pixel at (x, y) as a (C,) tensor."""

    @abstractmethod
    def inner(self):
        """Underlying storage of the innermost image."""

    def bounds(self) -> Tuple[int, int, int, int]:
        w, h = self.dimensions()
        return 0, 0, w, h

    @property
    def width(self) -> int:
        return self.dimensions()[0]

    @property
    def height(self) -> int:
        return self.dimensions()[1]

    def max_pos(self) -> Pos:
        """One past the bottom-right pixel, i.e. Pos(width, height)."""
        w, h = self.dimensions()
        return Pos(w, h)

    def in_bounds(self, x: int, y: int) -> bool:
        w, h = self.dimensions()
        return 0 <= x < w and 0 <= y < h


class TensorImage(ImageView):
    """
    Image backed by a (C, H, W) tensor.

    The tensor is referenced, not copied. Grayscale (H, W) input is viewed
    as a single channel.
    """

    def __init__(self, tensor: torch.Tensor):
        if tensor.dim() == 2:
            tensor = tensor.unsqueeze(0)
        elif tensor.dim() != 3:
            raise ValueError(f"Image tensor must be (C, H, W) or (H, W), got shape {tuple(tensor.shape)}")
        if tensor.shape[1] == 0 or tensor.shape[2] == 0:
            raise ValueError(f"Image must be non-empty, got shape {tuple(tensor.shape)}")
        self._tensor = tensor

    @classmethod
    def from_pil(cls, img: Image.Image, normalize: bool = True, device='cpu'):
        """
        Load a PIL image.

        Args:
            img: PIL image (RGB, RGBA or L; other modes are converted to RGB)
            normalize: If True, float32 in [0, 1]; otherwise uint8 in [0, 255]
            device: torch device

        Returns:
            TensorImage with shape (C, H, W)
        """
        if img.mode not in ('RGB', 'RGBA', 'L'):
            img = img.convert('RGB')
        arr = np.array(img)
        if arr.ndim == 2:
            arr = arr[:, :, None]
        tensor = torch.from_numpy(arr).permute(2, 0, 1).contiguous()
        if normalize:
            tensor = tensor.float() / 255.0
        return cls(tensor.to(device))

    def to_pil(self) -> Image.Image:
        """Convert to a PIL image; float tensors are assumed to be in [0, 1]."""
        t = self._tensor.detach().cpu()
        if t.dtype.is_floating_point:
            t = (t * 255).clamp(0, 255).round()
        arr = t.to(torch.uint8).permute(1, 2, 0).contiguous().numpy()
        if arr.shape[2] == 1:
            arr = arr[:, :, 0]
        return Image.fromarray(arr)

    @property
    def tensor(self) -> torch.Tensor:
        return self._tensor

    @property
    def channels(self) -> int:
        return self._tensor.shape[0]

    def dimensions(self) -> Tuple[int, int]:
        _, H, W = self._tensor.shape
        return W, H

    def get_pixel(self, x: int, y: int) -> torch.Tensor:
        if not self.in_bounds(x, y):
            w, h = self.dimensions()
            raise IndexError(f"Pixel ({x}, {y}) out of bounds for {w}x{h} image")
        return self._tensor[:, y, x]

    def inner(self) -> torch.Tensor:
        return self._tensor

    def __repr__(self) -> str:
        C, H, W = self._tensor.shape
        return f"TensorImage(channels={C}, width={W}, height={H}, dtype={self._tensor.dtype})"
