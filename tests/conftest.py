"""Shared test fixtures for the carved test suite."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import torch
import pytest
from carved.image import TensorImage


def make_labeled_image(H, W):
    """Two-channel image: channel 0 holds the column, channel 1 the row."""
    cols = torch.arange(W).unsqueeze(0).expand(H, W)
    rows = torch.arange(H).unsqueeze(1).expand(H, W)
    return torch.stack([cols, rows]).clone()


def remove_columns(image, columns):
    """Reference removal: physically drop one column per row of a (C, H, W) tensor."""
    C, H, W = image.shape
    out = torch.zeros(C, H, W - 1, dtype=image.dtype)
    for y in range(H):
        col = int(columns[y])
        out[:, y, :col] = image[:, y, :col]
        out[:, y, col:] = image[:, y, col + 1:]
    return out


def random_seam(H, W, generator=None):
    """Column per row in [0, W), not necessarily connected."""
    return torch.randint(0, W, (H,), generator=generator)


@pytest.fixture
def labeled_4x3():
    """4 wide, 3 tall labeled image."""
    return make_labeled_image(3, 4)


@pytest.fixture
def rgb_image():
    """Random 3-channel 12x10 float image."""
    torch.manual_seed(0)
    return TensorImage(torch.rand(3, 10, 12))
