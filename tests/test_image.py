"""Tests for tensor-backed images."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import numpy as np
import torch
import pytest
from PIL import Image

from carved import Carved, TensorImage, to_image


class TestTensorImage:
    def test_dimensions_are_width_height(self):
        img = TensorImage(torch.zeros(3, 4, 7))
        assert img.dimensions() == (7, 4)
        assert img.bounds() == (0, 0, 7, 4)
        assert img.channels == 3

    def test_grayscale_promoted(self):
        t = torch.rand(5, 6)
        img = TensorImage(t)
        assert img.channels == 1
        assert img.get_pixel(2, 3).item() == t[3, 2].item()

    def test_no_copy(self):
        t = torch.rand(3, 4, 4)
        assert TensorImage(t).inner() is t

    @pytest.mark.parametrize("shape", [(4,), (1, 1, 4, 4), (3, 0, 4)])
    def test_invalid_shapes(self, shape):
        with pytest.raises(ValueError):
            TensorImage(torch.zeros(shape))

    def test_out_of_bounds(self):
        img = TensorImage(torch.zeros(1, 2, 2))
        with pytest.raises(IndexError):
            img.get_pixel(2, 0)
        with pytest.raises(IndexError):
            img.get_pixel(-1, 0)


class TestPIL:
    def test_from_pil_uint8(self):
        pil = Image.new('RGB', (4, 3), (255, 10, 0))
        img = TensorImage.from_pil(pil, normalize=False)
        assert img.tensor.shape == (3, 3, 4)
        assert img.tensor.dtype == torch.uint8
        assert img.get_pixel(0, 0).tolist() == [255, 10, 0]

    def test_from_pil_normalized(self):
        pil = Image.new('L', (2, 2), 255)
        img = TensorImage.from_pil(pil)
        assert img.tensor.shape == (1, 2, 2)
        assert torch.allclose(img.tensor, torch.ones(1, 2, 2))

    def test_round_trip(self):
        rng = np.random.default_rng(0)
        arr = rng.integers(0, 256, size=(5, 6, 3), dtype=np.uint8)
        img = TensorImage.from_pil(Image.fromarray(arr), normalize=False)
        assert np.array_equal(np.array(img.to_pil()), arr)

    def test_carve_pil_image(self):
        arr = np.zeros((2, 3, 3), dtype=np.uint8)
        arr[:, 1] = 200
        view = Carved(TensorImage.from_pil(Image.fromarray(arr)))
        view.remove_seam(torch.tensor([1, 1]))
        out = np.array(to_image(view).to_pil())
        assert out.shape == (2, 2, 3)
        assert out.max() == 0
