"""
Tests for resampling, pixel extraction and tensor normalization.
"""

import cv2
import numpy as np
import pytest

from models.errors import PreprocessError
from models.image import Image
from preprocessing.normalize import normalize, normalize_rgba, prepare_input
from preprocessing.pixels import (
    extract_rgba,
    flatten_alpha,
    image_from_bytes,
    image_to_bgra,
    load_image,
)
from preprocessing.resample import choose_interpolation, resample


class TestResample:
    @pytest.mark.parametrize("size", [(320, 320), (256, 256), (7, 3), (1, 1), (200, 50)])
    def test_output_has_target_size(self, gradient_image, size):
        out = resample(gradient_image, *size)
        assert out.size == size

    def test_same_size_is_identity(self, gradient_image):
        out = resample(gradient_image, gradient_image.width, gradient_image.height)
        assert out == gradient_image
        assert out.pixels is not gradient_image.pixels

    def test_does_not_touch_source(self, gradient_image):
        before = gradient_image.pixels.copy()
        resample(gradient_image, 10, 10)
        assert np.array_equal(gradient_image.pixels, before)

    def test_stretches_without_padding(self):
        img = Image.solid(100, 20, (255, 0, 0, 255))
        out = resample(img, 32, 32)
        assert (out.pixels[..., 0] == 255).all()
        assert (out.pixels[..., 1] == 0).all()

    def test_deterministic(self, gradient_image):
        a = resample(gradient_image, 33, 17)
        b = resample(gradient_image, 33, 17)
        assert a == b

    @pytest.mark.parametrize("size", [(0, 10), (10, 0), (-1, 5)])
    def test_invalid_target(self, gradient_image, size):
        with pytest.raises(PreprocessError):
            resample(gradient_image, *size)

    def test_empty_source(self):
        empty = Image.from_numpy(np.zeros((0, 0, 4), dtype=np.uint8))
        with pytest.raises(PreprocessError):
            resample(empty, 10, 10)

    def test_interpolation_choice(self):
        assert choose_interpolation(100, 100, 50, 50) == cv2.INTER_AREA
        assert choose_interpolation(100, 100, 200, 50) == cv2.INTER_LINEAR
        assert choose_interpolation(100, 100, 50, 50, "cubic") == cv2.INTER_CUBIC

    def test_unknown_interpolation(self, gradient_image):
        with pytest.raises(PreprocessError):
            resample(gradient_image, 10, 10, interpolation="nearest-ish")


class TestPixels:
    def test_flatten_alpha_premultiplies(self):
        rgba = np.array([[[200, 100, 50, 0], [200, 100, 50, 255]]], dtype=np.uint8)
        out = flatten_alpha(rgba)
        assert out[0, 0].tolist() == [0, 0, 0, 255]
        assert out[0, 1].tolist() == [200, 100, 50, 255]

    def test_flatten_alpha_half(self):
        rgba = np.array([[[200, 100, 50, 128]]], dtype=np.uint8)
        out = flatten_alpha(rgba)
        assert out[0, 0].tolist() == [100, 50, 25, 255]

    def test_extract_rgba_size_and_ownership(self, gradient_image):
        grid = extract_rgba(gradient_image, 16, 8)
        assert grid.shape == (8, 16, 4)
        assert grid.dtype == np.uint8
        grid[0, 0, 0] = 1  # caller owns the buffer

    def test_extract_rgba_keeps_alpha_when_not_flattening(self):
        img = Image.solid(4, 4, (10, 20, 30, 40))
        grid = extract_rgba(img, 4, 4, flatten=False)
        assert grid[0, 0].tolist() == [10, 20, 30, 40]

    def test_load_image_converts_bgr_to_rgba(self, tmp_path):
        bgr = np.zeros((5, 6, 3), dtype=np.uint8)
        bgr[..., 0] = 255  # blue in OpenCV order
        path = str(tmp_path / "blue.png")
        assert cv2.imwrite(path, bgr)

        img = load_image(path)
        assert img.size == (6, 5)
        assert img.pixels[0, 0].tolist() == [0, 0, 255, 255]

    def test_load_image_keeps_alpha(self, tmp_path):
        bgra = np.zeros((3, 3, 4), dtype=np.uint8)
        bgra[..., 2] = 255
        bgra[..., 3] = 64
        path = str(tmp_path / "red.png")
        assert cv2.imwrite(path, bgra)

        img = load_image(path)
        assert img.pixels[1, 1].tolist() == [255, 0, 0, 64]

    def test_load_image_missing(self, tmp_path):
        with pytest.raises(PreprocessError):
            load_image(str(tmp_path / "nope.png"))

    def test_load_image_corrupt(self, tmp_path):
        path = tmp_path / "broken.jpg"
        path.write_bytes(b"not an image")
        with pytest.raises(PreprocessError):
            load_image(str(path))

    def test_image_from_bytes(self):
        bgr = np.full((4, 4, 3), 30, dtype=np.uint8)
        ok, encoded = cv2.imencode(".png", bgr)
        assert ok
        img = image_from_bytes(encoded.tobytes())
        assert img.size == (4, 4)
        assert img.pixels[0, 0].tolist() == [30, 30, 30, 255]

    def test_image_from_empty_bytes(self):
        with pytest.raises(PreprocessError):
            image_from_bytes(b"")

    def test_bgra_round_trip_order(self):
        img = Image.solid(2, 2, (1, 2, 3, 4))
        assert image_to_bgra(img)[0, 0].tolist() == [3, 2, 1, 4]


class TestNormalize:
    def test_length_and_layout(self, gradient_image):
        t = normalize(gradient_image)
        w, h = gradient_image.size
        assert t.shape == (h, w, 3)
        assert t.size == w * h * 3

        flat = t.flat()
        row, col = 5, 9
        for c in range(3):
            expected = gradient_image.pixels[row, col, c] / 255.0
            assert flat[(row * w + col) * 3 + c] == pytest.approx(expected)

    def test_values_in_unit_range(self, gradient_image):
        flat = normalize(gradient_image).flat()
        assert flat.min() >= 0.0
        assert flat.max() <= 1.0

    def test_all_black(self):
        t = normalize(Image.solid(8, 6, (0, 0, 0, 255)))
        assert (t.flat() == 0.0).all()

    def test_all_white(self):
        t = normalize(Image.solid(8, 6, (255, 255, 255, 255)))
        assert (t.flat() == 1.0).all()

    def test_alpha_is_dropped(self):
        t = normalize(Image.solid(2, 2, (255, 0, 0, 0)))
        assert t.flat().tolist()[:3] == [1.0, 0.0, 0.0]

    def test_rejects_non_rgba(self):
        with pytest.raises(PreprocessError):
            normalize_rgba(np.zeros((2, 2, 3), dtype=np.uint8))

    def test_prepare_input(self, gradient_image):
        t = prepare_input(gradient_image, 320, 320)
        assert t.shape == (320, 320, 3)
        assert t.data.dtype == np.float32

    def test_prepare_input_flattens_transparent_pixels(self):
        img = Image.solid(4, 4, (255, 255, 255, 0))
        assert (prepare_input(img, 4, 4).flat() == 0.0).all()
        assert (prepare_input(img, 4, 4, flatten_alpha=False).flat() == 1.0).all()
