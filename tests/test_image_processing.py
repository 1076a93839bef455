import cv2
import numpy as np
import pytest

from loom_punchcards.exceptions import DecodeError, DimensionError, InputError
from loom_punchcards.image_processing import (
    decode_image,
    describe_color_mode,
    floyd_steinberg_dither,
    process_image,
    resize_nearest,
    to_grayscale,
    validate_color_mode,
)


def test_decode_image_returns_rgb(small_rgb_image):
    ok, buf = cv2.imencode(".png", cv2.cvtColor(small_rgb_image, cv2.COLOR_RGB2BGR))
    assert ok
    decoded = decode_image(buf.tobytes())
    assert np.array_equal(decoded, small_rgb_image)


@pytest.mark.parametrize("data", [b"", b"definitely not an image"])
def test_decode_image_invalid(data):
    with pytest.raises(DecodeError):
        decode_image(data)


def test_to_grayscale_luma_weights(small_rgb_image):
    gray = to_grayscale(small_rgb_image)
    expected = np.array([[0.299, 0.587], [0.114, 0.0]])
    assert gray.shape == (2, 2)
    assert np.allclose(gray, expected)


def test_to_grayscale_single_channel():
    img = np.array([[0, 255]], dtype=np.uint8)
    assert np.allclose(to_grayscale(img), [[0.0, 1.0]])


def test_to_grayscale_ignores_alpha(small_rgb_image):
    alpha = np.zeros((2, 2, 1), dtype=np.uint8)
    rgba = np.concatenate([small_rgb_image, alpha], axis=2)
    assert np.allclose(to_grayscale(rgba), to_grayscale(small_rgb_image))


def test_to_grayscale_16_bit():
    img = np.full((1, 1, 3), 65535, dtype=np.uint16)
    assert np.allclose(to_grayscale(img), [[1.0]])


def test_resize_nearest_samples_top_left():
    grid = np.arange(16, dtype=np.float64).reshape(4, 4)
    out = resize_nearest(grid, 2)
    assert np.array_equal(out, [[0, 2], [8, 10]])


def test_resize_nearest_derives_height_from_aspect_ratio():
    grid = np.zeros((5, 10))
    assert resize_nearest(grid, 208).shape == (104, 208)


def test_resize_nearest_derives_width_from_aspect_ratio():
    grid = np.zeros((10, 5))
    assert resize_nearest(grid, None, 4).shape == (4, 2)


def test_resize_nearest_clamps_derived_dimension():
    grid = np.zeros((1, 1000))
    assert resize_nearest(grid, 26).shape == (1, 26)


def test_resize_nearest_upscale():
    grid = np.array([[0.0, 1.0]])
    out = resize_nearest(grid, 4, 1)
    assert np.array_equal(out, [[0.0, 0.0, 1.0, 1.0]])


def test_resize_nearest_degenerate_source():
    out = resize_nearest(np.zeros((0, 5)), 26)
    assert out.shape == (1, 1)
    assert out[0, 0] == 0


@pytest.mark.parametrize("width, height", [(None, None), (0, 5), (5, -1)])
def test_resize_nearest_invalid_target(width, height):
    with pytest.raises(DimensionError):
        resize_nearest(np.zeros((4, 4)), width, height)


@pytest.mark.parametrize("levels", [2, 4, 8])
def test_dither_white_has_no_holes(levels):
    out = floyd_steinberg_dither(np.ones((4, 6)), levels)
    assert out.dtype == np.uint8
    assert not out.any()


@pytest.mark.parametrize("levels", [2, 4, 8])
def test_dither_black_is_all_holes(levels):
    out = floyd_steinberg_dither(np.zeros((4, 6)), levels)
    assert out.all()


def test_dither_output_is_binary_and_same_shape():
    rng = np.random.default_rng(0)
    grid = rng.random((7, 11))
    out = floyd_steinberg_dither(grid, 8)
    assert out.shape == grid.shape
    assert set(np.unique(out)) <= {0, 1}


def test_dither_mid_gray_is_about_half_holes():
    out = floyd_steinberg_dither(np.full((20, 20), 0.5), 2)
    assert 150 <= out.sum() <= 250


def test_dither_does_not_modify_input():
    grid = np.full((3, 3), 0.4)
    floyd_steinberg_dither(grid)
    assert np.all(grid == 0.4)


def test_dither_single_cell_thresholds():
    assert floyd_steinberg_dither(np.array([[0.2]]))[0, 0] == 1
    assert floyd_steinberg_dither(np.array([[0.8]]))[0, 0] == 0


@pytest.mark.parametrize("levels", [0, 3, 16])
def test_dither_invalid_levels(levels):
    with pytest.raises(InputError):
        floyd_steinberg_dither(np.zeros((2, 2)), levels)


def test_validate_color_mode_valid():
    assert validate_color_mode(4) == 4


def test_describe_color_mode():
    assert describe_color_mode(2) == "2-color (binary: black/white using dithering)"
    assert describe_color_mode(8).startswith("8-color")


def test_process_image_shapes(black_rgb_image):
    gray, resized, binary = process_image(black_rgb_image, 208)
    assert gray.shape == (2, 52)
    assert resized.shape == (8, 208)
    assert binary.shape == (8, 208)
    assert binary.all()
