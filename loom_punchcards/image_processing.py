"""Image preprocessing functions for the image-to-punchcard pipeline.

This module turns raw image data into a binary grid of holes. The stages
are decoding, grayscale conversion, nearest-neighbor resampling to the card
geometry, and Floyd-Steinberg error diffusion followed by a binary
threshold. Dark regions become holes (1) and light regions stay blank (0).
"""

import logging
import math

import cv2
import numpy as np

from loom_punchcards.exceptions import DecodeError, DimensionError, InputError

logger = logging.getLogger(__name__)

# ITU-R BT.601 luma weights
LUMA_WEIGHTS = (0.299, 0.587, 0.114)

COLOR_MODES = (2, 4, 8)

HOLE_THRESHOLD = 0.5


def decode_image(data: bytes) -> np.ndarray:
    """Decode encoded image bytes into an RGB(A) or single-channel array.

    Args:
        data: Encoded image file contents (PNG, JPEG, or anything else
              OpenCV can read).

    Returns:
        Decoded image as a NumPy array in RGB (or RGBA) channel order, or a
        2D array for single-channel images. The source bit depth is kept.

    Raises:
        DecodeError: If the bytes are empty or not a readable image.
    """
    if not data:
        raise DecodeError("failed to decode image: no image data")

    buffer = np.frombuffer(data, dtype=np.uint8)
    image = cv2.imdecode(buffer, cv2.IMREAD_UNCHANGED)
    if image is None:
        raise DecodeError("failed to decode image: unsupported or corrupt data")

    # OpenCV decodes to BGR(A); everything downstream expects RGB(A)
    if image.ndim == 3 and image.shape[2] == 3:
        image = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
    elif image.ndim == 3 and image.shape[2] == 4:
        image = cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA)

    return image


def _normalize(channel: np.ndarray) -> np.ndarray:
    """Scale integer channel data into [0, 1]; floats are taken as-is."""
    if np.issubdtype(channel.dtype, np.integer):
        return channel.astype(np.float64) / float(np.iinfo(channel.dtype).max)
    return channel.astype(np.float64)


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """Convert an image to a luminance grid.

    Uses the luminosity weighting L = 0.299R + 0.587G + 0.114B on channel
    values normalized to [0, 1]. Single-channel images are only normalized.
    An alpha channel, if present, is ignored.

    Args:
        image: 2D grayscale array, or H×W×C array in RGB / RGBA order.

    Returns:
        2D float64 array of the same height and width with values in [0, 1].
    """
    if image.ndim == 2:
        return _normalize(image)

    if image.ndim != 3:
        raise DecodeError(f"unsupported image shape: {image.shape}")

    channels = image.shape[2]
    if channels in (1, 2):
        # Gray or gray+alpha
        return _normalize(image[..., 0])

    rgb = _normalize(image[..., :3])
    r, g, b = LUMA_WEIGHTS
    return r * rgb[..., 0] + g * rgb[..., 1] + b * rgb[..., 2]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def resize_nearest(
    grid: np.ndarray, width: int | None, height: int | None = None
) -> np.ndarray:
    """Resize a grid with nearest-neighbor sampling.

    Destination cell (x, y) samples source cell
    (floor(x * src_w / width), floor(y * src_h / height)). When one target
    dimension is None it is derived from the source aspect ratio, rounded
    and clamped to at least 1.

    Args:
        grid: 2D source grid.
        width: Target width, or None to derive it from `height`.
        height: Target height, or None to derive it from `width`.

    Returns:
        2D array of shape (height, width) with the source dtype. A source
        with zero width or height yields a 1×1 grid holding 0.

    Raises:
        DimensionError: If both targets are None or a target is not positive.
    """
    if width is None and height is None:
        raise DimensionError("resize needs a target width or height, got neither")
    if (width is not None and width <= 0) or (height is not None and height <= 0):
        raise DimensionError(
            f"resize target must be positive, got {width}x{height}"
        )

    src_h, src_w = grid.shape[:2]
    if src_w == 0 or src_h == 0:
        logger.warning(
            f"Degenerate {src_w}x{src_h} source grid, clamping to 1x1"
        )
        return np.zeros((1, 1), dtype=grid.dtype)

    if height is None:
        height = max(1, _round_half_up(width * src_h / src_w))
    if width is None:
        width = max(1, _round_half_up(height * src_w / src_h))

    # Integer arithmetic keeps every index inside the source bounds
    xs = (np.arange(width) * src_w) // width
    ys = (np.arange(height) * src_h) // height
    return grid[np.ix_(ys, xs)]


def validate_color_mode(levels: int) -> int:
    """Check that a color mode selector is supported.

    Raises:
        InputError: If `levels` is not 2, 4 or 8.
    """
    if levels not in COLOR_MODES:
        raise InputError(f"invalid color mode: {levels} (must be 2, 4, or 8)")
    return int(levels)


def describe_color_mode(levels: int) -> str:
    """Return a human-readable description of a color mode."""
    if levels == 2:
        return "2-color (binary: black/white using dithering)"
    if levels == 4:
        return "4-color (4 grayscale levels using dithering patterns)"
    if levels == 8:
        return "8-color (8 grayscale levels using dithering patterns)"
    return f"{levels}-color mode"


def _round_half_away(value: float) -> float:
    return math.copysign(math.floor(abs(value) + 0.5), value)


def floyd_steinberg_dither(grid: np.ndarray, levels: int = 2) -> np.ndarray:
    """Apply Floyd-Steinberg error diffusion and threshold to holes.

    Each cell, in raster order, is quantized to the nearest of `levels`
    evenly spaced values and the quantization error is pushed to the
    unvisited neighbors (7/16 right, 3/16 lower-left, 5/16 below, 1/16
    lower-right). Errors falling outside the grid are dropped. The
    quantized grid is then thresholded at 0.5: darker cells become holes.

    Only the binary decision is kept, so `levels` changes the dither
    pattern but never produces multi-level output.

    Args:
        grid: 2D grid of intensities in [0, 1]. Not modified.
        levels: Number of quantization levels (2, 4 or 8).

    Returns:
        2D uint8 array of the same shape, 1 where a hole is punched.
    """
    validate_color_mode(levels)
    steps = float(levels - 1)

    pixels = np.array(grid, dtype=np.float64, copy=True)
    height, width = pixels.shape

    for y in range(height):
        row = pixels[y]
        below = pixels[y + 1] if y + 1 < height else None
        for x in range(width):
            old = row[x]
            new = _round_half_away(old * steps) / steps
            row[x] = new
            err = old - new

            if x + 1 < width:
                row[x + 1] += err * 7.0 / 16.0
            if below is not None:
                if x > 0:
                    below[x - 1] += err * 3.0 / 16.0
                below[x] += err * 5.0 / 16.0
                if x + 1 < width:
                    below[x + 1] += err * 1.0 / 16.0

    return (pixels < HOLE_THRESHOLD).astype(np.uint8)


def process_image(
    image: np.ndarray,
    width: int,
    height: int | None = None,
    levels: int = 2,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Run grayscale conversion, resampling and dithering on a decoded image.

    Args:
        image: Decoded image array (see `to_grayscale`).
        width: Target grid width.
        height: Target grid height, or None to keep the aspect ratio.
        levels: Dithering color mode.

    Returns:
        Tuple of (grayscale, resized, binary) grids.
    """
    gray = to_grayscale(image)
    resized = resize_nearest(gray, width, height)
    binary = floyd_steinberg_dither(resized, levels)
    return gray, resized, binary
