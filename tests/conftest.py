import numpy as np
import cv2
import pytest

from loom_punchcards.models.core_models import Card


@pytest.fixture
def small_rgb_image():
    # 2×2 RGB image: red, green, blue, black
    img = np.array(
        [[[255, 0, 0], [0, 255, 0]], [[0, 0, 255], [0, 0, 0]]], dtype=np.uint8
    )
    return img


@pytest.fixture
def black_rgb_image():
    # 52×2 all-black image; resampled to 208 wide it is 8 rows tall
    return np.zeros((2, 52, 3), dtype=np.uint8)


@pytest.fixture
def black_png_bytes(black_rgb_image):
    ok, buf = cv2.imencode(".png", cv2.cvtColor(black_rgb_image, cv2.COLOR_RGB2BGR))
    assert ok
    return buf.tobytes()


@pytest.fixture
def tiny_card():
    # 2×1 card with one hole
    return Card(number=1, width=2, height=1, matrix=[[1, 0]])


@pytest.fixture
def make_card():
    def _make(number=1, width=26, height=8, fill=None):
        if fill is None:
            matrix = [[(x + y) % 2 for x in range(width)] for y in range(height)]
        else:
            matrix = [[fill] * width for _ in range(height)]
        return Card(number=number, width=width, height=height, matrix=matrix)

    return _make


@pytest.fixture
def card_set(make_card):
    return [make_card(1), make_card(2, fill=1), make_card(3, fill=0)]
