import numpy as np
from matplotlib.figure import Figure

from loom_punchcards.models import VisualizationSet


def test_visualizationset_default():
    vs = VisualizationSet()
    assert vs.grayscale is None
    assert vs.binary_grid is None
    assert vs.card_preview is None


def test_visualizationset_accepts_arrays_and_figures():
    vs = VisualizationSet(
        binary_grid=np.zeros((1, 1, 3), dtype=np.uint8), card_preview=Figure()
    )
    assert vs.binary_grid.shape == (1, 1, 3)
    assert isinstance(vs.card_preview, Figure)
