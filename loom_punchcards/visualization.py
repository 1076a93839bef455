"""
Visualization functions for the image-to-punchcard pipeline.

This module centralizes all visualization functions used throughout the pipeline,
providing a consistent interface for creating visual representations of each stage.
"""

from collections.abc import Sequence

import cv2
import numpy as np
from matplotlib.figure import Figure

from loom_punchcards.metadata import PREVIEW_CARD_LIMIT, card_info
from loom_punchcards.models.core_models import Card
from loom_punchcards.models.pipeline_models import CardSetResult, ImageResult
from loom_punchcards.models.visualization_models import VisualizationSet


def create_grayscale_visualization(gray: np.ndarray | None) -> np.ndarray | None:
    """Convert a [0, 1] luminance grid to an RGB image for display.

    Args:
        gray: 2D float grid with values in [0, 1], or None.

    Returns:
        H×W×3 uint8 RGB image, or None if input is None.
    """
    if gray is None:
        return None
    pixels = np.clip(np.rint(gray * 255), 0, 255).astype(np.uint8)
    return cv2.cvtColor(pixels, cv2.COLOR_GRAY2RGB)


def create_binary_visualization(binary_grid: np.ndarray | None) -> np.ndarray | None:
    """Convert a binary hole grid to RGB format for display.

    Holes (1) are drawn black and blanks (0) white, matching how the
    pattern looks on a punched card.

    Args:
        binary_grid: 2D 0/1 array, or None.

    Returns:
        3-channel RGB version of the grid, or None if input is None.
    """
    if binary_grid is None:
        return None
    pixels = np.where(np.asarray(binary_grid) == 1, 0, 255).astype(np.uint8)
    return cv2.cvtColor(pixels, cv2.COLOR_GRAY2RGB)


def create_card_preview_visualization(
    cards: Sequence[Card],
    *,
    limit: int = PREVIEW_CARD_LIMIT,
    cell_in: float = 0.12,
    dpi: int = 100,
) -> Figure:
    """Draw the first few cards as hole grids, one panel per card.

    Args:
        cards: Cards in sequence order.
        limit: Maximum number of cards to draw (default 3).
        cell_in: Physical size of one hole cell in inches.
        dpi: Raster resolution for output.

    Returns:
        Matplotlib Figure. Shows a "No cards" message if `cards` is empty.
    """
    shown = list(cards[:limit])

    if not shown:
        fig = Figure(figsize=(4, 1), dpi=dpi)
        ax = fig.add_subplot()
        ax.text(0.5, 0.5, "No cards", ha="center", va="center", transform=ax.transAxes)
        ax.axis("off")
        return fig

    width = max(card.width for card in shown)
    height = max(card.height for card in shown)
    fig = Figure(
        figsize=(width * cell_in + 0.5, len(shown) * (height * cell_in + 0.6)),
        dpi=dpi,
    )
    axes = fig.subplots(len(shown), 1, squeeze=False)[:, 0]

    for ax, card in zip(axes, shown):
        ax.imshow(
            np.array(card.matrix, dtype=np.uint8),
            cmap="gray_r",
            vmin=0,
            vmax=1,
            interpolation="nearest",
        )
        # cell boundaries
        ax.set_xticks(np.arange(-0.5, card.width, 1), minor=True)
        ax.set_yticks(np.arange(-0.5, card.height, 1), minor=True)
        ax.grid(which="minor", color="lightgray", linewidth=0.5)
        ax.tick_params(which="both", length=0, labelbottom=False, labelleft=False)
        ax.set_title(card_info(card), fontsize=8)

    fig.tight_layout()
    return fig


def create_all_visualizations(
    image_result: ImageResult | None,
    card_result: CardSetResult | None,
) -> VisualizationSet:
    """Create complete set of visualizations from all pipeline results.

    Args:
        image_result: Image stage result, or None.
        card_result: Card stage result, or None.

    Returns:
        VisualizationSet with the grayscale view, the binary grid and the
        card preview. Individual fields are None when their inputs are missing.
    """
    if image_result is None:
        return VisualizationSet()

    preview = None
    if card_result is not None and card_result.cards:
        preview = create_card_preview_visualization(card_result.cards)

    return VisualizationSet(
        grayscale=create_grayscale_visualization(image_result.grayscale),
        binary_grid=create_binary_visualization(image_result.binary_grid),
        card_preview=preview,
    )
