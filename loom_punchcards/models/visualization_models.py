"""Models for visualization outputs.

This module defines data structures for holding visualization results
from each stage of the image-to-punchcard pipeline. The VisualizationSet
model aggregates all visual outputs in a single container, making it easy
to pass visualization data to the user interface.
"""

import numpy as np
from matplotlib.figure import Figure
from pydantic import BaseModel, Field


class VisualizationSet(BaseModel):
    """Complete set of visualizations for the user interface.

    Attributes:
        grayscale: Grayscale source image as RGB, or None if unavailable.
        binary_grid: Dithered grid as RGB (holes black), or None.
        card_preview: Figure drawing the first few cards, or None.
    """

    grayscale: np.ndarray | None = Field(
        None, description="Grayscale source image as RGB"
    )
    binary_grid: np.ndarray | None = Field(
        None, description="Dithered binary grid as RGB"
    )
    card_preview: Figure | None = Field(
        None, description="Preview figure of the first cards"
    )

    class Config:
        arbitrary_types_allowed = True
