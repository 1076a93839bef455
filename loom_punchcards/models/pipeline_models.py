"""Models for representing pipeline processing stages.

This module contains Pydantic models that encapsulate the results of each
stage in the image-to-punchcard pipeline. Each model represents the output
data from a specific processing step, enabling clean separation of concerns
and easy testing of individual pipeline components.
"""

import numpy as np
from pydantic import BaseModel, Field

from loom_punchcards.models.core_models import Card, CardDimensions, Metadata


class ImageResult(BaseModel):
    """Result of the image-to-binary stage.

    Attributes:
        grayscale: Luminance grid of the source image in [0, 1], or None.
        resized: Grayscale grid resampled to the card geometry, or None.
        binary_grid: Dithered 0/1 grid (1 = hole), or None.
    """

    grayscale: np.ndarray | None = Field(
        None, description="Luminance grid of the source image"
    )
    resized: np.ndarray | None = Field(
        None, description="Grayscale grid resampled to the card width"
    )
    binary_grid: np.ndarray | None = Field(
        None, description="Dithered binary grid, 1 = hole"
    )

    class Config:
        arbitrary_types_allowed = True


class CardSetResult(BaseModel):
    """Cards built from a binary grid, with their metadata.

    Attributes:
        dimensions: Card geometry the cards were built with, or None.
        cards: Cards in sequence order.
        metadata: Statistics over the cards.
    """

    dimensions: CardDimensions | None = Field(None, description="Card geometry")
    cards: list[Card] = Field(default_factory=list, description="Cards in order")
    metadata: Metadata = Field(
        default_factory=Metadata, description="Card set statistics"
    )


class ExportResult(BaseModel):
    """Serialized card set ready to be handed to the caller.

    Attributes:
        content: Encoded document bytes.
        content_type: MIME type of the document.
        filename: Suggested download file name.
        format: Output format name ("svg" or "text").
    """

    content: bytes = Field(b"", description="Encoded document")
    content_type: str = Field("", description="MIME type")
    filename: str = Field("", description="Suggested file name")
    format: str = Field("", description="Output format name")
