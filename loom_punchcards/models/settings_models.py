"""Parameter models for pipeline configuration.

This module defines Pydantic models that encapsulate all configurable
parameters for each stage of the image-to-punchcard pipeline. These models
provide validation, default values, and clear interfaces for customizing
the behavior of each processing step.
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from loom_punchcards.models.core_models import CardStrategy, CardType

# Physical layout constants, in millimeters unless noted
HOLE_RADIUS_MM = 2.0
HOLE_SPACING_MM = 5.0
CARD_PADDING_MM = 10.0
TEXT_HEIGHT_MM = 8.0
CARD_SPACING_MM = 5.0
MM_TO_PX = 3.78  # 96 DPI


class OutputFormat(str, Enum):
    """Serialization formats the exporters can produce."""

    SVG = "svg"
    TEXT = "text"


class ImageProcessingParams(BaseModel):
    """Configuration parameters for grayscale conversion, resampling and dithering.

    The target width is not configured here: it is derived from the card
    geometry so that the binary grid always fits the card builder.

    Attributes:
        color_mode: Number of quantization levels used while dithering (2, 4 or 8).
        target_height: Fixed grid height, or None to keep the source aspect ratio.
    """

    color_mode: Literal[2, 4, 8] = Field(
        2, description="Quantization levels used by the ditherer"
    )
    target_height: int | None = Field(
        None, ge=1, description="Grid height; None derives it from aspect ratio"
    )


class CardParams(BaseModel):
    """Configuration parameters for building cards from the binary grid.

    Attributes:
        card_type: Physical card layout ("26x8" or "50x12").
        strategy: How the grid is cut into cards (default row reshape).
        invert: Whether to produce the negative pattern.
    """

    card_type: CardType = Field(CardType.SMALL, description="Physical card layout")
    strategy: CardStrategy = Field(
        CardStrategy.ROW_RESHAPE, description="Grid-to-card strategy"
    )
    invert: bool = Field(False, description="Invert holes and blanks")


class SvgExportParams(BaseModel):
    """Configuration parameters for SVG rendering.

    Sizes are in millimeters and are converted to viewBox pixels with
    MM_TO_PX. The `renderer` switch selects between the direct-write and
    the template-driven renderers, which draw the same document.

    Attributes:
        show_grid: Draw alignment lines through the hole centres.
        show_numbers: Draw the caption and footer texts.
        hole_radius: Radius of a punched hole in mm.
        hole_spacing: Distance between hole centres in mm.
        scale: Scale factor applied to the hole grid.
        title: Pattern title shown in captions ("Title #n/total").
        total_cards: Series size shown in captions, 0 to omit it.
        renderer: "direct" or "template".
    """

    show_grid: bool = Field(True, description="Draw alignment grid lines")
    show_numbers: bool = Field(True, description="Draw card captions and footers")
    hole_radius: float = Field(
        HOLE_RADIUS_MM, gt=0.0, description="Hole radius in millimeters"
    )
    hole_spacing: float = Field(
        HOLE_SPACING_MM, gt=0.0, description="Hole centre spacing in millimeters"
    )
    scale: float = Field(1.0, gt=0.0, le=10.0, description="Hole grid scale factor")
    title: str = Field("", description="Pattern title for captions")
    total_cards: int = Field(0, ge=0, description="Series size for captions")
    renderer: Literal["direct", "template"] = Field(
        "direct", description="SVG rendering path"
    )


class TextExportParams(BaseModel):
    """Configuration parameters for the plain-text card format.

    Attributes:
        title: Pattern title written to the header.
        hole_char: Character written for a punched hole.
        no_hole_char: Character written for a blank position.
    """

    title: str = Field("", description="Pattern title for the header")
    hole_char: str = Field("#", min_length=1, max_length=1, description="Hole glyph")
    no_hole_char: str = Field(
        ".", min_length=1, max_length=1, description="No-hole glyph"
    )

    @model_validator(mode="after")
    def _check_glyphs_and_title(self) -> "TextExportParams":
        if self.hole_char == self.no_hole_char:
            raise ValueError("hole_char and no_hole_char must differ")
        if self.hole_char.isspace() or self.no_hole_char.isspace():
            raise ValueError("hole characters must not be whitespace")
        if "\n" in self.title or "\r" in self.title:
            raise ValueError("title must be a single line")
        return self


class ExportParams(BaseModel):
    """Configuration parameters for serializing a card set.

    Attributes:
        format: Output format, "svg" or "text".
        title: Pattern title, forwarded to the chosen exporter.
        svg: SVG rendering options.
        text: Text format options.
    """

    format: OutputFormat = Field(OutputFormat.SVG, description="Output format")
    title: str = Field("", description="Pattern title")
    svg: SvgExportParams = Field(
        default_factory=SvgExportParams, description="SVG rendering options"
    )
    text: TextExportParams = Field(
        default_factory=TextExportParams, description="Text format options"
    )


class ProcessingParameters(BaseModel):
    """Complete configuration for the entire image-to-punchcard pipeline.

    Aggregates all parameter sets for every stage of the conversion process,
    providing a single object that can be passed to the main pipeline function.

    Attributes:
        image: Parameters for grayscale conversion, resampling and dithering.
        cards: Parameters for card construction.
        export: Parameters for the output serialization.
    """

    image: ImageProcessingParams = Field(
        default_factory=ImageProcessingParams, description="Image processing parameters"
    )
    cards: CardParams = Field(
        default_factory=CardParams, description="Card building parameters"
    )
    export: ExportParams = Field(
        default_factory=ExportParams, description="Export parameters"
    )
