"""Geometry models shared by the SVG renderers.

Both SVG rendering paths draw from a single CardLayout, which is what
keeps their output visually identical.
"""

from pydantic import BaseModel, Field


class HoleMark(BaseModel):
    """One circle drawn at a hole position.

    Punched holes are filled; blank positions get a small outlined guide.
    """

    x: float
    y: float
    r: float
    fill: str = "black"
    stroke: str | None = None
    stroke_width: float = 0.0


class TextMark(BaseModel):
    """A centred line of text."""

    x: float
    y: float
    size: float
    fill: str
    text: str


class GridLine(BaseModel):
    """An alignment line segment."""

    x1: float
    y1: float
    x2: float
    y2: float


class CardLayout(BaseModel):
    """Everything needed to draw one card, in viewBox pixels.

    Attributes:
        number: Card number, used for group ids.
        width_mm: Physical card width.
        height_mm: Physical card height.
        width_px: Card width in viewBox units.
        height_px: Card height in viewBox units.
        caption: Title line at the top, or None when numbers are hidden.
        footer: Info line at the bottom, or None when numbers are hidden.
        grid_lines: Alignment lines, empty when the grid is hidden.
        holes: One mark per cell in row-major order.
    """

    number: int
    width_mm: float
    height_mm: float
    width_px: float
    height_px: float
    caption: TextMark | None = None
    footer: TextMark | None = None
    grid_lines: list[GridLine] = Field(default_factory=list)
    holes: list[HoleMark] = Field(default_factory=list)
