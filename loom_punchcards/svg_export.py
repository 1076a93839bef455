"""SVG export of punchcards for cutting and printing.

Cards are laid out on a physical grid measured in millimeters and drawn
in a pixel viewBox (MM_TO_PX pixels per millimeter). Punched holes are
filled black circles; blank positions get a small light-gray guide ring.

Two renderers produce the same drawing from one shared CardLayout:

- the direct renderer writes the SVG elements line by line;
- the template renderer fills `string.Template` snippets.

Multi-card documents stack the cards vertically, each card wrapped in its
own `<g id="card-N">` group.
"""

import logging
from collections.abc import Sequence
from string import Template
from xml.sax.saxutils import escape

from loom_punchcards.exceptions import CardValidationError
from loom_punchcards.metadata import card_info
from loom_punchcards.models import (
    Card,
    CardLayout,
    GridLine,
    HoleMark,
    SvgExportParams,
    TextMark,
)
from loom_punchcards.models.settings_models import (
    CARD_PADDING_MM,
    CARD_SPACING_MM,
    MM_TO_PX,
    TEXT_HEIGHT_MM,
)
from loom_punchcards.punchcard import validate_card, validate_card_set

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"

GUIDE_RADIUS_FACTOR = 0.3
GUIDE_STROKE = "lightgray"
GUIDE_STROKE_WIDTH = 0.5


def _fmt(value: float) -> str:
    return f"{value:.2f}"


def card_caption(card: Card, params: SvgExportParams) -> str:
    """Caption text for the top of a card."""
    if params.title and params.total_cards > 0:
        return f"{params.title} #{card.number}/{params.total_cards}"
    if params.total_cards > 0:
        return f"Card #{card.number}/{params.total_cards}"
    return f"Card #{card.number}"


def card_size_mm(width: int, height: int, params: SvgExportParams) -> tuple[float, float]:
    """Physical (width, height) of a card in millimeters, padding and texts included."""
    card_width = width * params.hole_spacing * params.scale + 2 * CARD_PADDING_MM
    card_height = (
        height * params.hole_spacing * params.scale
        + 2 * CARD_PADDING_MM
        + TEXT_HEIGHT_MM * 2
    )
    return card_width, card_height


def layout_card(card: Card, params: SvgExportParams) -> CardLayout:
    """Compute every mark needed to draw a card.

    Args:
        card: A valid card.
        params: Rendering options.

    Returns:
        CardLayout with positions in viewBox pixels.
    """
    width_mm, height_mm = card_size_mm(card.width, card.height, params)
    width_px = width_mm * MM_TO_PX
    height_px = height_mm * MM_TO_PX

    step = params.hole_spacing * params.scale * MM_TO_PX
    start_x = CARD_PADDING_MM * MM_TO_PX
    start_y = (CARD_PADDING_MM + TEXT_HEIGHT_MM) * MM_TO_PX

    layout = CardLayout(
        number=card.number,
        width_mm=width_mm,
        height_mm=height_mm,
        width_px=width_px,
        height_px=height_px,
    )

    if params.show_numbers:
        layout.caption = TextMark(
            x=width_px / 2,
            y=TEXT_HEIGHT_MM * MM_TO_PX * 0.8,
            size=TEXT_HEIGHT_MM * MM_TO_PX * 0.6,
            fill="black",
            text=card_caption(card, params),
        )
        layout.footer = TextMark(
            x=width_px / 2,
            y=height_px - TEXT_HEIGHT_MM * MM_TO_PX * 0.3,
            size=TEXT_HEIGHT_MM * MM_TO_PX * 0.5,
            fill="gray",
            text=(
                f"{card.width}x{card.height} | {card.count_holes()} holes"
                f" | Card {card.number}"
            ),
        )

    if params.show_grid:
        end_x = start_x + (card.width - 1) * step
        end_y = start_y + (card.height - 1) * step
        for x in range(card.width):
            cx = start_x + x * step
            layout.grid_lines.append(GridLine(x1=cx, y1=start_y, x2=cx, y2=end_y))
        for y in range(card.height):
            cy = start_y + y * step
            layout.grid_lines.append(GridLine(x1=start_x, y1=cy, x2=end_x, y2=cy))

    radius = params.hole_radius * params.scale * MM_TO_PX
    for y, row in enumerate(card.matrix):
        for x, cell in enumerate(row):
            cx = start_x + x * step
            cy = start_y + y * step
            if cell == 1:
                layout.holes.append(HoleMark(x=cx, y=cy, r=radius, fill="black"))
            else:
                layout.holes.append(
                    HoleMark(
                        x=cx,
                        y=cy,
                        r=radius * GUIDE_RADIUS_FACTOR,
                        fill="none",
                        stroke=GUIDE_STROKE,
                        stroke_width=GUIDE_STROKE_WIDTH,
                    )
                )

    return layout


def _set_size_mm(cards: Sequence[Card], params: SvgExportParams) -> tuple[float, float, float]:
    card_width, card_height = card_size_mm(cards[0].width, cards[0].height, params)
    total_height = len(cards) * (card_height + CARD_SPACING_MM) - CARD_SPACING_MM
    return card_width, card_height, total_height


def _single_card_titles(card: Card) -> tuple[str, str]:
    return (
        f"Jacquard Loom Punchcard #{card.number}",
        f"{card_info(card)} - For use in Jacquard weaving looms",
    )


def _set_titles(count: int) -> tuple[str, str]:
    return (
        f"Jacquard Loom Punchcards (Set of {count})",
        f"Complete set of {count} punchcards for Jacquard weaving",
    )


def _check_card(card: Card) -> None:
    try:
        validate_card(card)
    except CardValidationError as e:
        raise CardValidationError(f"invalid card: {e}") from e


# ---------- direct renderer ----------


def _svg_open(width_mm: float, height_mm: float, title: str, desc: str) -> list[str]:
    return [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<svg xmlns="{SVG_NS}" width="{_fmt(width_mm)}mm" height="{_fmt(height_mm)}mm"'
        f' viewBox="0 0 {_fmt(width_mm * MM_TO_PX)} {_fmt(height_mm * MM_TO_PX)}">',
        f"  <title>{escape(title)}</title>",
        f"  <desc>{escape(desc)}</desc>",
        "",
        '  <rect width="100%" height="100%" fill="white"/>',
        "",
    ]


def _text_element(mark: TextMark) -> str:
    return (
        f'<text x="{_fmt(mark.x)}" y="{_fmt(mark.y)}" font-family="monospace"'
        f' font-size="{_fmt(mark.size)}" text-anchor="middle" fill="{mark.fill}">'
        f"{escape(mark.text)}</text>"
    )


def _hole_element(hole: HoleMark) -> str:
    if hole.stroke:
        return (
            f'<circle cx="{_fmt(hole.x)}" cy="{_fmt(hole.y)}" r="{_fmt(hole.r)}"'
            f' fill="{hole.fill}" stroke="{hole.stroke}" stroke-width="{hole.stroke_width}"/>'
        )
    return (
        f'<circle cx="{_fmt(hole.x)}" cy="{_fmt(hole.y)}" r="{_fmt(hole.r)}"'
        f' fill="{hole.fill}"/>'
    )


def _card_body(layout: CardLayout, indent: str) -> list[str]:
    lines = []
    if layout.caption is not None:
        lines.append(indent + _text_element(layout.caption))

    if layout.grid_lines:
        lines.append(
            indent
            + f'<g class="grid" stroke="{GUIDE_STROKE}" stroke-width="0.5" opacity="0.3">'
        )
        for line in layout.grid_lines:
            lines.append(
                indent
                + f'  <line x1="{_fmt(line.x1)}" y1="{_fmt(line.y1)}"'
                f' x2="{_fmt(line.x2)}" y2="{_fmt(line.y2)}"/>'
            )
        lines.append(indent + "</g>")

    for hole in layout.holes:
        lines.append(indent + _hole_element(hole))

    if layout.footer is not None:
        lines.append(indent + _text_element(layout.footer))
    return lines


def render_card_svg(card: Card, params: SvgExportParams) -> str:
    """Write a single-card SVG document element by element."""
    _check_card(card)
    layout = layout_card(card, params)
    title, desc = _single_card_titles(card)

    lines = _svg_open(layout.width_mm, layout.height_mm, title, desc)
    lines.extend(_card_body(layout, "  "))
    lines.append("</svg>")
    return "\n".join(lines) + "\n"


def render_cards_svg(cards: Sequence[Card], params: SvgExportParams) -> str:
    """Write a multi-card SVG document element by element."""
    validate_card_set(cards)
    card_width, card_height, total_height = _set_size_mm(cards, params)
    title, desc = _set_titles(len(cards))

    lines = _svg_open(card_width, total_height, title, desc)
    for index, card in enumerate(cards):
        offset_y = index * (card_height + CARD_SPACING_MM) * MM_TO_PX
        layout = layout_card(card, params)
        lines.append(f'  <g id="card-{card.number}" transform="translate(0, {_fmt(offset_y)})">')
        lines.extend(_card_body(layout, "    "))
        lines.append("  </g>")
        lines.append("")
    lines.append("</svg>")
    return "\n".join(lines) + "\n"


# ---------- template renderer ----------

_DOCUMENT_TEMPLATE = Template(
    """<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="$ns" width="${width_mm}mm" height="${height_mm}mm" viewBox="0 0 $width_px $height_px">
  <title>$title</title>
  <desc>$description</desc>
  <rect width="100%" height="100%" fill="white"/>
$body</svg>
"""
)

_GROUP_TEMPLATE = Template(
    """  <g id="card-$number" transform="translate(0, $offset)">
$body  </g>
"""
)

_TEXT_TEMPLATE = Template(
    """  <text x="$x" y="$y" font-family="monospace" font-size="$size" text-anchor="middle" fill="$fill">$text</text>
"""
)

_GRID_TEMPLATE = Template(
    """  <g class="grid" stroke="$stroke" stroke-width="0.5" opacity="0.3">
$lines  </g>
"""
)

_LINE_TEMPLATE = Template(
    """    <line x1="$x1" y1="$y1" x2="$x2" y2="$y2"/>
"""
)

_HOLE_TEMPLATE = Template(
    """  <circle cx="$x" cy="$y" r="$r" fill="$fill"/>
"""
)

_GUIDE_TEMPLATE = Template(
    """  <circle cx="$x" cy="$y" r="$r" fill="$fill" stroke="$stroke" stroke-width="$stroke_width"/>
"""
)


def _template_text(mark: TextMark) -> str:
    return _TEXT_TEMPLATE.substitute(
        x=_fmt(mark.x),
        y=_fmt(mark.y),
        size=_fmt(mark.size),
        fill=mark.fill,
        text=escape(mark.text),
    )


def _template_body(layout: CardLayout) -> str:
    parts = []
    if layout.caption is not None:
        parts.append(_template_text(layout.caption))

    if layout.grid_lines:
        lines = "".join(
            _LINE_TEMPLATE.substitute(
                x1=_fmt(line.x1), y1=_fmt(line.y1), x2=_fmt(line.x2), y2=_fmt(line.y2)
            )
            for line in layout.grid_lines
        )
        parts.append(_GRID_TEMPLATE.substitute(stroke=GUIDE_STROKE, lines=lines))

    for hole in layout.holes:
        values = {"x": _fmt(hole.x), "y": _fmt(hole.y), "r": _fmt(hole.r), "fill": hole.fill}
        if hole.stroke:
            parts.append(
                _GUIDE_TEMPLATE.substitute(
                    values, stroke=hole.stroke, stroke_width=hole.stroke_width
                )
            )
        else:
            parts.append(_HOLE_TEMPLATE.substitute(values))

    if layout.footer is not None:
        parts.append(_template_text(layout.footer))
    return "".join(parts)


def _indent(block: str, prefix: str) -> str:
    return "".join(prefix + line if line.strip() else line for line in block.splitlines(True))


def render_card_svg_template(card: Card, params: SvgExportParams) -> str:
    """Render a single-card SVG document from templates."""
    _check_card(card)
    layout = layout_card(card, params)
    title, desc = _single_card_titles(card)

    return _DOCUMENT_TEMPLATE.substitute(
        ns=SVG_NS,
        width_mm=_fmt(layout.width_mm),
        height_mm=_fmt(layout.height_mm),
        width_px=_fmt(layout.width_px),
        height_px=_fmt(layout.height_px),
        title=escape(title),
        description=escape(desc),
        body=_template_body(layout),
    )


def render_cards_svg_template(cards: Sequence[Card], params: SvgExportParams) -> str:
    """Render a multi-card SVG document from templates."""
    validate_card_set(cards)
    card_width, card_height, total_height = _set_size_mm(cards, params)
    title, desc = _set_titles(len(cards))

    groups = []
    for index, card in enumerate(cards):
        offset_y = index * (card_height + CARD_SPACING_MM) * MM_TO_PX
        body = _indent(_template_body(layout_card(card, params)), "  ")
        groups.append(
            _GROUP_TEMPLATE.substitute(number=card.number, offset=_fmt(offset_y), body=body)
        )

    return _DOCUMENT_TEMPLATE.substitute(
        ns=SVG_NS,
        width_mm=_fmt(card_width),
        height_mm=_fmt(total_height),
        width_px=_fmt(card_width * MM_TO_PX),
        height_px=_fmt(total_height * MM_TO_PX),
        title=escape(title),
        description=escape(desc),
        body="".join(groups),
    )


# ---------- entry points ----------


def export_card_svg(card: Card, params: SvgExportParams | None = None) -> str:
    """Export one card as a standalone SVG document.

    Args:
        card: Card to draw.
        params: Rendering options; defaults are used when None.

    Returns:
        The SVG document text.

    Raises:
        CardValidationError: If the card is invalid.
    """
    params = params or SvgExportParams()
    if params.renderer == "template":
        return render_card_svg_template(card, params)
    return render_card_svg(card, params)


def export_cards_svg(cards: Sequence[Card], params: SvgExportParams | None = None) -> str:
    """Export a card set as one SVG document with the cards stacked vertically.

    Args:
        cards: Cards to draw, all with the same dimensions.
        params: Rendering options; defaults are used when None.

    Returns:
        The SVG document text, with one `card-N` group per card.

    Raises:
        EmptyInputError: If `cards` is empty.
        CardValidationError: If any card is invalid.
        DimensionError: If the cards differ in dimensions.
    """
    params = params or SvgExportParams()
    if params.renderer == "template":
        document = render_cards_svg_template(cards, params)
    else:
        document = render_cards_svg(cards, params)
    logger.info(f"Exported {len(cards)} cards to SVG ({params.renderer} renderer)")
    return document
