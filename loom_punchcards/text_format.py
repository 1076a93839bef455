"""Plain-text punchcard format: export and parse.

The format is human-readable and editable:

    Title: Untitled Pattern
    Cards: 2
    Holes per card: 208

    Card 1:
    #.#.#.#.#.#.#.#.#.#.#.#.#.
    ...

    Card 2:
    ...

`#`, `O` or `o` mark a punched hole and `.` marks a blank. Parsing
reproduces the exact hole matrices that were exported.
"""

import logging
import re
from collections.abc import Sequence

from pydantic import BaseModel, Field

from loom_punchcards.exceptions import (
    CardValidationError,
    EmptyInputError,
    InputError,
    ParseFormatError,
)
from loom_punchcards.models import (
    Card,
    CardDimensions,
    TextExportParams,
    card_type_for_hole_count,
    get_card_dimensions,
)
from loom_punchcards.punchcard import validate_card, validate_card_set

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled Pattern"

TITLE_PREFIX = "Title: "
CARDS_PREFIX = "Cards: "
HOLES_PREFIX = "Holes per card: "

HOLE_CHARS = frozenset("#Oo")
NO_HOLE_CHARS = frozenset(".")
LINE_BREAKS = frozenset("\r\n")

_CARD_HEADER_RE = re.compile(r"^Card (\d+):\s*$")


class ParseResult(BaseModel):
    """Contents of a parsed punchcard text file.

    Attributes:
        title: Pattern title from the header.
        total_cards: Declared card count.
        holes_per_card: Declared holes per card.
        cards: Parsed cards numbered 1..N in file order.
    """

    title: str = Field("", description="Pattern title")
    total_cards: int = Field(0, ge=0, description="Declared card count")
    holes_per_card: int = Field(0, ge=0, description="Declared holes per card")
    cards: list[Card] = Field(default_factory=list, description="Parsed cards")


def export_cards_text(
    cards: Sequence[Card], params: TextExportParams | None = None
) -> str:
    """Serialize cards to the plain-text format.

    Args:
        cards: Cards to write, all with the same dimensions.
        params: Title and glyph options; defaults are used when None.

    Returns:
        The text document.

    Raises:
        EmptyInputError: If `cards` is empty.
        InputError: If the title contains a line break.
        CardValidationError: If any card is invalid.
        DimensionError: If the cards differ in dimensions.
    """
    params = params or TextExportParams()
    if LINE_BREAKS & set(params.title):
        raise InputError(f"title must be a single line: {params.title!r}")
    dimensions = validate_card_set(cards)

    lines = [
        f"{TITLE_PREFIX}{params.title or DEFAULT_TITLE}",
        f"{CARDS_PREFIX}{len(cards)}",
        f"{HOLES_PREFIX}{dimensions.hole_count}",
        "",
    ]

    for index, card in enumerate(cards):
        lines.append(f"Card {card.number}:")
        for row in card.matrix:
            lines.append(
                "".join(params.hole_char if cell == 1 else params.no_hole_char for cell in row)
            )
        if index < len(cards) - 1:
            lines.append("")

    logger.info(f"Exported {len(cards)} cards to text")
    return "\n".join(lines) + "\n"


def _header_value(lines: list[str], index: int, prefix: str, name: str) -> str:
    line = lines[index]
    if not line.startswith(prefix):
        raise ParseFormatError(f"missing {name} header on line {index + 1}")
    return line[len(prefix) :]


def _header_int(lines: list[str], index: int, prefix: str, name: str) -> int:
    raw = _header_value(lines, index, prefix, name).strip()
    try:
        value = int(raw)
    except ValueError:
        raise ParseFormatError(
            f"invalid {name} value on line {index + 1}: {raw!r}"
        ) from None
    if value < 0:
        raise ParseFormatError(f"invalid {name} value on line {index + 1}: {value}")
    return value


def _first_row_width(lines: list[str]) -> int | None:
    for index in range(3, len(lines) - 1):
        if _CARD_HEADER_RE.match(lines[index]):
            return len(lines[index + 1])
    return None


def _resolve_dimensions(
    holes_per_card: int, dimensions: CardDimensions | None, lines: list[str]
) -> CardDimensions:
    if dimensions is not None:
        if dimensions.hole_count != holes_per_card:
            raise ParseFormatError(
                f"holes per card ({holes_per_card}) does not match "
                f"{dimensions.label} cards ({dimensions.hole_count})"
            )
        return dimensions

    card_type = card_type_for_hole_count(holes_per_card)
    if card_type is not None:
        return get_card_dimensions(card_type)

    # Not a catalog layout: the first row gives the width
    width = _first_row_width(lines)
    if not width or holes_per_card < width or holes_per_card % width != 0:
        raise ParseFormatError(
            f"cannot infer card layout with {holes_per_card} holes per card "
            f"from a first row of width {width or 0}"
        )
    return CardDimensions(width=width, height=holes_per_card // width)


def _parse_row(line: str, card_number: int, row: int, width: int) -> list[int]:
    if len(line) != width:
        raise ParseFormatError(
            f"card {card_number} row {row + 1} has incorrect width: "
            f"expected {width}, got {len(line)}"
        )

    cells = []
    for col, char in enumerate(line):
        if char in HOLE_CHARS:
            cells.append(1)
        elif char in NO_HOLE_CHARS:
            cells.append(0)
        else:
            raise ParseFormatError(
                f"invalid character {char!r} in card {card_number} row {row + 1} "
                f"col {col + 1} (expected #, O, or .)"
            )
    return cells


def parse_cards_text(
    content: str, dimensions: CardDimensions | None = None
) -> ParseResult:
    """Parse the plain-text format back into cards.

    Args:
        content: Text document.
        dimensions: Card geometry to expect. When None, it is looked up
            from the "Holes per card" header among the known card types,
            or else inferred from the width of the first card row.

    Returns:
        ParseResult with the header values and the cards, renumbered
        1..N in file order.

    Raises:
        ParseFormatError: If the text violates the grammar. The message
            names the offending line, card, row and column where possible.
        EmptyInputError: If the header declares zero cards.
    """
    lines = [line.removesuffix("\r") for line in content.split("\n")]
    if len(lines) < 4:
        raise ParseFormatError("invalid file format: too few lines")

    title = _header_value(lines, 0, TITLE_PREFIX, "Title")
    total_cards = _header_int(lines, 1, CARDS_PREFIX, "Cards")
    holes_per_card = _header_int(lines, 2, HOLES_PREFIX, "Holes per card")

    if total_cards == 0:
        raise EmptyInputError("file declares no cards")

    dims = _resolve_dimensions(holes_per_card, dimensions, lines)

    cards: list[Card] = []
    index = 3
    while index < len(lines) and len(cards) < total_cards:
        line = lines[index]
        if not line.strip():
            index += 1
            continue

        if not _CARD_HEADER_RE.match(line):
            raise ParseFormatError(
                f"expected Card header on line {index + 1}, got: {line}"
            )
        index += 1

        card_number = len(cards) + 1
        matrix = []
        for row in range(dims.height):
            if index >= len(lines):
                raise ParseFormatError(
                    f"unexpected end of file while parsing card {card_number} row {row + 1}"
                )
            matrix.append(_parse_row(lines[index], card_number, row, dims.width))
            index += 1

        card = Card(
            number=card_number, width=dims.width, height=dims.height, matrix=matrix
        )
        try:
            validate_card(card)
        except CardValidationError as e:
            raise ParseFormatError(f"invalid card {card_number}: {e}") from e
        cards.append(card)

    if len(cards) != total_cards:
        raise ParseFormatError(
            f"expected {total_cards} cards but found {len(cards)}"
        )

    logger.info(f"Parsed {len(cards)} {dims.label} cards from text")
    return ParseResult(
        title=title,
        total_cards=total_cards,
        holes_per_card=holes_per_card,
        cards=cards,
    )
