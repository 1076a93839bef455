"""Core domain models for loom punchcard generation."""

from enum import Enum

from pydantic import BaseModel, Field

from loom_punchcards.exceptions import InputError


class CardType(str, Enum):
    """Supported physical card layouts, named "<columns>x<rows>"."""

    SMALL = "26x8"
    LARGE = "50x12"


class CardStrategy(str, Enum):
    """How a binary grid is cut into cards.

    ROW_RESHAPE turns each grid row into one card (canonical layout).
    ROW_SPLIT stacks consecutive grid rows into a card and zero-pads the
    last partial card.
    """

    ROW_RESHAPE = "row_reshape"
    ROW_SPLIT = "row_split"


class CardDimensions(BaseModel):
    """Hole-grid shape of a physical punchcard.

    Attributes:
        width: Number of hole columns per card.
        height: Number of hole rows per card.
    """

    width: int = Field(..., ge=1, description="Hole columns per card")
    height: int = Field(..., ge=1, description="Hole rows per card")

    class Config:
        frozen = True

    @property
    def hole_count(self) -> int:
        """Total number of hole positions on one card."""
        return self.width * self.height

    @property
    def label(self) -> str:
        return f"{self.width}x{self.height}"


class Card(BaseModel):
    """A single Jacquard loom punchcard.

    The matrix holds `height` rows of `width` cells each, where 1 is a
    punched hole (thread raised) and 0 is no hole (thread lowered). Shape
    and cell values are not enforced at construction time; use
    `loom_punchcards.punchcard.validate_card` before exporting.

    Cards are frozen: fields cannot be reassigned. The only sanctioned
    mutation is `invert`, which flips the matrix cells in place.

    Attributes:
        number: Sequential 1-indexed position of the card in its set.
        width: Number of columns.
        height: Number of rows.
        matrix: Row-major binary matrix of the holes.
    """

    number: int = Field(..., ge=1, description="1-indexed card number")
    width: int = Field(..., description="Number of hole columns")
    height: int = Field(..., description="Number of hole rows")
    matrix: list[list[int]] = Field(
        default_factory=list, description="Binary hole matrix, row-major"
    )

    class Config:
        frozen = True

    @property
    def dimensions(self) -> CardDimensions:
        return CardDimensions(width=self.width, height=self.height)

    def count_holes(self) -> int:
        """Count the punched holes on the card.

        Returns:
            Number of cells equal to 1.
        """
        return sum(cell == 1 for row in self.matrix for cell in row)

    def get_row(self, row_index: int) -> list[int]:
        """Return one row of the card.

        Args:
            row_index: Zero-based row index.

        Returns:
            The requested row.

        Raises:
            IndexError: If the index is outside 0..height-1.
        """
        if row_index < 0 or row_index >= self.height:
            raise IndexError(
                f"row index {row_index} out of bounds (0-{self.height - 1})"
            )
        return self.matrix[row_index]

    def is_hole_punched(self, x: int, y: int) -> bool:
        """Check whether a hole is punched at column `x`, row `y`.

        Coordinates outside the card are reported as not punched.
        """
        if x < 0 or x >= self.width or y < 0 or y >= self.height:
            return False
        return self.matrix[y][x] == 1

    def clone(self) -> "Card":
        """Create an independent deep copy of the card."""
        return self.model_copy(deep=True)

    def invert(self) -> None:
        """Flip every cell in place so holes become blanks and vice versa."""
        for row in self.matrix:
            for x, cell in enumerate(row):
                row[x] = 1 - cell

    def binary_string(self) -> str:
        """Render the card as block characters, mainly for debugging."""
        lines = [f"Card #{self.number}:"]
        for row in self.matrix:
            lines.append("".join("█" if cell == 1 else "·" for cell in row))
        return "\n".join(lines) + "\n"


class Metadata(BaseModel):
    """Summary statistics over an ordered set of cards.

    Attributes:
        total_cards: Number of cards in the set.
        card_width: Columns per card (taken from the first card).
        card_height: Rows per card (taken from the first card).
        total_rows: total_cards multiplied by card_height.
        holes_per_card: Punched hole count of each card, in card order.
        average_density: Percentage of punched cells over all cells (0-100).
    """

    total_cards: int = Field(0, ge=0, description="Number of cards")
    card_width: int = Field(0, ge=0, description="Columns per card")
    card_height: int = Field(0, ge=0, description="Rows per card")
    total_rows: int = Field(0, ge=0, description="Total hole rows in the set")
    holes_per_card: list[int] = Field(
        default_factory=list, description="Punched holes per card"
    )
    average_density: float = Field(
        0.0, ge=0.0, le=100.0, description="Percentage of punched cells"
    )


_CARD_TYPE_DIMENSIONS: dict[CardType, CardDimensions] = {
    CardType.SMALL: CardDimensions(width=26, height=8),
    CardType.LARGE: CardDimensions(width=50, height=12),
}


def get_card_dimensions(card_type: CardType | str) -> CardDimensions:
    """Look up the hole-grid dimensions of a card type.

    Args:
        card_type: A CardType member or its string value (e.g. "26x8").

    Returns:
        The matching CardDimensions.

    Raises:
        InputError: If the card type is unknown.
    """
    return _CARD_TYPE_DIMENSIONS[validate_card_type(card_type)]


def validate_card_type(card_type: CardType | str) -> CardType:
    """Coerce a card type selector into a CardType.

    Raises:
        InputError: If the value is not one of the supported card types.
    """
    try:
        return CardType(card_type)
    except ValueError:
        choices = ", ".join(f"'{t.value}'" for t in CardType)
        raise InputError(
            f"invalid card type: {card_type} (must be one of {choices})"
        ) from None


def card_type_for_hole_count(hole_count: int) -> CardType | None:
    """Find the card type with the given number of holes per card."""
    for card_type, dims in _CARD_TYPE_DIMENSIONS.items():
        if dims.hole_count == hole_count:
            return card_type
    return None
