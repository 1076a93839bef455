"""Card construction from binary grids.

This module cuts a dithered binary grid into Jacquard loom punchcards of
a configured CardDimensions. Two strategies are available:

- row reshape (canonical): every grid row holds exactly width × height
  cells and becomes one card, filled left to right, top to bottom.
- row split: the grid is as wide as a card and every `height` consecutive
  rows form one card, the last one zero-padded.

It also holds the card invariant check used before every export.
"""

import logging
from collections.abc import Sequence

import numpy as np

from loom_punchcards.exceptions import (
    CardValidationError,
    DimensionError,
    EmptyInputError,
)
from loom_punchcards.models import Card, CardDimensions, CardStrategy

logger = logging.getLogger(__name__)


def required_grid_width(
    dimensions: CardDimensions, strategy: CardStrategy = CardStrategy.ROW_RESHAPE
) -> int:
    """Width a binary grid must have to be cut with `strategy`.

    Args:
        dimensions: Card geometry.
        strategy: Grid-to-card strategy.

    Returns:
        width × height for row reshape, the card width for row split.
    """
    if strategy == CardStrategy.ROW_SPLIT:
        return dimensions.width
    return dimensions.hole_count


def _check_grid(grid: np.ndarray) -> tuple[int, int]:
    if grid.ndim != 2 or grid.shape[0] == 0 or grid.shape[1] == 0:
        raise EmptyInputError("empty matrix provided")
    return grid.shape[0], grid.shape[1]


def reshape_rows_to_cards(
    grid: np.ndarray, dimensions: CardDimensions
) -> list[Card]:
    """Turn each grid row into one card.

    Cell (row, col) of card n is taken from source row n - 1 at index
    row × width + col.

    Args:
        grid: 2D binary grid whose width is dimensions.hole_count.
        dimensions: Card geometry.

    Returns:
        One card per grid row, numbered from 1 in row order.

    Raises:
        EmptyInputError: If the grid has no rows or columns.
        DimensionError: If the grid width is not width × height.
    """
    image_height, image_width = _check_grid(grid)

    expected = dimensions.hole_count
    if image_width != expected:
        raise DimensionError(
            f"image width ({image_width}) does not match expected width "
            f"({expected} = {dimensions.width} x {dimensions.height})"
        )

    cards = []
    for index in range(image_height):
        matrix = grid[index].reshape(dimensions.height, dimensions.width)
        cards.append(
            Card(
                number=index + 1,
                width=dimensions.width,
                height=dimensions.height,
                matrix=matrix.tolist(),
            )
        )
    return cards


def split_rows_to_cards(grid: np.ndarray, dimensions: CardDimensions) -> list[Card]:
    """Stack consecutive grid rows into cards.

    Args:
        grid: 2D binary grid whose width is dimensions.width.
        dimensions: Card geometry.

    Returns:
        ceil(rows / height) cards numbered from 1; the last card is padded
        with blank rows when the grid height is not a multiple of the card
        height.

    Raises:
        EmptyInputError: If the grid has no rows or columns.
        DimensionError: If the grid width is not the card width.
    """
    image_height, image_width = _check_grid(grid)

    if image_width != dimensions.width:
        raise DimensionError(
            f"image width ({image_width}) does not match expected width "
            f"({dimensions.width})"
        )

    cards = []
    for number, start in enumerate(range(0, image_height, dimensions.height), 1):
        block = grid[start : start + dimensions.height]
        matrix = np.zeros((dimensions.height, dimensions.width), dtype=grid.dtype)
        matrix[: block.shape[0]] = block
        cards.append(
            Card(
                number=number,
                width=dimensions.width,
                height=dimensions.height,
                matrix=matrix.tolist(),
            )
        )
    return cards


def build_cards(
    grid: np.ndarray,
    dimensions: CardDimensions,
    strategy: CardStrategy = CardStrategy.ROW_RESHAPE,
) -> list[Card]:
    """Cut a binary grid into a sequence of cards.

    Cell values are not re-checked here; the grid is expected to come from
    the ditherer. Use `validate_card` before exporting.

    Args:
        grid: 2D binary grid (1 = hole).
        dimensions: Card geometry.
        strategy: Grid-to-card strategy.

    Returns:
        Cards numbered 1..N.
    """
    grid = np.asarray(grid)
    if strategy == CardStrategy.ROW_SPLIT:
        cards = split_rows_to_cards(grid, dimensions)
    else:
        cards = reshape_rows_to_cards(grid, dimensions)

    logger.info(
        f"Built {len(cards)} {dimensions.label} cards using {CardStrategy(strategy).value}"
    )
    return cards


def validate_card(card: Card) -> None:
    """Check a card's shape and cell values.

    Raises:
        CardValidationError: If the dimensions are not positive, the row
            count differs from the height, a row length differs from the
            width, or a cell is not 0 or 1.
    """
    if card.width <= 0 or card.height <= 0:
        raise CardValidationError(
            f"invalid card dimensions: {card.width}x{card.height}"
        )

    if len(card.matrix) != card.height:
        raise CardValidationError(
            f"matrix height ({len(card.matrix)}) does not match card height ({card.height})"
        )

    for y, row in enumerate(card.matrix):
        if len(row) != card.width:
            raise CardValidationError(
                f"row {y} width ({len(row)}) does not match card width ({card.width})"
            )
        for x, value in enumerate(row):
            if value != 0 and value != 1:
                raise CardValidationError(
                    f"invalid value at ({x},{y}): {value} (must be 0 or 1)"
                )


def check_same_dimensions(cards: Sequence[Card]) -> None:
    """Check that a non-empty card sequence shares one geometry.

    Raises:
        DimensionError: If the cards have different dimensions.
    """
    first = cards[0]
    for card in cards[1:]:
        if (card.width, card.height) != (first.width, first.height):
            raise DimensionError(
                f"card {card.number} is {card.width}x{card.height}, "
                f"expected {first.width}x{first.height} like card {first.number}"
            )


def validate_card_set(cards: Sequence[Card]) -> CardDimensions:
    """Validate every card and check they share one geometry.

    Args:
        cards: Cards to export.

    Returns:
        The common card dimensions.

    Raises:
        EmptyInputError: If there are no cards.
        CardValidationError: If any card is invalid.
        DimensionError: If the cards have different dimensions.
    """
    if not cards:
        raise EmptyInputError("no cards to export")

    for card in cards:
        try:
            validate_card(card)
        except CardValidationError as e:
            raise CardValidationError(f"invalid card {card.number}: {e}") from e

    check_same_dimensions(cards)
    return cards[0].dimensions


def invert_cards(cards: Sequence[Card]) -> list[Card]:
    """Return inverted copies of the cards, leaving the originals untouched."""
    inverted = []
    for card in cards:
        copy = card.clone()
        copy.invert()
        inverted.append(copy)
    return inverted
