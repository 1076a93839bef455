"""Statistics and summaries over card sets."""

from collections.abc import Sequence

from loom_punchcards.image_processing import describe_color_mode
from loom_punchcards.models import Card, Metadata
from loom_punchcards.punchcard import check_same_dimensions

PREVIEW_CARD_LIMIT = 3


def generate_metadata(cards: Sequence[Card]) -> Metadata:
    """Compute hole counts and density over a card set.

    Card geometry is taken from the first card. All cards must share it. An
    empty sequence yields an all-zero Metadata instead of raising.

    Args:
        cards: Cards in sequence order.

    Returns:
        Metadata with per-card hole counts and the average density as a
        percentage of all hole positions.

    Raises:
        DimensionError: If the cards differ in dimensions.
    """
    if not cards:
        return Metadata()

    check_same_dimensions(cards)
    first = cards[0]
    holes_per_card = [card.count_holes() for card in cards]

    total_possible = len(cards) * first.width * first.height
    density = 0.0
    if total_possible > 0:
        density = sum(holes_per_card) / total_possible * 100

    return Metadata(
        total_cards=len(cards),
        card_width=first.width,
        card_height=first.height,
        total_rows=len(cards) * first.height,
        holes_per_card=holes_per_card,
        average_density=density,
    )


def card_info(card: Card) -> str:
    """One-line description of a card, e.g. "Card #1: 26x8, 40 holes (19.2% density)"."""
    holes = card.count_holes()
    cells = card.width * card.height
    density = holes / cells * 100 if cells > 0 else 0.0
    return (
        f"Card #{card.number}: {card.width}x{card.height}, "
        f"{holes} holes ({density:.1f}% density)"
    )


def summarize_card_set(cards: Sequence[Card], color_mode: int) -> dict:
    """Build the card-set info payload shown to users.

    Args:
        cards: Cards in sequence order.
        color_mode: Dithering color mode the cards were made with.

    Returns:
        Dictionary with the color mode description, card count, card
        dimensions, total rows, formatted average density and per-card
        hole counts.
    """
    metadata = generate_metadata(cards)
    return {
        "colorMode": describe_color_mode(color_mode),
        "totalCards": metadata.total_cards,
        "cardDimensions": f"{metadata.card_width}x{metadata.card_height}",
        "totalRows": metadata.total_rows,
        "averageDensity": f"{metadata.average_density:.1f}%",
        "holesPerCard": metadata.holes_per_card,
    }


def preview_cards(cards: Sequence[Card], limit: int = PREVIEW_CARD_LIMIT) -> list[Card]:
    """Return the first `limit` cards for a quick preview."""
    return list(cards[:limit])
