"""
Pipeline processing functions for image-to-punchcard conversion.

This module contains the core processing functions for the image-to-punchcard
pipeline, separating business logic from visualization and UI concerns.
Each stage takes the previous stage's result model plus its own parameters
and returns a new result model. Failures are logged and re-raised: the
pipeline never substitutes empty results for invalid data.
"""

import logging

import numpy as np

from loom_punchcards.exceptions import EmptyInputError, InputError, PunchcardError
from loom_punchcards.image_processing import decode_image, process_image
from loom_punchcards.metadata import generate_metadata
from loom_punchcards.models import (
    CardParams,
    CardSetResult,
    ExportParams,
    ExportResult,
    ImageProcessingParams,
    ImageResult,
    OutputFormat,
    ProcessingParameters,
    get_card_dimensions,
)
from loom_punchcards.punchcard import build_cards, invert_cards, required_grid_width
from loom_punchcards.svg_export import export_cards_svg
from loom_punchcards.text_format import export_cards_text

logger = logging.getLogger(__name__)

_FORMAT_INFO = {
    OutputFormat.SVG: ("image/svg+xml", "punchcards.svg"),
    OutputFormat.TEXT: ("text/plain", "punchcards.txt"),
}


def validate_output_format(value: str) -> OutputFormat:
    """Coerce an output format selector.

    Raises:
        InputError: For anything but "svg" or "text", including "pdf".
    """
    try:
        return OutputFormat(value)
    except ValueError:
        raise InputError(
            f"invalid format: {value} (must be 'svg' or 'text')"
        ) from None


def process_binary_image(
    image: np.ndarray | None,
    image_params: ImageProcessingParams,
    card_params: CardParams,
) -> ImageResult:
    """Convert a decoded image to a binary grid sized for the card geometry.

    Args:
        image: RGB(A) or grayscale image as a NumPy array.
        image_params: Color mode and optional grid height.
        card_params: Card type and strategy, which fix the grid width.

    Returns:
        ImageResult with the grayscale, resized and binary grids.

    Raises:
        EmptyInputError: If no image is given or it has no pixels.
    """
    if image is None or image.size == 0:
        logger.warning("No image provided for processing")
        raise EmptyInputError("no image provided")

    dimensions = get_card_dimensions(card_params.card_type)
    width = required_grid_width(dimensions, card_params.strategy)

    try:
        gray, resized, binary = process_image(
            image, width, image_params.target_height, image_params.color_mode
        )
    except PunchcardError as e:
        logger.error(f"Error in binary image processing: {e}")
        raise

    logger.info(
        f"Processed {gray.shape[1]}x{gray.shape[0]} image to "
        f"{binary.shape[1]}x{binary.shape[0]} matrix"
    )
    return ImageResult(grayscale=gray, resized=resized, binary_grid=binary)


def process_image_bytes(
    data: bytes, image_params: ImageProcessingParams, card_params: CardParams
) -> ImageResult:
    """Decode image bytes and convert them to a binary grid.

    Raises:
        DecodeError: If the bytes are not a readable image.
    """
    try:
        image = decode_image(data)
    except PunchcardError as e:
        logger.error(f"Error decoding image: {e}")
        raise
    return process_binary_image(image, image_params, card_params)


def create_cards(image_result: ImageResult, params: CardParams) -> CardSetResult:
    """Cut the binary grid into cards and compute their metadata.

    Args:
        image_result: Output of the image stage.
        params: Card type, strategy and inversion switch.

    Returns:
        CardSetResult with the cards numbered 1..N.

    Raises:
        EmptyInputError: If the image stage produced no grid.
        DimensionError: If the grid does not fit the card geometry.
    """
    if image_result.binary_grid is None:
        logger.warning("No binary grid provided for card building")
        raise EmptyInputError("no binary grid to build cards from")

    dimensions = get_card_dimensions(params.card_type)
    try:
        cards = build_cards(image_result.binary_grid, dimensions, params.strategy)
    except PunchcardError as e:
        logger.error(f"Error generating punchcards: {e}")
        raise

    if params.invert:
        cards = invert_cards(cards)

    return CardSetResult(
        dimensions=dimensions, cards=cards, metadata=generate_metadata(cards)
    )


def export_card_set(card_result: CardSetResult, params: ExportParams) -> ExportResult:
    """Serialize a card set to the requested format.

    The pattern title and the series size are forwarded to the exporter so
    that SVG captions read "Title #n/total".

    Args:
        card_result: Output of the card stage.
        params: Output format and exporter options.

    Returns:
        ExportResult with the encoded document.

    Raises:
        EmptyInputError: If there are no cards.
        CardValidationError: If a card is invalid.
    """
    fmt = validate_output_format(params.format)
    cards = card_result.cards

    try:
        if fmt == OutputFormat.TEXT:
            text_params = params.text.model_copy(
                update={"title": params.title or params.text.title}
            )
            document = export_cards_text(cards, text_params)
        else:
            svg_params = params.svg.model_copy(
                update={
                    "title": params.title or params.svg.title,
                    "total_cards": params.svg.total_cards or len(cards),
                }
            )
            document = export_cards_svg(cards, svg_params)
    except PunchcardError as e:
        logger.error(f"Error exporting cards: {e}")
        raise

    content_type, filename = _FORMAT_INFO[fmt]
    return ExportResult(
        content=document.encode("utf-8"),
        content_type=content_type,
        filename=filename,
        format=fmt.value,
    )


def process_complete_pipeline(
    image: bytes | np.ndarray, params: ProcessingParameters | None = None
) -> tuple[ImageResult, CardSetResult, ExportResult]:
    """Process the complete image-to-punchcard pipeline.

    Args:
        image: Encoded image bytes, or an already decoded image array.
        params: Parameters for every stage; defaults are used when None.

    Returns:
        Tuple of (image_result, card_result, export_result).

    Raises:
        PunchcardError: Any stage failure, unchanged.
    """
    params = params or ProcessingParameters()

    # Step 1: Image to binary grid
    if isinstance(image, (bytes, bytearray, memoryview)):
        image_result = process_image_bytes(bytes(image), params.image, params.cards)
    else:
        image_result = process_binary_image(image, params.image, params.cards)

    # Step 2: Card building
    card_result = create_cards(image_result, params.cards)
    logger.info(f"Generated {card_result.metadata.total_cards} punchcards")

    # Step 3: Export
    export_result = export_card_set(card_result, params.export)

    return image_result, card_result, export_result
