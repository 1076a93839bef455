import numpy as np
import pytest

from loom_punchcards.exceptions import DecodeError, EmptyInputError, InputError
from loom_punchcards.models import (
    CardParams,
    CardSetResult,
    ExportParams,
    ExportResult,
    ImageProcessingParams,
    ImageResult,
    ProcessingParameters,
)
from loom_punchcards.pipeline import (
    create_cards,
    export_card_set,
    process_binary_image,
    process_complete_pipeline,
    validate_output_format,
)
from loom_punchcards.text_format import parse_cards_text


def test_process_binary_image_none():
    with pytest.raises(EmptyInputError):
        process_binary_image(None, ImageProcessingParams(), CardParams())


def test_process_binary_image_sizes_grid_for_cards(black_rgb_image):
    result = process_binary_image(black_rgb_image, ImageProcessingParams(), CardParams())
    assert isinstance(result, ImageResult)
    assert result.binary_grid.shape == (8, 208)


def test_process_binary_image_row_split_width(black_rgb_image):
    result = process_binary_image(
        black_rgb_image, ImageProcessingParams(), CardParams(strategy="row_split")
    )
    assert result.binary_grid.shape[1] == 26


def test_process_binary_image_fixed_height(black_rgb_image):
    params = ImageProcessingParams(target_height=3)
    result = process_binary_image(black_rgb_image, params, CardParams())
    assert result.binary_grid.shape == (3, 208)


def test_create_cards_without_grid():
    with pytest.raises(EmptyInputError):
        create_cards(ImageResult(), CardParams())


def test_create_cards_inverts():
    grid = np.ones((2, 208), dtype=np.uint8)
    result = create_cards(ImageResult(binary_grid=grid), CardParams(invert=True))
    assert isinstance(result, CardSetResult)
    assert result.metadata.holes_per_card == [0, 0]


def test_export_card_set_empty():
    with pytest.raises(EmptyInputError):
        export_card_set(CardSetResult(), ExportParams())


def test_validate_output_format_rejects_pdf():
    with pytest.raises(InputError, match="invalid format: pdf"):
        validate_output_format("pdf")


def test_complete_pipeline_svg(black_png_bytes):
    image_result, card_result, export_result = process_complete_pipeline(black_png_bytes)
    assert image_result.binary_grid.shape == (8, 208)
    assert card_result.metadata.total_cards == 8
    assert card_result.metadata.average_density == pytest.approx(100.0)
    assert isinstance(export_result, ExportResult)
    assert export_result.content_type == "image/svg+xml"
    assert export_result.filename == "punchcards.svg"
    assert export_result.content.startswith(b'<?xml version="1.0"')
    assert b'id="card-8"' in export_result.content


def test_complete_pipeline_svg_title(black_png_bytes):
    params = ProcessingParameters(export=ExportParams(title="Night"))
    _, _, export_result = process_complete_pipeline(black_png_bytes, params)
    assert b"Night #1/8" in export_result.content


def test_complete_pipeline_text_round_trips(black_png_bytes):
    params = ProcessingParameters(export=ExportParams(format="text", title="Night"))
    _, card_result, export_result = process_complete_pipeline(black_png_bytes, params)
    assert export_result.filename == "punchcards.txt"
    assert export_result.content_type.startswith("text/plain")

    parsed = parse_cards_text(export_result.content.decode("utf-8"))
    assert parsed.title == "Night"
    assert parsed.cards == card_result.cards


def test_complete_pipeline_accepts_arrays(black_rgb_image):
    params = ProcessingParameters(cards=CardParams(card_type="50x12"))
    image_result, card_result, _ = process_complete_pipeline(black_rgb_image, params)
    assert image_result.binary_grid.shape[1] == 600
    assert card_result.dimensions.label == "50x12"


def test_complete_pipeline_decode_error():
    with pytest.raises(DecodeError):
        process_complete_pipeline(b"not an image")


def test_export_card_set_rejects_multiline_title():
    grid = np.ones((1, 208), dtype=np.uint8)
    card_result = create_cards(ImageResult(binary_grid=grid), CardParams())
    params = ExportParams(format="text", title="Rose\nGarden")
    with pytest.raises(InputError, match="single line"):
        export_card_set(card_result, params)
