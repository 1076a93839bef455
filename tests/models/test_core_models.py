import pytest
from pydantic import ValidationError

from loom_punchcards.exceptions import InputError
from loom_punchcards.models import (
    Card,
    CardDimensions,
    CardType,
    Metadata,
    card_type_for_hole_count,
    get_card_dimensions,
    validate_card_type,
)


def test_card_dimensions_properties(valid_dimensions):
    assert valid_dimensions.hole_count == 208
    assert valid_dimensions.label == "26x8"


@pytest.mark.parametrize("kwargs", [{"width": 0, "height": 8}, {"width": 26, "height": -1}])
def test_card_dimensions_validation_raises(kwargs):
    with pytest.raises(ValidationError):
        CardDimensions(**kwargs)


def test_card_count_holes(checker_card):
    assert checker_card.count_holes() == 3


def test_card_get_row(checker_card):
    assert checker_card.get_row(1) == [0, 1, 0]


@pytest.mark.parametrize("index", [-1, 2])
def test_card_get_row_out_of_bounds(checker_card, index):
    with pytest.raises(IndexError):
        checker_card.get_row(index)


@pytest.mark.parametrize(
    "x, y, expected",
    [(0, 0, True), (1, 0, False), (1, 1, True), (3, 0, False), (0, -1, False)],
)
def test_card_is_hole_punched(checker_card, x, y, expected):
    assert checker_card.is_hole_punched(x, y) is expected


def test_card_clone_is_independent(checker_card):
    copy = checker_card.clone()
    copy.invert()
    assert checker_card.matrix == [[1, 0, 1], [0, 1, 0]]
    assert copy.matrix == [[0, 1, 0], [1, 0, 1]]


def test_card_invert_twice_restores(checker_card):
    original = checker_card.clone()
    checker_card.invert()
    checker_card.invert()
    assert checker_card == original


def test_card_is_frozen(checker_card):
    with pytest.raises(ValidationError):
        checker_card.number = 2


def test_card_binary_string(checker_card):
    assert checker_card.binary_string() == "Card #1:\n█·█\n·█·\n"


def test_card_number_must_be_positive():
    with pytest.raises(ValidationError):
        Card(number=0, width=1, height=1, matrix=[[0]])


def test_metadata_defaults():
    m = Metadata()
    assert m.total_cards == 0
    assert m.holes_per_card == []
    assert m.average_density == 0.0


@pytest.mark.parametrize(
    "card_type, width, height",
    [("26x8", 26, 8), (CardType.LARGE, 50, 12)],
)
def test_get_card_dimensions(card_type, width, height):
    dims = get_card_dimensions(card_type)
    assert (dims.width, dims.height) == (width, height)


def test_validate_card_type_invalid():
    with pytest.raises(InputError, match="invalid card type: 30x10"):
        validate_card_type("30x10")


def test_card_type_for_hole_count():
    assert card_type_for_hole_count(208) == CardType.SMALL
    assert card_type_for_hole_count(600) == CardType.LARGE
    assert card_type_for_hole_count(100) is None
