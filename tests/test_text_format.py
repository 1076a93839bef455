import pytest

from loom_punchcards.exceptions import (
    DimensionError,
    EmptyInputError,
    InputError,
    ParseFormatError,
)
from loom_punchcards.models import Card, CardDimensions, TextExportParams
from loom_punchcards.text_format import export_cards_text, parse_cards_text


def text_document(cards, declared=None, title="Test", holes=208):
    """Build a text document from lists of row strings."""
    lines = [
        f"Title: {title}",
        f"Cards: {len(cards) if declared is None else declared}",
        f"Holes per card: {holes}",
        "",
    ]
    for number, rows in enumerate(cards, 1):
        lines.append(f"Card {number}:")
        lines.extend(rows)
        lines.append("")
    return "\n".join(lines)


BLANK_CARD = ["." * 26] * 8


def test_export_header_and_rows(make_card):
    text = export_cards_text([make_card(1, fill=1), make_card(2, fill=0)])
    lines = text.split("\n")
    assert lines[:5] == [
        "Title: Untitled Pattern",
        "Cards: 2",
        "Holes per card: 208",
        "",
        "Card 1:",
    ]
    assert lines[5] == "#" * 26
    assert lines[13] == ""
    assert lines[14] == "Card 2:"
    assert lines[15] == "." * 26
    assert text.endswith("." * 26 + "\n")


def test_export_uses_title_and_glyphs(tiny_card):
    params = TextExportParams(title="Rose", hole_char="O", no_hole_char="-")
    text = export_cards_text([tiny_card], params)
    assert text.splitlines()[0] == "Title: Rose"
    assert text.splitlines()[-1] == "O-"


def test_export_empty():
    with pytest.raises(EmptyInputError):
        export_cards_text([])


def test_export_mixed_dimensions(make_card):
    with pytest.raises(DimensionError):
        export_cards_text([make_card(1), make_card(2, width=50, height=12)])


def test_round_trip(card_set):
    result = parse_cards_text(export_cards_text(card_set))
    assert result.cards == card_set
    assert result.title == "Untitled Pattern"
    assert result.total_cards == 3
    assert result.holes_per_card == 208


def test_round_trip_large_cards(make_card):
    cards = [make_card(1, width=50, height=12), make_card(2, width=50, height=12, fill=1)]
    assert parse_cards_text(export_cards_text(cards)).cards == cards


def test_round_trip_with_o_glyph(card_set):
    params = TextExportParams(hole_char="O")
    assert parse_cards_text(export_cards_text(card_set, params)).cards == card_set


def test_parse_accepts_o_variants():
    rows = ["O" + "o" + "#" + "." * 23] + ["." * 26] * 7
    card = parse_cards_text(text_document([rows])).cards[0]
    assert card.matrix[0][:4] == [1, 1, 1, 0]
    assert card.count_holes() == 3


def test_parse_short_row():
    rows = ["." * 25] + ["." * 26] * 7
    with pytest.raises(ParseFormatError, match="card 1 row 1 has incorrect width"):
        parse_cards_text(text_document([rows]))


def test_parse_invalid_character():
    rows = ["." * 25 + "x"] + ["." * 26] * 7
    with pytest.raises(ParseFormatError, match="invalid character 'x' in card 1 row 1 col 26"):
        parse_cards_text(text_document([rows]))


def test_parse_too_few_cards():
    with pytest.raises(ParseFormatError, match="expected 2 cards but found 1"):
        parse_cards_text(text_document([BLANK_CARD], declared=2))


def test_parse_stops_after_declared_count():
    trailing = ["not a card at all"]
    result = parse_cards_text(text_document([BLANK_CARD, trailing], declared=1))
    assert len(result.cards) == 1


def test_parse_renumbers_cards():
    document = text_document([BLANK_CARD, BLANK_CARD]).replace("Card 2:", "Card 7:")
    assert [c.number for c in parse_cards_text(document).cards] == [1, 2]


def test_parse_zero_cards():
    with pytest.raises(EmptyInputError):
        parse_cards_text("Title: x\nCards: 0\nHoles per card: 208\n\n")


@pytest.mark.parametrize(
    "content",
    [
        "Title: x\nCards: 1",
        "Name: x\nCards: 1\nHoles per card: 208\n\n",
        "Title: x\nCards: many\nHoles per card: 208\n\n",
    ],
)
def test_parse_bad_header(content):
    with pytest.raises(ParseFormatError):
        parse_cards_text(content)


def test_parse_unknown_hole_count():
    with pytest.raises(ParseFormatError, match="cannot infer card layout"):
        parse_cards_text(text_document([BLANK_CARD], holes=100))


def test_parse_with_explicit_dimensions():
    dims = CardDimensions(width=2, height=1)
    result = parse_cards_text(text_document([["#."]], holes=2), dims)
    assert result.cards[0].matrix == [[1, 0]]


def test_parse_dimensions_must_match_header():
    with pytest.raises(ParseFormatError, match="does not match"):
        parse_cards_text(text_document([BLANK_CARD]), CardDimensions(width=2, height=1))


def test_parse_missing_card_header():
    document = text_document([BLANK_CARD]).replace("Card 1:", "Kard 1:")
    with pytest.raises(ParseFormatError, match="expected Card header"):
        parse_cards_text(document)


def test_parse_truncated_card():
    with pytest.raises(ParseFormatError, match="unexpected end of file"):
        parse_cards_text(text_document([BLANK_CARD[:3]]).rstrip("\n"))


@pytest.mark.parametrize(
    "width, height, matrices",
    [
        (2, 1, [[[1, 0]]]),
        (3, 2, [[[1, 0, 1], [0, 1, 0]], [[0, 0, 0], [1, 1, 1]]]),
    ],
)
def test_round_trip_non_catalog_dimensions(width, height, matrices):
    cards = [
        Card(number=n, width=width, height=height, matrix=m)
        for n, m in enumerate(matrices, 1)
    ]
    result = parse_cards_text(export_cards_text(cards))
    assert result.cards == cards
    assert result.holes_per_card == width * height


def test_parse_inferred_width_must_divide_holes():
    with pytest.raises(ParseFormatError, match="cannot infer card layout"):
        parse_cards_text(text_document([["#."]], holes=7))


def test_parse_inferred_dimensions_checks_every_row():
    document = text_document([["#..", "#."]], holes=6)
    with pytest.raises(ParseFormatError, match="card 1 row 2 has incorrect width"):
        parse_cards_text(document)


def test_export_rejects_multiline_title(card_set):
    params = TextExportParams().model_copy(update={"title": "Rose\nGarden"})
    with pytest.raises(InputError, match="single line"):
        export_cards_text(card_set, params)


def test_parse_accepts_crlf_line_endings(card_set):
    text = export_cards_text(card_set).replace("\n", "\r\n")
    assert parse_cards_text(text).cards == card_set


def test_title_with_unicode_separators_round_trips(tiny_card):
    params = TextExportParams(title="Rose\x0cGarden\u2028No. 5")
    result = parse_cards_text(export_cards_text([tiny_card], params))
    assert result.title == "Rose\x0cGarden\u2028No. 5"
    assert result.cards == [tiny_card]
