import pytest
from loom_punchcards.models import Card, CardDimensions


@pytest.fixture
def valid_dimensions():
    return CardDimensions(width=26, height=8)


@pytest.fixture
def checker_card():
    # 3×2 card, holes on a checkerboard
    return Card(number=1, width=3, height=2, matrix=[[1, 0, 1], [0, 1, 0]])
