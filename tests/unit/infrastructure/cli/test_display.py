import pytest
from rich.console import Console

from recogate.domain.models.recommendation import Recommendation
from recogate.infrastructure.cli.display import ConsoleDisplay


@pytest.fixture
def console():
    """A real rich Console recording output instead of writing to a terminal."""
    return Console(record=True, width=120, force_terminal=False)


@pytest.fixture
def console_display(console):
    return ConsoleDisplay(console=console)


def test_display_recommendations_renders_ranked_rows(console_display, console):
    result = (
        Recommendation(product_id="sku-1", score=0.9312, metadata={"category": "books"}),
        Recommendation(product_id="sku-2"),
    )

    console_display.display_recommendations(result, title="Recommendations for user 'u1'")

    text = console.export_text()
    assert "Recommendations for user 'u1'" in text
    assert "sku-1" in text
    assert "0.931" in text
    assert '"category": "books"' in text
    assert "sku-2" in text
    assert text.index("sku-1") < text.index("sku-2")


def test_display_error(console_display, console):
    console_display.display_error("Something went wrong")
    text = console.export_text()
    assert "Error" in text
    assert "Something went wrong" in text


def test_display_info(console_display, console):
    console_display.display_info("No recommendations available")
    assert "No recommendations available" in console.export_text()


def test_display_warning(console_display, console):
    console_display.display_warning("Careful")
    assert "Careful" in console.export_text()


def test_display_settings(console_display, console):
    console_display.display_settings({"max_attempts": 3, "api_key": "abcd****"})
    text = console.export_text()
    assert "max_attempts" in text
    assert "abcd****" in text
