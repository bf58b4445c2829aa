"""Tests for message and comparison helpers."""

from copper_pack.text import (
    add_indefinite_article,
    human_readable_list,
    initial_capital,
    strip_and_lowercase,
)


class TestHumanReadableList:
    """Tests for human_readable_list."""

    def test_empty(self) -> None:
        assert human_readable_list([]) == ""

    def test_single(self) -> None:
        assert human_readable_list(["Open"]) == "Open"

    def test_two_items(self) -> None:
        """Two items joined by the conjunction without a comma."""
        assert human_readable_list(["Price", "Timing"]) == "Price or Timing"

    def test_many_items_serial_comma(self) -> None:
        """Status options read as a sentence."""
        assert (
            human_readable_list(["Open", "Won", "Lost", "Abandoned"])
            == "Open, Won, Lost, or Abandoned"
        )

    def test_custom_conjunction(self) -> None:
        assert human_readable_list(["a", "b", "c"], conjunction="and") == "a, b, and c"


class TestAddIndefiniteArticle:
    """Tests for add_indefinite_article."""

    def test_vowel(self) -> None:
        assert add_indefinite_article("opportunity") == "an opportunity"

    def test_consonant(self) -> None:
        assert add_indefinite_article("company") == "a company"
        assert add_indefinite_article("person") == "a person"


class TestInitialCapital:
    """Tests for initial_capital."""

    def test_normalizes_casing(self) -> None:
        assert initial_capital("lOST") == "Lost"
        assert initial_capital("won") == "Won"

    def test_strips_whitespace(self) -> None:
        assert initial_capital("  abandoned ") == "Abandoned"

    def test_empty(self) -> None:
        assert initial_capital("") == ""


class TestStripAndLowercase:
    """Tests for strip_and_lowercase."""

    def test_ignores_case_spaces_and_underscores(self) -> None:
        assert strip_and_lowercase("Proposal Sent") == "proposalsent"
        assert strip_and_lowercase(" proposal_SENT ") == "proposalsent"

    def test_none_is_empty(self) -> None:
        assert strip_and_lowercase(None) == ""
