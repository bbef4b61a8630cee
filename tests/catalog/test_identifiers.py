"""Tests for slug and short-id generation."""

import pytest

from catalog_api.catalog.identifiers import SLUG_SEPARATOR, make_short_id, make_slug


class TestMakeSlug:
    """Tests for make_slug."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Electronics", "electronics"),
            ("Home & Garden", "home_garden"),
            ("  Smart   Phones ", "smart_phones"),
            ("Café Crème", "cafe_creme"),
        ],
    )
    def test_slug_from_name(self, name: str, expected: str) -> None:
        """Names are lowercased and punctuation collapses to the separator."""
        assert make_slug(name) == expected

    def test_slug_is_deterministic(self) -> None:
        """The same name always yields the same slug."""
        assert make_slug("Running Shoes") == make_slug("Running Shoes")

    def test_slug_uses_underscore(self) -> None:
        """Words are joined with an underscore."""
        assert SLUG_SEPARATOR in make_slug("Two Words")
        assert "-" not in make_slug("Two Words")


class TestMakeShortId:
    """Tests for make_short_id."""

    def test_default_length(self) -> None:
        """Short ids use the configured length."""
        assert len(make_short_id()) == 4

    def test_custom_length(self) -> None:
        """An explicit length wins over the setting."""
        assert len(make_short_id(10)) == 10

    def test_alphanumeric(self) -> None:
        """Short ids are safe to use as a folder segment."""
        for _ in range(20):
            assert make_short_id().isalnum()

    def test_random(self) -> None:
        """Consecutive ids differ."""
        ids = {make_short_id(8) for _ in range(50)}
        assert len(ids) == 50


def test_punctuation_only_name_has_empty_slug() -> None:
    """Names without letters or digits produce no slug."""
    assert make_slug("!!!") == ""
