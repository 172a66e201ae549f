"""Tests for structural search classification and number formatting."""

import pytest

from src.tcg_catalog.domain.search import (
    NO_NUMBER_PLACEHOLDER,
    SearchKind,
    format_collector_number,
    format_item_subtitle,
    matches,
    normalize_number,
    parse_search,
)


class TestParseSearch:
    def test_exact_number(self) -> None:
        intent = parse_search("71/182")
        assert intent.kind == SearchKind.EXACT_NUMBER
        assert intent.number == "071"
        assert intent.total == 182

    def test_leading_zeros_classify_identically(self) -> None:
        assert parse_search("071/182") == parse_search("71/182")

    def test_prefix_number(self) -> None:
        intent = parse_search("71/")
        assert intent.kind == SearchKind.PREFIX_NUMBER
        assert intent.number == "071"
        assert intent.total is None

    def test_plain_number(self) -> None:
        intent = parse_search(" 7 ")
        assert intent.kind == SearchKind.PLAIN_NUMBER
        assert intent.number == "007"

    @pytest.mark.parametrize("raw", ["Pikachu", "71a", "/182", "71/182/3", "sv 71"])
    def test_everything_else_is_text(self, raw) -> None:
        intent = parse_search(raw)
        assert intent.kind == SearchKind.TEXT
        assert intent.text == raw
        assert not intent.is_numeric

    def test_empty(self) -> None:
        assert parse_search("   ").is_empty
        assert parse_search(None).is_empty


class TestNormalizeNumber:
    @pytest.mark.parametrize(
        "raw,expected",
        [("71", "071"), ("0071", "071"), ("7", "007"), ("0", "000"), ("1234", "1234")],
    )
    def test_normalize(self, raw, expected) -> None:
        assert normalize_number(raw) == expected


class TestMatches:
    def test_exact_requires_total(self) -> None:
        intent = parse_search("71/182")
        assert matches(intent, "071", 182, "Pikachu")
        assert not matches(intent, "071", 198, "Pikachu")

    def test_prefix_ignores_total(self) -> None:
        assert matches(parse_search("71/"), "71", 198, "Pikachu")

    def test_text_is_case_insensitive_substring(self) -> None:
        assert matches(parse_search("chu"), "71", 198, "PikaCHU")
        assert not matches(parse_search("char"), "71", 198, "Pikachu")

    def test_item_without_number_never_matches_numeric(self) -> None:
        assert not matches(parse_search("71"), None, 198, "Pikachu")


class TestFormatting:
    def test_collector_number(self) -> None:
        assert format_collector_number("7", 182) == "007/182"
        assert format_collector_number("71", None) == "071"
        assert format_collector_number(None, 182) == NO_NUMBER_PLACEHOLDER

    def test_subtitle(self) -> None:
        assert format_item_subtitle("71", 182, "Base") == "071/182 · Base"
        assert format_item_subtitle("71", 182, None) == "071/182"
