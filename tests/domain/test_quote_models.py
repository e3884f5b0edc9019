"""Tests for quote data models and the colon-delimited encoding."""

import dataclasses

import pytest

from quotes_app.domain.models import Currency, DiscountCode, Quote, format_price, round2
from quotes_app.errors import QuoteParseError


class TestDiscountCode:
    """Test suite for discount codes."""

    @pytest.mark.parametrize("code,percentage", [
        (DiscountCode.NONE, 0),
        (DiscountCode.SILVER, 5),
        (DiscountCode.GOLD, 10),
        (DiscountCode.PLATINUM, 15),
        (DiscountCode.DIAMOND, 20),
    ])
    def test_percentages(self, code, percentage):
        """Each code carries its fixed percentage."""
        assert code.percentage == percentage

    def test_closed_set(self):
        """The set of codes is exactly the five tiers."""
        assert [code.name for code in DiscountCode] == [
            "NONE", "SILVER", "GOLD", "PLATINUM", "DIAMOND"
        ]

    def test_from_name_exact_match(self):
        assert DiscountCode.from_name("GOLD") is DiscountCode.GOLD

    def test_from_name_is_case_sensitive(self):
        with pytest.raises(QuoteParseError) as exc_info:
            DiscountCode.from_name("gold")
        assert exc_info.value.reason == "unknown_discount_code"


class TestCurrency:
    """Test suite for currencies."""

    def test_rates(self):
        assert Currency.USD.rate == 1.0
        assert Currency.EUR.rate == 1.16

    def test_from_name(self):
        assert Currency.from_name("EUR") is Currency.EUR

    def test_unknown_currency(self):
        with pytest.raises(ValueError):
            Currency.from_name("XYZ")


class TestRounding:
    """Test half-up rounding to cents."""

    @pytest.mark.parametrize("value,expected", [
        (10.0, 10.0),
        (1.005, 1.01),
        (2.675, 2.68),
        (19.994, 19.99),
        (0.0, 0.0),
        (1e30, 1e30),
    ])
    def test_round2(self, value, expected):
        assert round2(value) == expected

    @pytest.mark.parametrize("value,expected", [
        (10.0, "10.00"),
        (19.5, "19.50"),
        (123.256, "123.26"),
        (0.0, "0.00"),
        (1e30, "1000000000000000000000000000000.00"),
        (2.5e-7, "0.00"),
    ])
    def test_format_price_has_two_decimals(self, value, expected):
        assert format_price(value) == expected


class TestQuote:
    """Test suite for Quote encoding and parsing."""

    def test_encode(self):
        quote = Quote("BestPrice", 123.5, DiscountCode.GOLD)
        assert quote.encode() == "BestPrice:123.50:GOLD"

    def test_parse(self):
        quote = Quote.parse("LetsSaveBig:99.99:SILVER")
        assert quote == Quote("LetsSaveBig", 99.99, DiscountCode.SILVER)

    @pytest.mark.parametrize("quote", [
        Quote("BestPrice", 0.0, DiscountCode.NONE),
        Quote("LetsSaveBig", 10.01, DiscountCode.SILVER),
        Quote("MyFavoriteShop", 155.35, DiscountCode.DIAMOND),
        Quote("BuyItAll", 1234567.89, DiscountCode.PLATINUM),
        Quote("BigSpender", 1e30, DiscountCode.GOLD),
        Quote("BiggestSpender", 1.5e300, DiscountCode.NONE),
    ])
    def test_round_trip(self, quote):
        """Quotes with prices in cents survive encode/parse unchanged."""
        assert Quote.parse(quote.encode()) == quote

    def test_is_immutable(self):
        quote = Quote("BestPrice", 10.0, DiscountCode.NONE)
        with pytest.raises(dataclasses.FrozenInstanceError):
            quote.price = 5.0  # type: ignore[misc]

    def test_negative_price_rejected(self):
        with pytest.raises(ValueError):
            Quote("BestPrice", -0.01, DiscountCode.NONE)

    @pytest.mark.parametrize("price", [float("nan"), float("inf")])
    def test_non_finite_price_rejected(self, price):
        with pytest.raises(ValueError):
            Quote("BestPrice", price, DiscountCode.NONE)

    @pytest.mark.parametrize("name", ["Shop:One", ":", "Trailing:"])
    def test_separator_in_shop_name_rejected(self, name):
        """A name with the field separator could never be parsed back."""
        with pytest.raises(ValueError):
            Quote(name, 10.0, DiscountCode.GOLD)

    @pytest.mark.parametrize("raw,reason", [
        ("onlyonefield", "field_count"),
        ("a:b", "field_count"),
        ("a:1.00:GOLD:extra", "field_count"),
        ("name:notanumber:GOLD", "price_not_numeric"),
        ("name:nan:GOLD", "price_not_numeric"),
        ("name:inf:GOLD", "price_not_numeric"),
        ("name:1_000.00:GOLD", "price_not_numeric"),
        ("name:+1.00:GOLD", "price_not_numeric"),
        ("name: 1.00:GOLD", "price_not_numeric"),
        ("name:1e3:GOLD", "price_not_numeric"),
        ("name:1.:GOLD", "price_not_numeric"),
        ("name::GOLD", "price_not_numeric"),
        ("name:" + "9" * 400 + ".00:GOLD", "price_not_numeric"),
        ("name:-1.00:GOLD", "price_negative"),
        ("name:1.0:NOTACODE", "unknown_discount_code"),
        ("name:1.0:", "unknown_discount_code"),
    ])
    def test_parse_failures(self, raw, reason):
        """Malformed encodings raise instead of producing a partial quote."""
        with pytest.raises(QuoteParseError) as exc_info:
            Quote.parse(raw)

        error = exc_info.value
        assert error.reason == reason
        assert error.raw_data == raw
        assert error.recoverable is True
