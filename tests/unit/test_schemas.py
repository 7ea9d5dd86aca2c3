"""Tests for rule schemas and parsing of external (JSON/YAML-shaped) input."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from taxcal.sdk.errors import MalformedRuleError
from taxcal.sdk.schemas import (
    CountryTaxRule,
    FixedTaxItem,
    FlatRateTaxItem,
    ProgressiveTaxItem,
    TaxItemKind,
    normalize_kind,
    parse_rule,
    parse_tax_item,
)


class TestKindParsing:
    """Tax item kinds are parsed case-insensitively."""

    @pytest.mark.parametrize("raw, expected", [
        ("Fixed", TaxItemKind.FIXED),
        ("fixed", TaxItemKind.FIXED),
        ("FLATRATE", TaxItemKind.FLAT_RATE),
        ("flat rate", TaxItemKind.FLAT_RATE),
        (" Progressive ", TaxItemKind.PROGRESSIVE),
        (TaxItemKind.PROGRESSIVE, TaxItemKind.PROGRESSIVE),
    ])
    def test_known(self, raw, expected):
        assert normalize_kind(raw) == expected

    @pytest.mark.parametrize("raw", ["Percent", "", None, 3])
    def test_unknown(self, raw):
        assert normalize_kind(raw) is None


class TestParseTaxItem:
    """parse_tax_item() builds the matching variant."""

    def test_fixed(self):
        item = parse_tax_item({"type": "fixed", "name": "Fee", "amount": 1500})

        assert isinstance(item, FixedTaxItem)
        assert item.amount == Decimal("1500")
        assert item.kind == TaxItemKind.FIXED

    def test_flat_rate_float_keeps_decimal_text(self):
        item = parse_tax_item({"type": "FlatRate", "name": "Health", "ratePercent": 7.3})

        assert isinstance(item, FlatRateTaxItem)
        assert item.rate_percent == Decimal("7.3")

    def test_progressive_with_snake_case_fields(self):
        item = parse_tax_item({
            "type": "Progressive",
            "name": "Income",
            "brackets": [{"threshold": "0", "rate_percent": "10"}, {"threshold": 10000, "ratePercent": 20}],
        })

        assert isinstance(item, ProgressiveTaxItem)
        assert [b.threshold for b in item.brackets] == [Decimal("0"), Decimal("10000")]
        assert [b.rate_percent for b in item.brackets] == [Decimal("10"), Decimal("20")]

    def test_irrelevant_fields_dropped(self):
        item = parse_tax_item({"type": "Fixed", "name": "Fee", "amount": 1, "ratePercent": 50})

        assert isinstance(item, FixedTaxItem)
        assert not hasattr(item, "rate_percent")

    @pytest.mark.parametrize("name", [None, "", "   "])
    def test_blank_name_falls_back_to_kind(self, name):
        data = {"type": "flat rate", "ratePercent": 5}
        if name is not None:
            data["name"] = name

        assert parse_tax_item(data).name == "FlatRate"

    def test_name_trimmed(self):
        assert parse_tax_item({"type": "Fixed", "name": "  Fee ", "amount": 1}).name == "Fee"

    def test_missing_parameter_allowed(self):
        """Missing kind-specific fields are for validate_rule() to report."""
        item = parse_tax_item({"type": "Fixed", "name": "Fee"})

        assert item.amount is None

    def test_unknown_kind(self):
        with pytest.raises(MalformedRuleError, match="index 2 has invalid type 'Percent'"):
            parse_tax_item({"type": "Percent", "name": "X"}, index=2)

    def test_bad_number(self):
        with pytest.raises(MalformedRuleError, match="index 0 has invalid parameters"):
            parse_tax_item({"type": "Fixed", "name": "Fee", "amount": "lots"})

    def test_not_a_mapping(self):
        with pytest.raises(MalformedRuleError, match="must be a mapping"):
            parse_tax_item(["Fixed", 100])


class TestCountryTaxRule:
    """Rule model construction."""

    def test_empty_rule_constructible(self):
        rule = CountryTaxRule(country_code="DE")

        assert rule.tax_items == ()

    def test_model_validate_normalizes_kinds(self):
        rule = CountryTaxRule.model_validate({
            "countryCode": "DE",
            "taxItems": [{"type": "FLAT RATE", "name": "Flat", "ratePercent": 5}],
        })

        assert isinstance(rule.tax_items[0], FlatRateTaxItem)

    def test_frozen(self):
        rule = CountryTaxRule(country_code="DE")

        with pytest.raises(ValidationError):
            rule.country_code = "FR"

    def test_parse_rule_keeps_order(self):
        rule = parse_rule("DE", [
            {"type": "Progressive", "name": "P", "brackets": [{"threshold": 0, "ratePercent": 1}]},
            {"type": "Fixed", "name": "F", "amount": 1},
        ])

        assert [item.name for item in rule.tax_items] == ["P", "F"]

    def test_parse_rule_requires_list(self):
        with pytest.raises(MalformedRuleError, match="must be a list"):
            parse_rule("DE", {"type": "Fixed"})

    def test_parse_rule_none_is_empty(self):
        assert parse_rule("DE", None).tax_items == ()
