"""Tests for the in-memory rule store."""

import threading
from decimal import Decimal

import pytest

from taxcal.sdk.errors import CountryCodeMismatchError
from taxcal.sdk.schemas import CountryTaxRule, FixedTaxItem
from taxcal.sdk.store import InMemoryTaxRuleStore


def make_rule(code: str, amount: str = "100") -> CountryTaxRule:
    return CountryTaxRule(
        country_code=code,
        tax_items=(FixedTaxItem(name="Fee", amount=Decimal(amount)),),
    )


@pytest.fixture
def store():
    return InMemoryTaxRuleStore()


class TestStore:
    """get / save_or_replace semantics."""

    def test_missing_country_returns_none(self, store):
        assert store.get("DE") is None
        assert "DE" not in store

    def test_case_insensitive_keys(self, store):
        rule = make_rule("de")
        store.save_or_replace(" De ", rule)

        assert store.get("DE") is rule
        assert store.get("de") is rule
        assert store.country_codes() == ["DE"]

    def test_save_replaces_whole_rule(self, store):
        store.save_or_replace("DE", make_rule("DE", "100"))
        replacement = make_rule("DE", "200")
        store.save_or_replace("de", replacement)

        assert store.get("DE") is replacement
        assert len(store) == 1

    def test_key_mismatch_rejected(self, store):
        with pytest.raises(CountryCodeMismatchError):
            store.save_or_replace("FR", make_rule("DE"))

        assert len(store) == 0

    def test_country_codes_sorted(self, store):
        for code in ["ES", "DE", "FR"]:
            store.save_or_replace(code, make_rule(code))

        assert store.country_codes() == ["DE", "ES", "FR"]

    def test_concurrent_writers_and_readers(self, store):
        """Readers only ever see a complete previously-saved rule."""
        rules = [make_rule("DE", str(i)) for i in range(50)]
        seen = []

        def writer():
            for rule in rules:
                store.save_or_replace("DE", rule)

        def reader():
            for _ in range(200):
                rule = store.get("DE")
                if rule is not None:
                    seen.append(rule)

        threads = [threading.Thread(target=writer)] + [threading.Thread(target=reader) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert store.get("DE") is rules[-1]
        assert all(any(rule is r for r in rules) for rule in seen)
