"""Configure and calculate operations over a rule store.

This is the layer the CLI and MCP server call. It checks country codes,
runs validate_rule() before any write, resolves rules from the store, and
runs the calculator. Failures are raised as TaxCalError subclasses; there
is no partial success.
"""

import logging
from decimal import Decimal
from typing import Any, Union

from .errors import CountryNotConfiguredError, MalformedRuleError
from .schemas import CountryTaxRule, TaxCalculationResult, parse_rule
from .store import InMemoryTaxRuleStore
from .taxes import calculate, validate_country_code, validate_rule

logger = logging.getLogger(__name__)


def configure_tax_rule(rule: CountryTaxRule, store: InMemoryTaxRuleStore) -> CountryTaxRule:
    """Validate a rule and store it, replacing any previous rule for the country.

    Returns:
        The stored rule (country code normalized)

    Raises:
        InvalidCountryCodeError: Country code is not two letters
        RuleValidationError: Rule rejected (store is not written)
    """
    code = validate_country_code(rule.country_code)
    if code != rule.country_code:
        rule = rule.model_copy(update={"country_code": code})

    error = validate_rule(rule)
    if error is not None:
        logger.warning(f"Rejected rule for {code}: {error}")
        raise error

    store.save_or_replace(code, rule)
    logger.info(f"Configured {code} with {len(rule.tax_items)} tax item(s)")
    return rule


def configure_tax_rule_from_dict(data: Any, store: InMemoryTaxRuleStore) -> CountryTaxRule:
    """Parse a {countryCode, taxItems} mapping and configure it.

    Raises:
        InvalidCountryCodeError: Country code is not two letters
        MalformedRuleError: Input cannot be parsed into a rule
        RuleValidationError: Rule rejected (store is not written)
    """
    if not isinstance(data, dict):
        raise MalformedRuleError("Request body is required.")

    code = validate_country_code(data.get("countryCode", data.get("country_code")))
    tax_items = data.get("taxItems", data.get("tax_items"))
    return configure_tax_rule(parse_rule(code, tax_items), store)


def calculate_tax(
    country_code: str,
    gross: Union[Decimal, int, float, str],
    store: InMemoryTaxRuleStore,
) -> TaxCalculationResult:
    """Calculate taxes for a gross salary using the country's configured rule.

    Raises:
        InvalidCountryCodeError: Country code is not two letters
        CountryNotConfiguredError: No rule stored for the country
        NegativeGrossError: gross < 0
        MalformedRuleError: gross is not a number
    """
    code = validate_country_code(country_code)
    gross = to_decimal(gross)

    rule = store.get(code)
    if rule is None:
        raise CountryNotConfiguredError(code)

    return calculate(gross, rule)


def to_decimal(value: Union[Decimal, int, float, str]) -> Decimal:
    """Convert user input to Decimal (floats via their string form).

    Raises:
        MalformedRuleError: If value is not a finite number
    """
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise MalformedRuleError(f"Invalid amount: {value!r}")
    else:
        try:
            result = Decimal(str(value).strip())
        except ArithmeticError as e:
            raise MalformedRuleError(f"Invalid amount: {value!r}") from e

    if not result.is_finite():
        raise MalformedRuleError(f"Invalid amount: {value!r}")
    return result
