"""Acceptance checks for country tax rules and country codes.

Checks run in a fixed order so the reported error is deterministic:
empty rule, then progressive count, then each item in list order (first
failing item wins). Validation never mutates, sorts or deduplicates.
"""

from typing import Optional

from ..errors import (
    EmptyRuleError,
    InvalidCountryCodeError,
    InvalidItemParametersError,
    RuleValidationError,
    TooManyProgressiveError,
)
from ..schemas import (
    CountryTaxRule,
    FixedTaxItem,
    FlatRateTaxItem,
    ProgressiveTaxItem,
)


def _check_item(index: int, item) -> Optional[InvalidItemParametersError]:
    if isinstance(item, FixedTaxItem):
        if item.amount is None:
            reason = f"Fixed tax item '{item.name}' must have an Amount."
        elif item.amount < 0:
            reason = f"Fixed tax item '{item.name}' must have a non-negative Amount."
        else:
            return None
    elif isinstance(item, FlatRateTaxItem):
        if item.rate_percent is None:
            reason = f"Flat-rate tax item '{item.name}' must have a RatePercent."
        elif not 0 <= item.rate_percent <= 100:
            reason = f"Flat-rate tax item '{item.name}' must have RatePercent between 0 and 100."
        else:
            return None
    elif isinstance(item, ProgressiveTaxItem):
        if not item.brackets:
            reason = f"Progressive tax item '{item.name}' must have at least one bracket."
        else:
            return None
    else:
        return None

    return InvalidItemParametersError(index, item.name, item.kind.value, reason)


def validate_rule(rule: CountryTaxRule) -> Optional[RuleValidationError]:
    """Check whether a rule is acceptable for storage.

    Returns:
        The first RuleValidationError found, or None if the rule is valid
    """
    if not rule.tax_items:
        return EmptyRuleError()

    progressive_count = sum(1 for item in rule.tax_items if isinstance(item, ProgressiveTaxItem))
    if progressive_count > 1:
        return TooManyProgressiveError(progressive_count)

    for i, item in enumerate(rule.tax_items):
        error = _check_item(i, item)
        if error is not None:
            return error

    return None


def normalize_country_code(country_code: Optional[str]) -> str:
    """Canonical store key: trimmed, upper-case."""
    return (country_code or "").strip().upper()


def validate_country_code(country_code: Optional[str]) -> str:
    """Check a country code is exactly two ASCII letters.

    Returns:
        Normalized (trimmed, upper-case) country code

    Raises:
        InvalidCountryCodeError: If blank or not two letters
    """
    code = (country_code or "").strip()
    if not code:
        raise InvalidCountryCodeError("Country code is required.")
    if len(code) != 2 or not (code.isascii() and code.isalpha()):
        raise InvalidCountryCodeError("Country code must be two letters (e.g. DE, ES).")
    return code.upper()
