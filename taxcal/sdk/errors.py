"""Error types for tax rule configuration and calculation.

Every failure raised by the SDK is a TaxCalError. Each carries a `status`
(400 for "you sent something wrong", 404 for "nothing configured") and a
`kind` used to build problem-details responses (see problems.py).
"""

from typing import Optional


class TaxCalError(Exception):
    """Base class for all rejected tax requests."""

    status = 400
    kind = "validation"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TaxValidationError(TaxCalError):
    """Request or configuration rejected as invalid (400)."""
    pass


class NegativeGrossError(TaxValidationError):
    """Raised when a gross salary below zero reaches the calculator."""

    def __init__(self, gross):
        super().__init__("Gross salary must be non-negative.")
        self.gross = gross


class InvalidGrossError(TaxValidationError):
    """Raised when a gross salary is not a finite number."""

    def __init__(self, gross):
        super().__init__(f"Gross salary must be a finite number, got {gross!r}.")
        self.gross = gross


class InvalidCountryCodeError(TaxValidationError):
    """Raised when a country code is not exactly two letters."""
    pass


class MalformedRuleError(TaxValidationError):
    """Raised when rule input cannot be parsed (unknown kind, bad number, wrong shape)."""
    pass


class RuleValidationError(TaxValidationError):
    """A parsed rule was rejected by validate_rule()."""
    pass


class EmptyRuleError(RuleValidationError):
    """Rule has no tax items."""

    def __init__(self):
        super().__init__("At least one tax item is required.")


class TooManyProgressiveError(RuleValidationError):
    """Rule has more than one progressive tax item."""

    def __init__(self, count: int):
        super().__init__("At most one progressive tax item is allowed per country.")
        self.count = count


class InvalidItemParametersError(RuleValidationError):
    """A tax item is missing, or has out-of-range, kind-specific parameters."""

    def __init__(self, item_index: int, item_name: str, kind: str, reason: str):
        super().__init__(reason)
        self.item_index = item_index
        self.item_name = item_name
        self.item_kind = kind
        self.reason = reason


class CountryNotConfiguredError(TaxCalError):
    """No rule has been configured for the requested country (404)."""

    status = 404
    kind = "not-found"

    def __init__(self, country_code: str):
        super().__init__(f"No tax configuration for country {country_code}.")
        self.country_code = country_code


class CountryCodeMismatchError(ValueError):
    """Store key and the rule's own country code disagree (caller bug)."""

    def __init__(self, key: str, rule_country_code: Optional[str]):
        super().__init__(
            f"Country code '{key}' does not match rule country code '{rule_country_code}'."
        )
        self.key = key
        self.rule_country_code = rule_country_code


class RulesFileNotFoundError(Exception):
    """Raised when the configured rules file does not exist."""
    pass
