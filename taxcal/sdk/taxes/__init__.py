"""taxes - Tax calculation and rule validation.

Scope:
- Salary tax calculation from a country rule (fixed, flat-rate, progressive)
- Rule acceptance checks (item count, progressive count, item parameters)
- Country code format checks

Constraints:
- Pure calculation - no store access, no config, no I/O
- Receives data, returns results (or raises/returns typed errors)

Modules:
- calculator: calculate(), calculate_progressive_tax()
- validation: validate_rule(), validate_country_code()

Usage:
    from taxcal.sdk.taxes import calculate, validate_rule

    error = validate_rule(rule)
    result = calculate(Decimal("60000"), rule)
"""

from .calculator import (
    calculate,
    calculate_progressive_tax,
)

from .validation import (
    validate_rule,
    validate_country_code,
    normalize_country_code,
)

__all__ = [
    # Calculation
    "calculate",
    "calculate_progressive_tax",
    # Validation
    "validate_rule",
    "validate_country_code",
    "normalize_country_code",
]
