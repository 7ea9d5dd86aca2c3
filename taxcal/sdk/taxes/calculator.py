"""Salary tax calculation from a country tax rule.

Pure and deterministic: no I/O, no shared state. Order of passes:

1. Fixed items: summed and subtracted from gross to get the taxable base
   (floored at zero).
2. Flat-rate items: each applied independently to the same taxable base.
3. Progressive item: the first one with brackets is applied to the taxable
   base; any further progressive items are ignored.

The breakdown keeps that order. Amounts are Decimal and never rounded;
formatting for display is the caller's job.
"""

import logging
from decimal import Decimal
from typing import Iterable, Sequence

from ..errors import InvalidGrossError, NegativeGrossError
from ..schemas import (
    CountryTaxRule,
    FixedTaxItem,
    FlatRateTaxItem,
    ProgressiveBracket,
    ProgressiveTaxItem,
    TaxBreakdownEntry,
    TaxCalculationResult,
)

logger = logging.getLogger(__name__)

PERCENT = Decimal(100)
ZERO = Decimal(0)


def calculate_progressive_tax(taxable_base: Decimal, brackets: Sequence[ProgressiveBracket]) -> Decimal:
    """Calculate marginal bracket tax on a taxable base.

    Brackets are sorted by threshold (stable, so equal thresholds keep input
    order). Each band runs from its threshold to the next bracket's threshold,
    the last one up to the base, and its rate applies only to the slice of
    base inside the band.

    Example:
        brackets (0, 10%), (10000, 20%), base 14900
        -> 10000 * 10% + 4900 * 20% = 1980
    """
    if taxable_base <= 0 or not brackets:
        return ZERO

    ordered = sorted(brackets, key=lambda b: b.threshold)
    tax = ZERO

    for i, bracket in enumerate(ordered):
        upper = ordered[i + 1].threshold if i < len(ordered) - 1 else taxable_base
        width = max(ZERO, min(taxable_base, upper) - bracket.threshold)
        tax += width * (bracket.rate_percent / PERCENT)

    return tax


def _sum(amounts: Iterable[Decimal]) -> Decimal:
    return sum(amounts, ZERO)


def calculate(gross: Decimal, rule: CountryTaxRule) -> TaxCalculationResult:
    """Calculate taxes and net salary for a gross salary under a country rule.

    The rule is assumed to have passed validate_rule(). Missing amounts or
    rates count as zero and a progressive item without brackets contributes
    nothing.

    Args:
        gross: Gross salary (must be >= 0)
        rule: Country tax rule

    Returns:
        TaxCalculationResult with taxable base, breakdown, totals and net salary

    Raises:
        InvalidGrossError: If gross is NaN, infinite or not a number
        NegativeGrossError: If gross < 0
    """
    if not isinstance(gross, Decimal):
        try:
            gross = Decimal(str(gross))
        except ArithmeticError as e:
            raise InvalidGrossError(gross) from e
    if not gross.is_finite():
        raise InvalidGrossError(gross)
    if gross < 0:
        raise NegativeGrossError(gross)

    breakdown = []

    # Fixed: subtract from gross to get taxable base
    fixed_sum = ZERO
    for item in rule.tax_items:
        if isinstance(item, FixedTaxItem):
            amount = item.amount if item.amount is not None else ZERO
            fixed_sum += amount
            breakdown.append(TaxBreakdownEntry(name=item.name, amount=amount))

    taxable_base = max(ZERO, gross - fixed_sum)

    # Flat-rate: each against the same base (no compounding)
    for item in rule.tax_items:
        if isinstance(item, FlatRateTaxItem):
            rate = item.rate_percent if item.rate_percent is not None else ZERO
            breakdown.append(TaxBreakdownEntry(name=item.name, amount=taxable_base * (rate / PERCENT)))

    # Progressive: first item with brackets only
    for item in rule.tax_items:
        if isinstance(item, ProgressiveTaxItem) and item.brackets:
            amount = calculate_progressive_tax(taxable_base, item.brackets)
            breakdown.append(TaxBreakdownEntry(name=item.name, amount=amount))
            break

    total_taxes = _sum(entry.amount for entry in breakdown)
    net_salary = gross - total_taxes

    logger.debug(
        f"{rule.country_code}: gross={gross} fixed={fixed_sum} base={taxable_base} "
        f"taxes={total_taxes} net={net_salary}"
    )

    return TaxCalculationResult(
        gross=gross,
        taxable_base=taxable_base,
        total_taxes=total_taxes,
        breakdown=tuple(breakdown),
        net_salary=net_salary,
    )
