"""JSON shapes for results and errors.

Results use camelCase keys (gross, taxableBase, totalTaxes, breakdown,
netSalary). Errors use a problem-details object {type, title, status, detail}:
400 for validation failures, 404 when a country has no rule.
"""

from typing import Any, Dict

from .errors import TaxCalError
from .schemas import CountryTaxRule, TaxCalculationResult

PROBLEM_BASE_TYPE = "https://api.taxcal/errors/"

_TITLES = {
    "validation": "Validation Error",
    "not-found": "Not Found",
}


def problem_details(error: TaxCalError) -> Dict[str, Any]:
    """Build a problem-details dict for a rejected request."""
    return {
        "type": PROBLEM_BASE_TYPE + error.kind,
        "title": _TITLES.get(error.kind, "Error"),
        "status": error.status,
        "detail": error.message,
    }


def result_to_dict(result: TaxCalculationResult) -> Dict[str, Any]:
    """Serialize a calculation result. Decimals become strings (no precision loss)."""
    return result.model_dump(mode="json", by_alias=True)


def rule_to_dict(rule: CountryTaxRule) -> Dict[str, Any]:
    """Serialize a rule in the same shape configure accepts."""
    return rule.model_dump(mode="json", by_alias=True, exclude_none=True)
