"""In-memory tax rule store.

One rule per country. Keys are normalized (trimmed, upper-case) before every
access, so "de", " DE " and "De" are the same country. A save fully replaces
the previous rule; rules are frozen models, so a reader always gets a
complete rule. Process-scoped only, nothing is written to disk.
"""

import logging
import threading
from typing import Dict, List, Optional

from .errors import CountryCodeMismatchError
from .schemas import CountryTaxRule
from .taxes.validation import normalize_country_code

logger = logging.getLogger(__name__)


class InMemoryTaxRuleStore:
    """Thread-safe country code -> CountryTaxRule mapping."""

    def __init__(self):
        self._rules: Dict[str, CountryTaxRule] = {}
        self._lock = threading.Lock()

    def get(self, country_code: str) -> Optional[CountryTaxRule]:
        """Get the rule for a country, or None if not configured."""
        key = normalize_country_code(country_code)
        with self._lock:
            return self._rules.get(key)

    def save_or_replace(self, country_code: str, rule: CountryTaxRule) -> None:
        """Store a rule, replacing any previous rule for the country.

        Raises:
            CountryCodeMismatchError: If country_code differs from rule.country_code
        """
        key = normalize_country_code(country_code)
        if key != normalize_country_code(rule.country_code):
            raise CountryCodeMismatchError(country_code, rule.country_code)

        with self._lock:
            replaced = key in self._rules
            self._rules[key] = rule

        logger.debug(f"{'Replaced' if replaced else 'Stored'} rule for {key} ({len(rule.tax_items)} items)")

    def country_codes(self) -> List[str]:
        """Sorted list of configured country codes."""
        with self._lock:
            return sorted(self._rules)

    def __len__(self) -> int:
        with self._lock:
            return len(self._rules)

    def __contains__(self, country_code: str) -> bool:
        return self.get(country_code) is not None
