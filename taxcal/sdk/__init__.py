"""Tax Cal SDK - Country tax rules and salary tax calculation."""

from .errors import (
    TaxCalError,
    TaxValidationError,
    NegativeGrossError,
    InvalidGrossError,
    InvalidCountryCodeError,
    MalformedRuleError,
    RuleValidationError,
    EmptyRuleError,
    TooManyProgressiveError,
    InvalidItemParametersError,
    CountryNotConfiguredError,
    CountryCodeMismatchError,
    RulesFileNotFoundError,
)

from .schemas import (
    TaxItemKind,
    ProgressiveBracket,
    FixedTaxItem,
    FlatRateTaxItem,
    ProgressiveTaxItem,
    TaxItem,
    CountryTaxRule,
    TaxBreakdownEntry,
    TaxCalculationResult,
    parse_tax_item,
    parse_rule,
)

from .taxes import (
    calculate,
    calculate_progressive_tax,
    validate_rule,
    validate_country_code,
    normalize_country_code,
)

from .store import InMemoryTaxRuleStore

from .service import (
    configure_tax_rule,
    configure_tax_rule_from_dict,
    calculate_tax,
    to_decimal,
)

from .problems import (
    problem_details,
    result_to_dict,
    rule_to_dict,
)

from .config import (
    configure_logging,
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_rules_path,
    load_rules_file,
    load_store,
)

__all__ = [
    # Errors
    "TaxCalError",
    "TaxValidationError",
    "NegativeGrossError",
    "InvalidGrossError",
    "InvalidCountryCodeError",
    "MalformedRuleError",
    "RuleValidationError",
    "EmptyRuleError",
    "TooManyProgressiveError",
    "InvalidItemParametersError",
    "CountryNotConfiguredError",
    "CountryCodeMismatchError",
    "RulesFileNotFoundError",
    # Schemas
    "TaxItemKind",
    "ProgressiveBracket",
    "FixedTaxItem",
    "FlatRateTaxItem",
    "ProgressiveTaxItem",
    "TaxItem",
    "CountryTaxRule",
    "TaxBreakdownEntry",
    "TaxCalculationResult",
    "parse_tax_item",
    "parse_rule",
    # Calculation and validation
    "calculate",
    "calculate_progressive_tax",
    "validate_rule",
    "validate_country_code",
    "normalize_country_code",
    # Store
    "InMemoryTaxRuleStore",
    # Service
    "configure_tax_rule",
    "configure_tax_rule_from_dict",
    "calculate_tax",
    "to_decimal",
    # JSON shapes
    "problem_details",
    "result_to_dict",
    "rule_to_dict",
    # Config
    "configure_logging",
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "get_rules_path",
    "load_rules_file",
    "load_store",
]
