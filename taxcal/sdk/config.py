"""Configuration management for Tax Cal.

Configuration lives in one directory:

1. settings.json - Machine-specific settings
   - rules_file: path to a rules YAML outside the config directory

2. rules.yaml - Country tax rules loaded at startup
   countries:
     DE:
       - {type: Fixed, name: CommunityTax, amount: 1500}
       - {type: FlatRate, name: PensionTax, ratePercent: 20}

Config directory resolution:
1. TAXCAL_CONFIG_PATH environment variable (if set)
2. ~/.config/taxcal/ (XDG_CONFIG_HOME fallback)

The rules file is read-only from the tool's point of view. Rules configured
at runtime (MCP server) live in memory and are gone on restart.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, List, Optional

import yaml

from .errors import MalformedRuleError, RulesFileNotFoundError, TaxValidationError
from .schemas import CountryTaxRule, parse_rule
from .service import configure_tax_rule
from .store import InMemoryTaxRuleStore

logger = logging.getLogger(__name__)

APP_NAME = "taxcal"
SETTINGS_FILENAME = "settings.json"
RULES_FILENAME = "rules.yaml"
LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s: %(message)s"


def configure_logging(default_level: str = "INFO") -> None:
    """Configure root logging from the LOG_LEVEL environment variable."""
    log_level = os.environ.get("LOG_LEVEL", default_level).upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
    )


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. TAXCAL_CONFIG_PATH environment variable
    2. ~/.config/taxcal/ (XDG_CONFIG_HOME)
    """
    env_path = os.environ.get("TAXCAL_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load settings.json. Returns empty dict if the file doesn't exist."""
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    with open(settings_file, "r") as f:
        return json.load(f)


def save_settings(settings: dict) -> Path:
    """Save settings.json, creating the config directory if needed.

    Returns:
        Path to the saved settings file
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    settings_file = config_dir / SETTINGS_FILENAME

    with open(settings_file, "w") as f:
        json.dump(settings, f, indent=2)

    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value from settings.json."""
    return load_settings().get(key, default)


def set_setting(key: str, value: Any) -> Path:
    """Set a setting value in settings.json."""
    settings = load_settings()
    settings[key] = value
    return save_settings(settings)


def get_rules_path() -> Path:
    """Get the path to the rules file.

    Resolution order:
    1. settings.json "rules_file" key (if set)
    2. rules.yaml in config directory
    """
    custom = get_setting("rules_file")
    if custom:
        return Path(custom).expanduser()
    return get_config_dir() / RULES_FILENAME


def load_rules_file(path: Optional[Path] = None) -> List[CountryTaxRule]:
    """Parse a rules YAML file into CountryTaxRule objects.

    Rules are parsed but not validated; see load_store() for that.

    Args:
        path: Rules file (defaults to get_rules_path())

    Raises:
        RulesFileNotFoundError: If the file doesn't exist
        MalformedRuleError: If the file isn't in the expected shape
    """
    rules_path = Path(path) if path else get_rules_path()
    if not rules_path.exists():
        raise RulesFileNotFoundError(f"Rules file not found: {rules_path}")

    with open(rules_path, "r") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise MalformedRuleError(f"{rules_path}: invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise MalformedRuleError(f"{rules_path}: expected a mapping with a 'countries' key")

    countries = data.get("countries") or {}
    if not isinstance(countries, dict):
        raise MalformedRuleError(f"{rules_path}: 'countries' must map country codes to tax item lists")

    rules = []
    for code, items in countries.items():
        # YAML 1.1 reads unquoted NO/ON/YES as booleans
        if not isinstance(code, str):
            raise MalformedRuleError(
                f"{rules_path}: country code {code!r} is not a string (quote codes like 'NO')"
            )
        try:
            rules.append(parse_rule(code, items))
        except MalformedRuleError as e:
            raise MalformedRuleError(f"{rules_path}: {code}: {e.message}") from e

    return rules


def load_store(path: Optional[Path] = None) -> InMemoryTaxRuleStore:
    """Build a rule store seeded from a rules file.

    Every rule goes through configure_tax_rule(), so a rule the service
    would reject at runtime is rejected here too. If no path is given and
    the default rules file doesn't exist, the store starts empty.

    Raises:
        RulesFileNotFoundError: If an explicit path doesn't exist
        MalformedRuleError: If the file can't be parsed or a rule is rejected
    """
    store = InMemoryTaxRuleStore()

    if path is None and not get_rules_path().exists():
        logger.debug(f"No rules file at {get_rules_path()}, starting with empty store")
        return store

    rules_path = Path(path) if path else get_rules_path()
    for rule in load_rules_file(rules_path):
        try:
            configure_tax_rule(rule, store)
        except TaxValidationError as e:
            raise MalformedRuleError(f"{rules_path}: {rule.country_code}: {e.message}") from e

    logger.debug(f"Loaded {len(store)} rule(s) from {rules_path}")
    return store
