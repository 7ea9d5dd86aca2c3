"""Tax Cal MCP Server - FastMCP implementation for tax rule and calculation tools.

The server holds one in-memory rule store for its lifetime, seeded from the
rules file at startup. Rules configured through configure_tax_rule replace
the seeded ones until the server exits.
"""

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from taxcal.sdk import (
    CountryNotConfiguredError,
    InMemoryTaxRuleStore,
    TaxCalError,
    calculate_tax as sdk_calculate_tax,
    configure_logging,
    configure_tax_rule_from_dict,
    load_store,
    problem_details,
    result_to_dict,
    rule_to_dict,
    validate_country_code,
)

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("taxcal")

_store: InMemoryTaxRuleStore | None = None


def get_store() -> InMemoryTaxRuleStore:
    """Get the server's rule store, loading the rules file on first use."""
    global _store
    if _store is None:
        _store = load_store()
        logger.info(f"Rule store ready with {len(_store)} country rule(s)")
    return _store


def set_store(store: InMemoryTaxRuleStore | None) -> None:
    """Replace the server's rule store (None reloads from the rules file on next use)."""
    global _store
    _store = store


# --- Tools ---

@mcp.tool()
async def configure_tax_rule(
    country_code: str = Field(description="Two-letter country code (e.g., 'DE')"),
    tax_items: list[dict[str, Any]] = Field(
        description=(
            "Ordered tax items. Each has 'type' (Fixed, FlatRate, Progressive), 'name', and "
            "'amount' (Fixed), 'ratePercent' 0-100 (FlatRate), or 'brackets' "
            "[{threshold, ratePercent}] (Progressive). At most one Progressive item."
        )
    ),
) -> dict[str, Any]:
    """Configure or replace the tax rule for a country. Nothing is stored if the rule is rejected."""
    try:
        rule = configure_tax_rule_from_dict(
            {"countryCode": country_code, "taxItems": tax_items}, get_store()
        )
        return {"configured": True, "rule": rule_to_dict(rule)}
    except TaxCalError as e:
        return {"configured": False, "error": problem_details(e)}


@mcp.tool()
async def calculate_tax(
    country_code: str = Field(description="Two-letter country code (e.g., 'DE')"),
    gross_salary: str = Field(description="Gross salary as a decimal string (e.g., '60000' or '42000.50')"),
) -> dict[str, Any]:
    """Calculate taxable base, per-item tax breakdown, total taxes and net salary for a gross salary."""
    try:
        result = sdk_calculate_tax(country_code, gross_salary, get_store())
        return {"result": result_to_dict(result)}
    except TaxCalError as e:
        return {"result": None, "error": problem_details(e)}


@mcp.tool()
async def get_tax_rule(
    country_code: str = Field(description="Two-letter country code (e.g., 'DE')"),
) -> dict[str, Any]:
    """Get the tax rule configured for a country."""
    try:
        code = validate_country_code(country_code)
        rule = get_store().get(code)
        if rule is None:
            raise CountryNotConfiguredError(code)
        return {"rule": rule_to_dict(rule)}
    except TaxCalError as e:
        return {"rule": None, "error": problem_details(e)}


@mcp.tool()
async def list_countries() -> dict[str, Any]:
    """List country codes that have a configured tax rule."""
    codes = get_store().country_codes()
    return {"countries": codes, "count": len(codes)}


# --- Resources (optional, for browsing) ---

@mcp.resource("taxcal://countries")
async def list_countries_resource() -> str:
    """Configured countries with item counts."""
    store = get_store()
    counts = {code: len(store.get(code).tax_items) for code in store.country_codes()}
    return json.dumps({"countries": counts}, indent=2)


# --- Server Entry Point ---

def run_server():
    """Run the MCP server in stdio mode."""
    configure_logging()
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
