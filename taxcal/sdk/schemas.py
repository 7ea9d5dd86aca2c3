"""Pydantic schemas for country tax rules and calculation results.

Tax items are a tagged union on `type`: each kind only carries the field
it uses (Fixed -> amount, FlatRate -> rate_percent, Progressive -> brackets).
The kind-specific field is optional so that validate_rule() can report a
missing parameter, and the calculator can treat it as zero.

All models are frozen. External (JSON/YAML) field names are camelCase;
snake_case attribute names are accepted on input too.
"""

from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from .errors import MalformedRuleError


class TaxItemKind(str, Enum):
    """Kind of tax item."""

    FIXED = "Fixed"
    FLAT_RATE = "FlatRate"
    PROGRESSIVE = "Progressive"


# Accepted spellings, compared after strip().upper()
_KIND_ALIASES = {
    "FIXED": TaxItemKind.FIXED,
    "FLATRATE": TaxItemKind.FLAT_RATE,
    "FLAT RATE": TaxItemKind.FLAT_RATE,
    "PROGRESSIVE": TaxItemKind.PROGRESSIVE,
}


def normalize_kind(value: Any) -> Optional[TaxItemKind]:
    """Parse a tax item kind case-insensitively. Returns None if unknown."""
    if isinstance(value, TaxItemKind):
        return value
    if not isinstance(value, str):
        return None
    return _KIND_ALIASES.get(value.strip().upper())


class ProgressiveBracket(BaseModel):
    """One band of a progressive tax: rate applies to the base above threshold."""

    model_config = ConfigDict(
        extra="forbid", frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    threshold: Decimal = Field(..., description="Lower bound of the band")
    rate_percent: Decimal = Field(..., description="Percentage applied inside the band")


class _TaxItemBase(BaseModel):
    # Fields belonging to other kinds are dropped rather than rejected
    model_config = ConfigDict(
        extra="ignore", frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    name: str = Field(..., description="Display label (defaults to the kind name)")

    @model_validator(mode="before")
    @classmethod
    def _default_name(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        name = data.get("name")
        if isinstance(name, str) and name.strip():
            return {**data, "name": name.strip()}
        if name is None or isinstance(name, str):
            return {**data, "name": cls.model_fields["type"].default}
        return data

    @property
    def kind(self) -> TaxItemKind:
        return TaxItemKind(self.type)


class FixedTaxItem(_TaxItemBase):
    """Absolute amount, deducted from gross before rate-based taxes."""

    type: Literal["Fixed"] = "Fixed"
    amount: Optional[Decimal] = Field(default=None, description="Currency amount (>= 0)")


class FlatRateTaxItem(_TaxItemBase):
    """Single percentage applied to the whole taxable base."""

    type: Literal["FlatRate"] = "FlatRate"
    rate_percent: Optional[Decimal] = Field(default=None, description="Percentage 0-100")


class ProgressiveTaxItem(_TaxItemBase):
    """Marginal brackets applied to successive slices of the taxable base."""

    type: Literal["Progressive"] = "Progressive"
    brackets: Optional[tuple[ProgressiveBracket, ...]] = Field(
        default=None, description="Brackets in any order (sorted by threshold when applied)"
    )


TaxItem = Annotated[
    Union[FixedTaxItem, FlatRateTaxItem, ProgressiveTaxItem],
    Field(discriminator="type"),
]

_tax_item_adapter = TypeAdapter(TaxItem)


def _normalize_item_kind(data: Any) -> Any:
    if isinstance(data, dict) and "type" in data:
        kind = normalize_kind(data["type"])
        if kind is not None:
            return {**data, "type": kind.value}
    return data


class CountryTaxRule(BaseModel):
    """Ordered tax items configured for one country.

    The model accepts any item list, including an empty one. Whether a rule
    is acceptable is decided by validate_rule(), not here.
    """

    model_config = ConfigDict(
        extra="forbid", frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    country_code: str = Field(..., description="Country code (e.g. 'DE')")
    tax_items: tuple[TaxItem, ...] = Field(default=(), description="Tax items in order")

    @field_validator("tax_items", mode="before")
    @classmethod
    def _normalize_kinds(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return [_normalize_item_kind(item) for item in value]
        return value


class TaxBreakdownEntry(BaseModel):
    """One named tax amount in a calculation result."""

    model_config = ConfigDict(
        extra="forbid", frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    name: str
    amount: Decimal


class TaxCalculationResult(BaseModel):
    """Outcome of calculate(). Amounts keep full decimal precision."""

    model_config = ConfigDict(
        extra="forbid", frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    gross: Decimal = Field(..., description="Gross salary (input)")
    taxable_base: Decimal = Field(..., description="Gross minus fixed taxes, floored at 0")
    total_taxes: Decimal = Field(..., description="Sum of all breakdown amounts")
    breakdown: tuple[TaxBreakdownEntry, ...] = Field(
        ..., description="Fixed, then flat-rate, then progressive entries"
    )
    net_salary: Decimal = Field(..., description="Gross minus total taxes (may be negative)")


# =============================================================================
# Parsing external input
# =============================================================================


def _first_error(e: ValidationError) -> str:
    err = e.errors()[0]
    loc = ".".join(str(part) for part in err.get("loc", ()))
    return f"{loc}: {err['msg']}" if loc else err["msg"]


def parse_tax_item(data: Any, index: int = 0) -> Union[FixedTaxItem, FlatRateTaxItem, ProgressiveTaxItem]:
    """Parse one tax item from a dict (JSON/YAML shape).

    Raises:
        MalformedRuleError: Unknown kind or unparseable fields
    """
    if not isinstance(data, dict):
        raise MalformedRuleError(f"Tax item at index {index} must be a mapping.")

    kind = normalize_kind(data.get("type"))
    if kind is None:
        raise MalformedRuleError(
            f"Tax item at index {index} has invalid type '{data.get('type')}'. "
            f"Use Fixed, FlatRate, or Progressive."
        )

    try:
        return _tax_item_adapter.validate_python({**data, "type": kind.value})
    except ValidationError as e:
        raise MalformedRuleError(
            f"Tax item at index {index} has invalid parameters ({_first_error(e)})."
        ) from e


def parse_rule(country_code: str, tax_items: Any) -> CountryTaxRule:
    """Build a CountryTaxRule from a country code and raw item dicts.

    Raises:
        MalformedRuleError: If tax_items is not a list or any item fails to parse
    """
    if tax_items is None:
        tax_items = []
    if not isinstance(tax_items, (list, tuple)):
        raise MalformedRuleError("Tax items must be a list.")

    items = tuple(parse_tax_item(raw, i) for i, raw in enumerate(tax_items))
    return CountryTaxRule(country_code=country_code, tax_items=items)
