"""The ExtractedLead record and the response schema derived from it.

``LEAD_FIELDS`` is the declarative description of the output shape.  The
provider-facing JSON schema is generated from it and the pydantic model
validates against the same enums, so a contract change happens here only.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    field_validator,
    model_validator,
)

from leadcleaner.llm.prompts.synonyms import (
    FURNISHED_SYNONYMS,
    INTENT_SYNONYMS,
    OCCUPANCY_SYNONYMS,
    PROPERTY_TYPE_SYNONYMS,
    ROLE_SYNONYMS,
    normalize_enum_value,
)


class Intent(StrEnum):
    BUY = "buy"
    RENT = "rent"
    SELL = "sell"
    UNKNOWN = "unknown"


class Role(StrEnum):
    BUYER = "buyer"
    TENANT = "tenant"
    OWNER = "owner"
    AGENT = "agent"
    UNKNOWN = "unknown"


class PropertyType(StrEnum):
    APARTMENT = "apartment"
    VILLA = "villa"
    TOWNHOUSE = "townhouse"
    ROOM = "room"
    OFFICE = "office"
    LAND = "land"
    UNKNOWN = "unknown"


class Furnished(StrEnum):
    FURNISHED = "furnished"
    SEMI_FURNISHED = "semi-furnished"
    UNFURNISHED = "unfurnished"
    UNKNOWN = "unknown"


class Occupancy(StrEnum):
    FAMILY = "family"
    BACHELOR = "bachelor"
    MIXED = "mixed"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class LeadField:
    name: str
    json_type: str  # "string", "integer", "number" or "boolean"
    nullable: bool = True
    choices: type[StrEnum] | None = None
    synonyms: dict[str, str] | None = None

    @property
    def required(self) -> bool:
        return not self.nullable


# In output key order
LEAD_FIELDS: tuple[LeadField, ...] = (
    LeadField("intent", "string", nullable=False, choices=Intent, synonyms=INTENT_SYNONYMS),
    LeadField("role", "string", nullable=False, choices=Role, synonyms=ROLE_SYNONYMS),
    LeadField(
        "property_type", "string", nullable=False,
        choices=PropertyType, synonyms=PROPERTY_TYPE_SYNONYMS,
    ),
    LeadField("bedrooms", "integer"),
    LeadField("bathrooms", "integer"),
    LeadField("location", "string"),
    LeadField("furnished", "string", choices=Furnished, synonyms=FURNISHED_SYNONYMS),
    LeadField("budget_min", "number"),
    LeadField("budget_max", "number"),
    LeadField("budget_currency", "string"),
    LeadField("parking_required", "boolean"),
    LeadField(
        "family_or_bachelor", "string", choices=Occupancy, synonyms=OCCUPANCY_SYNONYMS
    ),
    LeadField("move_in_date", "string"),
    LeadField("contact", "string"),
    LeadField("notes", "string"),
    LeadField("short_summary", "string", nullable=False),
)

REQUIRED_FIELDS: tuple[str, ...] = tuple(f.name for f in LEAD_FIELDS if f.required)

_OPENAPI_TYPES = {
    "string": "STRING",
    "integer": "INTEGER",
    "number": "NUMBER",
    "boolean": "BOOLEAN",
}


def lead_response_schema(dialect: str = "json_schema") -> dict[str, Any]:
    """Build the response schema handed to the provider.

    ``json_schema`` produces a strict JSON Schema (every key listed as
    required, nullability via a ``null`` type) as accepted by OpenAI
    structured outputs.  ``openapi`` produces the OpenAPI subset with
    ``nullable`` flags that Gemini's ``response_schema`` expects.
    """
    properties: dict[str, Any] = {}
    for field in LEAD_FIELDS:
        values = [c.value for c in field.choices] if field.choices else None
        if dialect == "openapi":
            prop: dict[str, Any] = {"type": _OPENAPI_TYPES[field.json_type]}
            if values:
                prop["enum"] = values
            if field.nullable:
                prop["nullable"] = True
        elif dialect == "json_schema":
            prop = {"type": [field.json_type, "null"] if field.nullable else field.json_type}
            if values:
                prop["enum"] = values + [None] if field.nullable else values
        else:
            raise ValueError(f"Unknown schema dialect: {dialect}")
        properties[field.name] = prop

    if dialect == "openapi":
        return {
            "type": "OBJECT",
            "properties": properties,
            "required": list(REQUIRED_FIELDS),
            "propertyOrdering": [f.name for f in LEAD_FIELDS],
        }
    return {
        "type": "object",
        "properties": properties,
        "required": [f.name for f in LEAD_FIELDS],
        "additionalProperties": False,
    }


class ExtractionRequest(BaseModel):
    message: str = Field(min_length=1)
    market_hint: str | None = None

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("message must not be blank")
        return value

    @field_validator("market_hint")
    @classmethod
    def blank_hint_is_absent(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()


class ExtractedLead(BaseModel):
    intent: Intent
    role: Role
    property_type: PropertyType
    bedrooms: int | None = None
    bathrooms: int | None = None
    location: str | None = None
    furnished: Furnished | None = None
    budget_min: StrictFloat | None = None
    budget_max: StrictFloat | None = None
    budget_currency: str | None = None
    parking_required: StrictBool | None = None
    family_or_bachelor: Occupancy | None = None
    move_in_date: str | None = None
    contact: str | None = None
    notes: str | None = None
    short_summary: str = Field(min_length=1)

    model_config = ConfigDict(frozen=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def normalize_enums(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        result = dict(data)
        for field in LEAD_FIELDS:
            if field.choices is None or field.name not in result:
                continue
            allowed = {c.value for c in field.choices}
            result[field.name] = normalize_enum_value(
                result[field.name], field.synonyms or {}, allowed
            )
        return result

    @field_validator("bedrooms", "bathrooms", mode="before")
    @classmethod
    def counts_are_numbers(cls, value: Any) -> Any:
        # 2.0 is accepted as 2; booleans and numeric strings are not counts
        if isinstance(value, (bool, str)):
            raise ValueError("must be a JSON number")
        return value

    @field_validator(
        "location", "budget_currency", "move_in_date", "contact", "notes",
        mode="before",
    )
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("budget_currency")
    @classmethod
    def upper_currency(cls, value: str | None) -> str | None:
        return value.strip().upper() if value else value

    @field_validator("short_summary")
    @classmethod
    def summary_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("short_summary must not be blank")
        return value

    def to_display_json(self) -> str:
        """Pretty JSON in schema key order, as shown in the result view."""
        return json.dumps(self.model_dump(mode="json"), indent=2, ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str) -> ExtractedLead:
        return cls.model_validate_json(text)
