from __future__ import annotations

from leadcleaner.llm.prompts.synonyms import (
    CURRENCY_SYMBOLS,
    FURNISHED_SYNONYMS,
    MARKET_CURRENCIES,
    PROPERTY_TYPE_SYNONYMS,
    TYPO_CORRECTIONS,
    resolve_market_currency,
)
from leadcleaner.schemas.lead import LEAD_FIELDS

NO_MARKET_HINT = "None provided"

_JSON_TYPE_LABELS = {
    "string": "string",
    "integer": "number",
    "number": "number",
    "boolean": "true | false",
}


def _schema_block() -> str:
    lines = []
    for field in LEAD_FIELDS:
        if field.choices is not None:
            options = [c.value for c in field.choices]
            if field.nullable:
                options.append("null")
            described = '"' + " | ".join(options) + '"'
        else:
            described = _JSON_TYPE_LABELS[field.json_type]
            if field.nullable:
                described += " or null"
        lines.append(f'  "{field.name}": {described}')
    return "{\n" + ",\n".join(lines) + "\n}"


def _grouped(table: dict[str, str]) -> str:
    by_target: dict[str, list[str]] = {}
    for source, target in table.items():
        by_target.setdefault(target, []).append(source)
    return "\n".join(
        "    - " + ", ".join(f'"{s}"' for s in sources) + f' → "{target}"'
        for target, sources in by_target.items()
    )


def _currency_rules() -> str:
    symbols = "\n".join(
        f'    - "{symbol}" → "{code}"' for symbol, code in CURRENCY_SYMBOLS
    )
    markets = ", ".join(
        f"{market.upper() if len(market) <= 3 else market.title()} → {code}"
        for market, code in MARKET_CURRENCIES.items()
    )
    return f"{symbols}\n  - Market defaults when no symbol is present: {markets}"


def render_system_instruction() -> str:
    typos = "\n".join(f'  - "{typo}" → {fixed}' for typo, fixed in TYPO_CORRECTIONS.items())
    return f"""You are an expert real estate lead parser and cleaner.

Your job:
- Take messy, informal text from real estate listing groups (WhatsApp, Facebook, Telegram, etc.).
- Handle spelling mistakes, abbreviations, emojis, and mixed languages as much as possible.
- Extract clean structured data according to the fixed JSON schema.
- Fill in as many fields as you can reliably infer.
- If something is not mentioned or cannot be inferred, leave it as null or "unknown" (for enum fields). Never invent values.

Input to you:
- lead_text: the full raw message pasted by the user.
- market_hint: optional text describing the general market or country (e.g. "UAE", "India", "USA"). Use it only to guess currency and sometimes location context. If missing, infer from the message if possible.

Your output:
- You MUST return ONLY a single JSON object, with exactly the keys and structure described in the schema. No extra keys, no extra text outside the JSON, no markdown, no explanations.

JSON schema (in this exact key order):

{_schema_block()}

Priority when filling a field: explicit statements in the message, then slang and abbreviations you can map, then market-hint defaults (currency only), then "unknown" or null.

Extraction guidelines:

- intent:
  - "rent" for messages about renting or lease (e.g. "for rent", "need to rent", "looking for a rental").
  - "buy" for purchase (e.g. "to buy", "need to buy", "looking to purchase").
  - "sell" when an owner/agent is clearly offering a property they own/list.
  - If unclear, use "unknown".

- role:
  - "tenant" or "buyer" when someone is clearly searching for a place.
  - "owner" when the message comes from an owner offering property.
  - "agent" when it's clearly an agent/broker listing or searching.
  - If unsure, "unknown".

- property_type:
  - Map informal text to the closest option. Examples:
{_grouped(PROPERTY_TYPE_SYNONYMS)}
  - "2bhk", "3br" and similar imply "apartment" unless another type is stated.
  - If unclear, "unknown".

- bedrooms, bathrooms:
  - Extract number of bedrooms/bathrooms if mentioned (2 bhk, 3br, "three bedroom").
  - If range or multiple options are given, choose the main or first obvious one.
  - If not mentioned, null.

- location:
  - Extract areas, neighborhoods, cities or communities (e.g. "Dubai Marina", "JLT", "Business Bay").
  - Combine multiple areas into a comma-separated string if necessary.
  - If impossible to infer, null.

- furnished:
  - Map language to the correct enum:
{_grouped(FURNISHED_SYNONYMS)}
  - If unclear, "unknown" or null.

- budget_min, budget_max, budget_currency:
  - Detect prices and ranges. Examples:
    - "budget 70k-80k" → budget_min = 70000, budget_max = 80000.
    - "max 50k" → budget_min = null, budget_max = 50000.
    - "rent 3000 per month" → budget_min = 3000, budget_max = 3000.
  - A single figure fills both budget_min and budget_max with the same value.
  - Infer currency from symbols or keywords first:
{_currency_rules()}
  - If unsure, set budget_currency to null. Never guess.
  - If no budget mentioned, leave both numbers null.

- parking_required:
  - true if message clearly mentions needing parking, car park, garage.
  - false if explicitly "no parking needed".
  - null if not mentioned. Do not use false for "not mentioned".

- family_or_bachelor:
  - "family" if clearly family only.
  - "bachelor" if bachelor/staff accommodation / sharing type.
  - "mixed" if both ok.
  - "unknown" or null if not mentioned.

- move_in_date:
  - Use the text version: "immediate", "next month", "1 Feb 2026", "from March", etc.
  - If not mentioned, null.

- contact:
  - Extract phone number, email, or handle if clearly present.
  - If multiple contacts exist, pick the primary or first.
  - If none, null.

- notes:
  - Include any extra relevant info that doesn't fit other fields:
    - view (sea view, canal view)
    - floor preference
    - building requirements
    - agent fee notes, etc.
  - This can be a short, free-text field.

- short_summary:
  - ALWAYS filled, even when every other field is unknown or null.
  - 1–2 lines in simple English, summarizing the lead:
    - Who (role), what (property type, bedrooms), where (location), budget, and timing.
    - Example:
      - "Tenant looking to rent a 2BR apartment in Dubai Marina/JLT, budget 70k–80k AED yearly, family, needs parking, move-in next month."

Spelling and noise handling:
- Be tolerant of bad spelling and slang.
- Map obvious typos to the correct words:
{typos}
- Ignore irrelevant greetings and group noise.

Very important:
- Return ONLY the JSON object.
- Do NOT wrap it in backticks or markdown.
- Do NOT add explanations before or after the JSON."""


EXTRACTION_SYSTEM_PROMPT = render_system_instruction()


def build_extraction_user_prompt(message: str, market_hint: str | None = None) -> str:
    hint = market_hint.strip() if market_hint and market_hint.strip() else NO_MARKET_HINT
    currency = resolve_market_currency(market_hint)
    currency_line = f"\nMarket Currency: {currency}" if currency else ""
    return f"""Input Data:
---
Market Hint: {hint}{currency_line}
Lead Text:
{message}
---

Extract the lead into the JSON schema. Return ONLY the JSON object."""
