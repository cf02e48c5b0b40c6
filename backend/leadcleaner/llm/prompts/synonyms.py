"""Normalization tables for the extraction contract.

The instruction text is rendered from these tables and the decoder applies
them to enum values the model returns, so a new synonym only needs to be
added here.  Keys are lower-case.
"""

from __future__ import annotations

import re

INTENT_SYNONYMS: dict[str, str] = {
    "rental": "rent",
    "renting": "rent",
    "lease": "rent",
    "purchase": "buy",
    "buying": "buy",
    "sale": "sell",
    "selling": "sell",
}

ROLE_SYNONYMS: dict[str, str] = {
    "renter": "tenant",
    "lessee": "tenant",
    "purchaser": "buyer",
    "landlord": "owner",
    "seller": "owner",
    "broker": "agent",
    "realtor": "agent",
}

PROPERTY_TYPE_SYNONYMS: dict[str, str] = {
    "flat": "apartment",
    "apt": "apartment",
    "aprtmnt": "apartment",
    "house": "villa",
    "independent house": "villa",
    "vilaa": "villa",
    "town house": "townhouse",
    "bed space": "room",
    "bedspace": "room",
    "shop": "office",
    "office space": "office",
    "plot": "land",
}

FURNISHED_SYNONYMS: dict[str, str] = {
    "fully furnished": "furnished",
    "with furniture": "furnished",
    "semi furnished": "semi-furnished",
    "semifurnished": "semi-furnished",
    "semi": "semi-furnished",
    "empty": "unfurnished",
    "not furnished": "unfurnished",
}

OCCUPANCY_SYNONYMS: dict[str, str] = {
    "family only": "family",
    "families": "family",
    "bachelors": "bachelor",
    "staff accommodation": "bachelor",
    "sharing": "bachelor",
    "both": "mixed",
}

# Misspellings seen in group posts; shown to the model as examples
TYPO_CORRECTIONS: dict[str, str] = {
    "budjet": "budget",
    "aprtmnt": "apartment",
    "vilaa": "villa",
}

# (symbol or keyword, currency code), checked in order
CURRENCY_SYMBOLS: list[tuple[str, str]] = [
    ("AED", "AED"),
    ("د.إ", "AED"),
    ("dirham", "AED"),
    ("₹", "INR"),
    ("INR", "INR"),
    ("lakh", "INR"),
    ("$", "USD"),
    ("USD", "USD"),
    ("£", "GBP"),
    ("€", "EUR"),
]

MARKET_CURRENCIES: dict[str, str] = {
    "uae": "AED",
    "dubai": "AED",
    "abu dhabi": "AED",
    "sharjah": "AED",
    "india": "INR",
    "mumbai": "INR",
    "bangalore": "INR",
    "delhi": "INR",
    "usa": "USD",
    "us": "USD",
    "united states": "USD",
    "new york": "USD",
    "uk": "GBP",
    "united kingdom": "GBP",
    "london": "GBP",
    "saudi": "SAR",
    "ksa": "SAR",
    "qatar": "QAR",
}


def normalize_enum_value(
    value: object, synonyms: dict[str, str], allowed: set[str]
) -> object:
    """Map a raw enum string onto its canonical value when one is known.

    Non-strings and unrecognized strings are returned unchanged so that
    validation can reject them.
    """
    if not isinstance(value, str):
        return value
    key = " ".join(value.strip().lower().replace("_", " ").split())
    if key in allowed:
        return key
    hyphenated = key.replace(" ", "-")
    if hyphenated in allowed:
        return hyphenated
    return synonyms.get(key, value)


def resolve_market_currency(market_hint: str | None) -> str | None:
    """Default currency for a market hint, or None when it cannot be resolved."""
    if not market_hint:
        return None
    hint = market_hint.strip().lower()
    if hint in MARKET_CURRENCIES:
        return MARKET_CURRENCIES[hint]
    words = set(re.findall(r"[a-z]+", hint))
    for market, currency in MARKET_CURRENCIES.items():
        if " " in market:
            if market in hint:
                return currency
        elif market in words:
            return currency
    return None


def detect_currency(text: str | None) -> str | None:
    """Currency code for the first symbol or keyword found in ``text``.

    Alphabetic tokens such as "AED" or "lakh" only match as whole words.
    """
    if not text:
        return None
    for symbol, code in CURRENCY_SYMBOLS:
        if symbol.isalpha():
            if re.search(rf"(?<![A-Za-z]){re.escape(symbol)}(?![A-Za-z])", text, re.IGNORECASE):
                return code
        elif symbol in text:
            return code
    return None
