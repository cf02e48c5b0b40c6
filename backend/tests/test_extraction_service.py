"""Unit tests for the lead extraction client.

Tests cover:
- decode_lead() on conformant, malformed and incomplete provider output
- LeadExtractionClient.extract() with a mocked provider
- Configuration, transport and timeout failures
"""

from __future__ import annotations

import asyncio
import json

import pytest
from conftest import DUBAI_MARINA_MESSAGE, DUBAI_MARINA_RESPONSE, make_provider

from leadcleaner.llm.prompts.extraction import EXTRACTION_SYSTEM_PROMPT
from leadcleaner.schemas.lead import (
    ExtractedLead,
    Furnished,
    Occupancy,
    PropertyType,
    lead_response_schema,
)
from leadcleaner.services.extraction_service import LeadExtractionClient, decode_lead
from leadcleaner.utils.exceptions import (
    ConfigurationError,
    ResponseFormatError,
    TransportError,
)

# ── decode_lead ───────────────────────────────────────────────────────────


class TestDecodeLead:
    def test_conformant_response(self):
        lead = decode_lead(json.dumps(DUBAI_MARINA_RESPONSE))
        assert lead.property_type == PropertyType.APARTMENT
        assert lead.bedrooms == 2
        assert lead.short_summary

    def test_minimal_response_defaults_optional_fields_to_none(self):
        lead = decode_lead(json.dumps({
            "intent": "unknown",
            "role": "unknown",
            "property_type": "unknown",
            "short_summary": "Unclear message with no property details.",
        }))
        assert lead.bedrooms is None
        assert lead.parking_required is None
        assert lead.budget_currency is None
        assert lead.short_summary == "Unclear message with no property details."

    def test_invalid_json_keeps_raw_payload(self):
        raw = "Sure! Here is the lead: {intent: rent"
        with pytest.raises(ResponseFormatError) as exc_info:
            decode_lead(raw)
        assert exc_info.value.raw_payload == raw

    def test_empty_response(self):
        with pytest.raises(ResponseFormatError):
            decode_lead("   ")

    def test_none_response(self):
        with pytest.raises(ResponseFormatError) as exc_info:
            decode_lead(None)
        assert exc_info.value.raw_payload is None

    def test_non_object_json(self):
        with pytest.raises(ResponseFormatError) as exc_info:
            decode_lead('["rent", "tenant"]')
        assert exc_info.value.raw_payload == '["rent", "tenant"]'

    @pytest.mark.parametrize("field", ["intent", "role", "property_type", "short_summary"])
    def test_missing_required_field(self, field):
        payload = dict(DUBAI_MARINA_RESPONSE)
        del payload[field]
        raw = json.dumps(payload)
        with pytest.raises(ResponseFormatError) as exc_info:
            decode_lead(raw)
        assert field in str(exc_info.value)
        assert exc_info.value.raw_payload == raw

    def test_null_required_field(self):
        payload = dict(DUBAI_MARINA_RESPONSE, short_summary=None)
        with pytest.raises(ResponseFormatError):
            decode_lead(json.dumps(payload))

    def test_blank_summary_rejected(self):
        payload = dict(DUBAI_MARINA_RESPONSE, short_summary="  ")
        with pytest.raises(ResponseFormatError):
            decode_lead(json.dumps(payload))

    def test_value_outside_enum_rejected(self):
        payload = dict(DUBAI_MARINA_RESPONSE, property_type="castle")
        with pytest.raises(ResponseFormatError):
            decode_lead(json.dumps(payload))

    def test_fractional_bedrooms_rejected(self):
        payload = dict(DUBAI_MARINA_RESPONSE, bedrooms=2.5)
        with pytest.raises(ResponseFormatError):
            decode_lead(json.dumps(payload))

    def test_synonyms_normalized(self):
        payload = dict(
            DUBAI_MARINA_RESPONSE,
            property_type="Flat",
            furnished="semi furnished",
            family_or_bachelor="Bachelors",
        )
        lead = decode_lead(json.dumps(payload))
        assert lead.property_type == PropertyType.APARTMENT
        assert lead.furnished == Furnished.SEMI_FURNISHED
        assert lead.family_or_bachelor == Occupancy.BACHELOR

    def test_code_fence_stripped(self):
        raw = "```json\n" + json.dumps(DUBAI_MARINA_RESPONSE) + "\n```"
        assert decode_lead(raw) == ExtractedLead(**DUBAI_MARINA_RESPONSE)

    def test_code_fence_logged(self, caplog):
        raw = "```json\n" + json.dumps(DUBAI_MARINA_RESPONSE) + "\n```"
        with caplog.at_level("WARNING", logger="leadcleaner.services.extraction_service"):
            decode_lead(raw)
        assert "code fence" in caplog.text

    def test_bare_json_not_logged(self, caplog):
        with caplog.at_level("WARNING", logger="leadcleaner.services.extraction_service"):
            decode_lead(json.dumps(DUBAI_MARINA_RESPONSE))
        assert "code fence" not in caplog.text

    def test_unexpected_keys_ignored(self):
        payload = dict(DUBAI_MARINA_RESPONSE, confidence=0.9)
        lead = decode_lead(json.dumps(payload))
        assert not hasattr(lead, "confidence")

    def test_parking_tri_state_preserved(self):
        for value in (True, False, None):
            payload = dict(DUBAI_MARINA_RESPONSE, parking_required=value)
            assert decode_lead(json.dumps(payload)).parking_required is value

    def test_whole_float_bedrooms_accepted(self):
        payload = dict(DUBAI_MARINA_RESPONSE, bedrooms=2.0, budget_min=85000)
        lead = decode_lead(json.dumps(payload))
        assert lead.bedrooms == 2
        assert lead.budget_min == 85000.0

    @pytest.mark.parametrize(
        "overrides",
        [
            {"bedrooms": True},
            {"bathrooms": False},
            {"bedrooms": "2"},
            {"budget_min": True},
            {"budget_max": False},
            {"budget_min": "85000"},
            {"parking_required": "no"},
            {"parking_required": "yes"},
            {"parking_required": 1},
        ],
    )
    def test_wrong_json_type_rejected(self, overrides):
        raw = json.dumps(dict(DUBAI_MARINA_RESPONSE, **overrides))
        with pytest.raises(ResponseFormatError) as exc_info:
            decode_lead(raw)
        assert exc_info.value.raw_payload == raw


# ── LeadExtractionClient.extract ──────────────────────────────────────────


class TestExtract:
    @pytest.mark.asyncio
    async def test_dubai_marina_example(self, settings, dubai_response_text):
        provider = make_provider(dubai_response_text)
        client = LeadExtractionClient(settings, provider=provider)

        lead = await client.extract(DUBAI_MARINA_MESSAGE, "UAE")

        assert lead.property_type == PropertyType.APARTMENT
        assert lead.bedrooms == 2
        assert "Dubai Marina" in lead.location
        assert lead.budget_currency == "AED"
        assert lead.parking_required is True
        assert lead.family_or_bachelor == Occupancy.FAMILY
        assert "next month" in lead.move_in_date
        assert lead.short_summary

    @pytest.mark.asyncio
    async def test_required_fields_always_present(self, settings, dubai_response_text):
        client = LeadExtractionClient(settings, provider=make_provider(dubai_response_text))
        lead = await client.extract("2br flat for rent in JLT", None)
        for name in ("intent", "role", "property_type", "short_summary"):
            assert getattr(lead, name) is not None

    @pytest.mark.asyncio
    async def test_one_call_with_contract_injected(self, settings, dubai_response_text):
        provider = make_provider(dubai_response_text)
        client = LeadExtractionClient(settings, provider=provider)

        await client.extract(DUBAI_MARINA_MESSAGE, "UAE")

        provider.complete_json.assert_awaited_once()
        system_prompt, user_prompt, schema = provider.complete_json.await_args.args
        assert system_prompt == EXTRACTION_SYSTEM_PROMPT
        assert DUBAI_MARINA_MESSAGE in user_prompt
        assert "Market Hint: UAE" in user_prompt
        assert schema == lead_response_schema("openapi")

    @pytest.mark.asyncio
    async def test_openai_gets_strict_json_schema(self, settings, dubai_response_text):
        provider = make_provider(dubai_response_text, provider_name="openai")
        client = LeadExtractionClient(settings, provider=provider)

        await client.extract(DUBAI_MARINA_MESSAGE)

        _, user_prompt, schema = provider.complete_json.await_args.args
        assert schema == lead_response_schema("json_schema")
        assert "Market Hint: None provided" in user_prompt

    @pytest.mark.asyncio
    async def test_repeated_calls_decode_identically(self, settings, dubai_response_text):
        client = LeadExtractionClient(settings, provider=make_provider(dubai_response_text))
        first = await client.extract(DUBAI_MARINA_MESSAGE, "UAE")
        second = await client.extract(DUBAI_MARINA_MESSAGE, "UAE")
        assert first == second
        assert first is not second

    @pytest.mark.asyncio
    async def test_missing_credential_makes_no_call(self, unconfigured_settings):
        provider = make_provider("{}")
        client = LeadExtractionClient(unconfigured_settings, provider=provider)

        with pytest.raises(ConfigurationError):
            await client.extract(DUBAI_MARINA_MESSAGE, "UAE")

        assert provider.complete_json.call_count == 0

    @pytest.mark.asyncio
    async def test_missing_credential_without_injected_provider(self, unconfigured_settings):
        client = LeadExtractionClient(unconfigured_settings)
        with pytest.raises(ConfigurationError):
            await client.extract(DUBAI_MARINA_MESSAGE)

    @pytest.mark.asyncio
    async def test_blank_message_rejected(self, settings):
        provider = make_provider("{}")
        client = LeadExtractionClient(settings, provider=provider)
        with pytest.raises(ValueError):
            await client.extract("   ")
        provider.complete_json.assert_not_called()

    @pytest.mark.asyncio
    async def test_transport_error_propagates(self, settings):
        provider = make_provider(
            side_effect=TransportError("503 from provider", provider="gemini")
        )
        client = LeadExtractionClient(settings, provider=provider)

        with pytest.raises(TransportError) as exc_info:
            await client.extract(DUBAI_MARINA_MESSAGE)

        assert exc_info.value.provider == "gemini"
        assert provider.complete_json.await_count == 1

    @pytest.mark.asyncio
    async def test_timeout_becomes_transport_error(self, settings):
        async def hang(*args, **kwargs):
            await asyncio.sleep(5)

        slow_settings = settings.model_copy(update={"llm_timeout_seconds": 0.01})
        client = LeadExtractionClient(slow_settings, provider=make_provider(side_effect=hang))

        with pytest.raises(TransportError, match="timed out"):
            await client.extract(DUBAI_MARINA_MESSAGE)

    @pytest.mark.asyncio
    async def test_malformed_response(self, settings):
        client = LeadExtractionClient(settings, provider=make_provider("not json at all"))
        with pytest.raises(ResponseFormatError) as exc_info:
            await client.extract(DUBAI_MARINA_MESSAGE)
        assert exc_info.value.raw_payload == "not json at all"

    @pytest.mark.asyncio
    async def test_response_missing_required_field(self, settings):
        payload = {k: v for k, v in DUBAI_MARINA_RESPONSE.items() if k != "role"}
        client = LeadExtractionClient(settings, provider=make_provider(json.dumps(payload)))
        with pytest.raises(ResponseFormatError):
            await client.extract(DUBAI_MARINA_MESSAGE)

    @pytest.mark.asyncio
    async def test_missed_currency_logged_not_filled(self, settings, caplog):
        payload = dict(DUBAI_MARINA_RESPONSE, budget_currency=None)
        client = LeadExtractionClient(settings, provider=make_provider(json.dumps(payload)))

        with caplog.at_level("WARNING", logger="leadcleaner.services.extraction_service"):
            lead = await client.extract("2br in JLT, budget 80k AED", "UAE")

        assert lead.budget_currency is None
        assert "mentions AED" in caplog.text
