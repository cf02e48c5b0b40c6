from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from leadcleaner.config import settings
from leadcleaner.schemas.lead import ExtractedLead, ExtractionRequest, lead_response_schema
from leadcleaner.services.extraction_service import LeadExtractionClient
from leadcleaner.utils.exceptions import (
    ConfigurationError,
    ResponseFormatError,
    TransportError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/leads")

GENERIC_FAILURE = "Failed to process the lead. Please try again or check your API key."

_client_instance: LeadExtractionClient | None = None


def get_extraction_client() -> LeadExtractionClient:
    global _client_instance
    if _client_instance is None:
        _client_instance = LeadExtractionClient(settings)
    return _client_instance


@router.post("/parse", response_model=ExtractedLead)
async def parse_lead(
    body: ExtractionRequest,
    client: LeadExtractionClient = Depends(get_extraction_client),
) -> ExtractedLead:
    try:
        return await client.extract(body.message, body.market_hint)
    except ConfigurationError as e:
        logger.error("Lead extraction is not configured: %s", e)
        raise HTTPException(status_code=503, detail=GENERIC_FAILURE) from e
    except TransportError as e:
        logger.warning("Lead extraction transport failure (%s): %s", e.provider, e)
        raise HTTPException(status_code=502, detail=GENERIC_FAILURE) from e
    except ResponseFormatError as e:
        logger.warning("Lead extraction returned malformed output: %s", e)
        raise HTTPException(status_code=502, detail=GENERIC_FAILURE) from e


@router.get("/schema")
def get_lead_schema() -> dict[str, Any]:
    return lead_response_schema()
