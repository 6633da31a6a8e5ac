"""Evaluation routes — GET /evaluations."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from convoeval.api.deps import get_enrichment_pipeline
from convoeval.core.settings import get_settings
from convoeval.enrichment.errors import StorageError
from convoeval.enrichment.pipeline import EnrichmentPipeline

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/evaluations", tags=["evaluations"])

_settings = get_settings()


@router.get("", summary="List recent evaluations with customer names")
async def list_evaluations(
    limit: int = Query(
        default=_settings.evaluations_default_limit,
        ge=1,
        le=_settings.evaluations_max_limit,
    ),
    pipeline: EnrichmentPipeline = Depends(get_enrichment_pipeline),
):
    try:
        enriched = await pipeline.enrich(limit)
    except StorageError as exc:
        logger.error("Evaluation listing failed during %s", exc.operation)
        raise HTTPException(status_code=503, detail="Evaluation storage unavailable") from exc

    return [item.to_dict() for item in enriched]
