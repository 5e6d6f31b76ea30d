"""Combo analysis API endpoints."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, status

from aso_combos.core.exceptions import ComboEngineError
from aso_combos.schemas.combo import (
    ComboAnalyzeRequest,
    ComboAnalyzeResponse,
    ComboCompareRequest,
    ComboCompareResponse,
    ComboPriorityRequest,
    TopComboSelectionResponse,
)
from aso_combos.services.combo_analysis import (
    ComboAnalysisInput,
    ComboAnalysisService,
    ComboComparisonInput,
    ComboPriorityInput,
    get_combo_analysis_service,
)
from aso_combos.services.combos.priority import get_priority_tier
from aso_combos.services.combos.types import TopComboSelection

logger = logging.getLogger(__name__)

router = APIRouter()

ComboService = Annotated[ComboAnalysisService, Depends(get_combo_analysis_service)]


def _selection_payload(selection: TopComboSelection) -> dict[str, Any]:
    payload = selection.to_dict()
    for item in payload["top_combos"]:
        score = item["priority_score"]
        score["priority_tier"] = get_priority_tier(score["total_score"])
    return payload


@router.post(
    "/analyze",
    response_model=ComboAnalyzeResponse,
    summary="Analyze metadata combos",
    description=(
        "Generate every keyword combo from title, subtitle and keywords field, classify "
        "each by strength and intent, and return the priority-ranked slate together "
        "with redundancy and missing-cluster reports."
    ),
)
def analyze_combos(request: ComboAnalyzeRequest, service: ComboService) -> dict[str, Any]:
    """Run the full combo analysis for one metadata triple."""
    try:
        output = service.run(
            ComboAnalysisInput(
                title=request.title,
                subtitle=request.subtitle,
                keywords_field=request.keywords_field,
                brand_name=request.brand_name,
                ranking_data=request.ranking_domain(),
                popularity_data=request.popularity_domain(),
                top_limit=request.top_limit,
            )
        )
    except ComboEngineError as exc:
        logger.warning("Combo analysis rejected", extra={"error": exc.message, **exc.details})
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=exc.message,
        ) from exc

    payload = output.to_dict()
    payload["top_combos"] = _selection_payload(output.top_combos)
    return payload


@router.post(
    "/priority",
    response_model=TopComboSelectionResponse,
    summary="Score combos",
    description="Score caller-supplied combos against the metadata and rank them by priority.",
)
def prioritize_combos(request: ComboPriorityRequest, service: ComboService) -> dict[str, Any]:
    """Rank explicit combos by weighted priority score."""
    try:
        selection = service.prioritize(
            ComboPriorityInput(
                title=request.title,
                subtitle=request.subtitle,
                combos=request.combos,
                keywords_field=request.keywords_field,
                ranking_data=request.ranking_domain(),
                popularity_data=request.popularity_domain(),
                limit=request.limit,
            )
        )
    except ComboEngineError as exc:
        logger.warning("Combo scoring rejected", extra={"error": exc.message, **exc.details})
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=exc.message,
        ) from exc

    return _selection_payload(selection)


@router.post(
    "/compare",
    response_model=ComboCompareResponse,
    summary="Compare listing with draft",
    description=(
        "Analyze the live listing and an edited draft, then report added and removed "
        "combos, tier movements, keyword impact and strengthening opportunities."
    ),
)
def compare_combos(request: ComboCompareRequest, service: ComboService) -> dict[str, Any]:
    """Diff combo coverage between a baseline listing and a draft."""
    try:
        comparison = service.compare(
            ComboComparisonInput(
                baseline=ComboAnalysisInput(
                    title=request.baseline.title,
                    subtitle=request.baseline.subtitle,
                    keywords_field=request.baseline.keywords_field,
                    brand_name=request.brand_name,
                ),
                draft=ComboAnalysisInput(
                    title=request.draft.title,
                    subtitle=request.draft.subtitle,
                    keywords_field=request.draft.keywords_field,
                    brand_name=request.brand_name,
                ),
            )
        )
    except ComboEngineError as exc:
        logger.warning("Combo comparison rejected", extra={"error": exc.message, **exc.details})
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=exc.message,
        ) from exc

    return comparison.to_dict()
