import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, PlainTextResponse

from src.error_handler import ErrorHandler, PriceRelayError
from src.integrations.contracts.prices import PriceResponse
from src.integrations.policy.price_lookup_service import PriceLookupService, build_price_lookup_service
from src.utils.config_loader import load_relay_config

logger = logging.getLogger(__name__)

router = APIRouter()
error_handler = ErrorHandler()

# Built on first request so the app can start (and be tested) without credentials
_service: Optional[PriceLookupService] = None


def get_price_service() -> PriceLookupService:
    global _service
    if _service is None:
        _service = build_price_lookup_service(load_relay_config())
    return _service


@router.get("/get-prices", tags=["Prices"])
async def get_prices(
    slab_number: Optional[str] = Query(default=None, alias="slabNumber"),
    psa_number: Optional[str] = Query(default=None, alias="psaNumber", description="Legacy alias for slabNumber"),
    grading_company: Optional[str] = Query(default=None, alias="gradingCompany"),
    grade_number: Optional[str] = Query(default=None, alias="gradeNumber"),
    service: PriceLookupService = Depends(get_price_service),
):
    slab = slab_number or psa_number
    try:
        result = await service.lookup(slab, grading_company, grade_number)
    except PriceRelayError as e:
        status_code, body = error_handler.handle_exception(
            e,
            context={"slab_number": slab, "grading_company": grading_company, "grade_number": grade_number},
        )
        return PlainTextResponse(body, status_code=status_code)

    logger.info(
        "Served %d prices for slab %s (fallback=%s)",
        len(result.prices),
        slab,
        result.fallback_used,
    )
    return JSONResponse(PriceResponse.from_lookup(result).to_json())
