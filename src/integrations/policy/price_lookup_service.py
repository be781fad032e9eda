"""
Price Lookup Service

Orchestrates one price request end to end:
- resolve the slab number to an internal asset id
- aggregate market transactions for the requested grade filters
- fall back to the full grade matrix when explicit filters find nothing
- rate confidence over the configured trailing windows
"""

import logging
from typing import Optional

import httpx

from src.confidence_estimator import ConfidenceEstimator
from src.error_handler import InputValidationError
from src.integrations.clients.real_http.cert_lookup import CertLookupClient
from src.integrations.clients.real_http.graphql import GraphQLClient
from src.integrations.clients.real_http.market_transactions import MarketTransactionsClient
from src.integrations.contracts.interfaces import PriceLookupResult
from src.utils.config_loader import RelayConfig

logger = logging.getLogger(__name__)

MISSING_SLAB_MESSAGE = "Please provide a slab number"


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class PriceLookupService:
    def __init__(
        self,
        resolver: CertLookupClient,
        aggregator: MarketTransactionsClient,
        estimator: ConfidenceEstimator,
    ):
        self.resolver = resolver
        self.aggregator = aggregator
        self.estimator = estimator

    async def lookup(
        self,
        slab_number: Optional[str],
        grading_company: Optional[str] = None,
        grade_number: Optional[str] = None,
    ) -> PriceLookupResult:
        slab_number = _clean(slab_number)
        if not slab_number:
            raise InputValidationError(MISSING_SLAB_MESSAGE)

        grading_company = _clean(grading_company)
        grade_number = _clean(grade_number)

        asset_id = await self.resolver.resolve(slab_number)
        prices = await self.aggregator.fetch_prices(asset_id, grading_company, grade_number)

        fallback_used = False
        if not prices and (grading_company or grade_number):
            logger.info(
                "No transactions for %s with filter company=%s grade=%s; retrying without filters",
                slab_number,
                grading_company,
                grade_number,
            )
            prices = await self.aggregator.fetch_prices(asset_id)
            fallback_used = True

        confidence = self.estimator.estimate_windows(prices)
        return PriceLookupResult(asset_id=asset_id, prices=prices, confidence=confidence, fallback_used=fallback_used)


def build_price_lookup_service(
    cfg: RelayConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> PriceLookupService:
    graphql = GraphQLClient(
        bearer_token=cfg.upstream.bearer_token,
        timeout_seconds=cfg.upstream.timeout_seconds,
        transport=transport,
    )
    return PriceLookupService(
        resolver=CertLookupClient(graphql, cfg.upstream.cert_api_url),
        aggregator=MarketTransactionsClient(graphql, cfg.upstream.transactions_api_url, cfg.grade_matrix),
        estimator=ConfidenceEstimator(
            windows=cfg.confidence.windows,
            high_threshold=cfg.confidence.high_threshold,
            medium_threshold=cfg.confidence.medium_threshold,
        ),
    )
