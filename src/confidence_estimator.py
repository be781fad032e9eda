"""Confidence rating from recent price dispersion.

A window's rating compares the mean absolute deviation of the sale prices in
that window with their mean:

- High: deviation below ``high_threshold`` of the mean (10% by default)
- Medium: deviation below ``medium_threshold`` of the mean (20% by default)
- Low: anything else, including an empty window
"""
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal, DecimalException
from typing import Callable, Dict, Iterable, List, Optional

import logging

from src.error_handler import ComputationError
from src.integrations.contracts.interfaces import ConfidenceLevel, ConfidenceResult, Transaction
from src.utils.config_loader import DEFAULT_WINDOWS

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


class ConfidenceEstimator:
    """Computes per-window price dispersion ratings. Stateless apart from its settings."""

    def __init__(
        self,
        windows: Optional[Dict[str, int]] = None,
        high_threshold: float = 0.10,
        medium_threshold: float = 0.20,
        today: Callable[[], date] = _utc_today,
    ):
        self.windows = dict(windows or DEFAULT_WINDOWS)
        self.high_threshold = Decimal(str(high_threshold))
        self.medium_threshold = Decimal(str(medium_threshold))
        self._today = today

    def estimate_windows(self, transactions: Iterable[Transaction]) -> Dict[str, ConfidenceResult]:
        items = list(transactions)
        today = self._today()
        results = {label: self._estimate_since(items, today - timedelta(days=days)) for label, days in self.windows.items()}
        logger.info(
            "Confidence over %d transactions: %s",
            len(items),
            ", ".join(f"{label}={r.confidence_level.value}" for label, r in results.items()),
        )
        return results

    def estimate(self, transactions: Iterable[Transaction], days: int = 30) -> ConfidenceResult:
        """Single trailing window (last ``days`` days, today included).

        Older callers filtered on sales made *before* the cutoff; that behaviour
        is deprecated and this method always keeps sales on or after it.
        """
        return self._estimate_since(list(transactions), self._today() - timedelta(days=days))

    def _estimate_since(self, transactions: List[Transaction], cutoff: date) -> ConfidenceResult:
        prices = [t.price for t in transactions if t.date >= cutoff]
        if not prices:
            return ConfidenceResult(average_price=ZERO, average_deviation=ZERO, confidence_level=ConfidenceLevel.LOW)

        count = Decimal(len(prices))
        try:
            average_price = sum(prices, ZERO) / count
            average_deviation = sum((abs(p - average_price) for p in prices), ZERO) / count
        except DecimalException as e:
            raise ComputationError(f"Cannot aggregate {len(prices)} prices since {cutoff}: {e!r}") from e

        return ConfidenceResult(
            average_price=average_price,
            average_deviation=average_deviation,
            confidence_level=self.classify(average_price, average_deviation),
            sample_size=len(prices),
        )

    def classify(self, average_price: Decimal, average_deviation: Decimal) -> ConfidenceLevel:
        if average_deviation < average_price * self.high_threshold:
            return ConfidenceLevel.HIGH
        if average_deviation < average_price * self.medium_threshold:
            return ConfidenceLevel.MEDIUM
        return ConfidenceLevel.LOW
