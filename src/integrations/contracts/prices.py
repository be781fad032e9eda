"""
Price response contracts.

Defines the JSON shape returned by GET /get-prices:
- the merged list of tagged transactions
- the per-window confidence ratings

Both the API and scripts/lookup_prices.py serialise through these models so
the payload stays identical across entry points.
"""

from __future__ import annotations

import datetime as dt
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

from .interfaces import ConfidenceLevel, ConfidenceResult, PriceLookupResult, Transaction

CENTS = Decimal("0.01")


class TransactionPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    price: Decimal
    date: dt.date
    grading_company: str = Field(alias="gradingCompany")
    grade_number: str = Field(alias="gradeNumber")

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "TransactionPayload":
        return cls(
            price=transaction.price,
            date=transaction.date,
            grading_company=transaction.grading_company,
            grade_number=transaction.grade_number,
        )


class ConfidencePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    average_price: Decimal = Field(alias="averagePrice")
    average_deviation: Decimal = Field(alias="averageDeviation")
    confidence_level: ConfidenceLevel = Field(alias="confidenceLevel")
    sample_size: int = Field(default=0, alias="sampleSize")

    @classmethod
    def from_result(cls, result: ConfidenceResult) -> "ConfidencePayload":
        return cls(
            average_price=result.average_price.quantize(CENTS, rounding=ROUND_HALF_UP),
            average_deviation=result.average_deviation.quantize(CENTS, rounding=ROUND_HALF_UP),
            confidence_level=result.confidence_level,
            sample_size=result.sample_size,
        )


class PriceResponse(BaseModel):
    prices: List[TransactionPayload] = Field(default_factory=list)
    confidence: Dict[str, ConfidencePayload] = Field(default_factory=dict)

    @classmethod
    def from_lookup(cls, result: PriceLookupResult) -> "PriceResponse":
        return cls(
            prices=[TransactionPayload.from_transaction(t) for t in result.prices],
            confidence={label: ConfidencePayload.from_result(r) for label, r in result.confidence.items()},
        )

    def to_json(self) -> Dict:
        return self.model_dump(mode="json", by_alias=True)
