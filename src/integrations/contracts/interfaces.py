from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Dict, List


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class ConfidenceLevel(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


# ---------------------------------------------------------------------------
# Core models
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Transaction:
    """A single historical sale, tagged with the grade filter it was fetched under."""
    price: Decimal
    date: date
    grading_company: str
    grade_number: str


@dataclass(frozen=True)
class ConfidenceResult:
    average_price: Decimal
    average_deviation: Decimal
    confidence_level: ConfidenceLevel
    sample_size: int = 0


@dataclass
class PriceLookupResult:
    asset_id: str
    prices: List[Transaction] = field(default_factory=list)
    confidence: Dict[str, ConfidenceResult] = field(default_factory=dict)
    fallback_used: bool = False
