from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ValidationError

from src.error_handler import UpstreamError
from src.integrations.contracts.interfaces import Transaction

logger = logging.getLogger(__name__)

# Anything above this is treated as a data error, not a sale
MAX_PRICE = Decimal("1000000000000")


class IntegrationResponseError(UpstreamError):
    def __init__(self, message: str, *, operation: Optional[str] = None, payload: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, operation=operation)
        self.payload = payload or {}


class CertAssetModel(BaseModel):
    id: str
    name: Optional[str] = None


def normalize_cert_response(data: Dict[str, Any]) -> CertAssetModel:
    cert = _get_mapping(data, "cert", "Cert")
    asset = _get_mapping(cert, "asset", "Cert")
    asset_id = asset.get("id")
    if asset_id is None or (isinstance(asset_id, str) and not asset_id.strip()):
        raise IntegrationResponseError("Cert response has no asset id", operation="Cert", payload=data)

    return _build_model(
        CertAssetModel,
        {"id": str(asset_id), "name": asset.get("name")},
        data,
        operation="Cert",
    )


def normalize_market_transactions(
    data: Dict[str, Any],
    *,
    grading_company: str,
    grade_number: str,
) -> List[Transaction]:
    asset = _get_mapping(data, "asset", "AssetMarketTransactions")
    rows = asset.get("marketTransactions")
    if not isinstance(rows, list):
        raise IntegrationResponseError(
            "AssetMarketTransactions response has no marketTransactions list",
            operation="AssetMarketTransactions",
            payload=data,
        )

    transactions: List[Transaction] = []
    for row in rows:
        if not isinstance(row, dict):
            logger.warning("Skipping non-object market transaction for %s %s: %r", grading_company, grade_number, row)
            continue
        price = _coerce_price(row.get("price"))
        sold_on = _coerce_date(row.get("date"))
        if price is None or sold_on is None:
            logger.warning(
                "Skipping malformed market transaction for %s %s: price=%r date=%r",
                grading_company,
                grade_number,
                row.get("price"),
                row.get("date"),
            )
            continue
        transactions.append(
            Transaction(price=price, date=sold_on, grading_company=grading_company, grade_number=grade_number)
        )
    return transactions


def _get_mapping(data: Dict[str, Any], key: str, operation: str) -> Dict[str, Any]:
    value = data.get(key)
    if not isinstance(value, dict):
        raise IntegrationResponseError(f"{operation} response is missing '{key}'", operation=operation, payload=data)
    return value


def _coerce_price(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    try:
        price = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    if not price.is_finite() or price < 0 or price > MAX_PRICE:
        return None
    return price


def _coerce_date(value: Any) -> Optional[date]:
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def _build_model(model_type, payload: Dict[str, Any], raw: Dict[str, Any], *, operation: str):
    try:
        return model_type(**payload)
    except ValidationError as exc:
        raise IntegrationResponseError(f"Response validation failed: {exc}", operation=operation, payload=raw) from exc
