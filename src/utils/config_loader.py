"""
Configuration loader for the price relay
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from src.error_handler import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_GRADE_MATRIX: Dict[str, List[str]] = {
    "PSA": ["9.0", "10.0"],
    "BGS": ["9.0", "9.5", "10.0"],
}

DEFAULT_WINDOWS: Dict[str, int] = {
    "week": 7,
    "month": 30,
    "quarter": 90,
    "year": 365,
}


class UpstreamConfig(BaseModel):
    """Upstream GraphQL endpoints and credentials"""

    bearer_token: str = Field(min_length=1)
    cert_api_url: str = Field(min_length=1)
    transactions_api_url: str = Field(min_length=1)
    # None disables the httpx timeout entirely
    timeout_seconds: Optional[float] = Field(default=None, gt=0)


class ConfidenceConfig(BaseModel):
    """Dispersion thresholds and trailing windows"""

    windows: Dict[str, int] = Field(default_factory=lambda: dict(DEFAULT_WINDOWS))
    high_threshold: float = Field(default=0.10, gt=0, lt=1)
    medium_threshold: float = Field(default=0.20, gt=0, lt=1)


class RelayConfig(BaseModel):
    upstream: UpstreamConfig
    grade_matrix: Dict[str, List[str]] = Field(default_factory=lambda: {k: list(v) for k, v in DEFAULT_GRADE_MATRIX.items()})
    confidence: ConfidenceConfig = Field(default_factory=ConfidenceConfig)

    @field_validator("grade_matrix", mode="before")
    @classmethod
    def _grades_as_strings(cls, value):
        # YAML reads unquoted 9.0 as a float
        if isinstance(value, dict):
            return {str(company): [str(g) for g in (grades or [])] for company, grades in value.items()}
        return value


def _read_yaml(config_path: Path) -> dict:
    if not config_path.exists():
        logger.info("No relay config file at %s; using defaults", config_path)
        return {}

    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_relay_config(config_path: Optional[Path] = None) -> RelayConfig:
    """
    Build the relay configuration from the environment and an optional YAML file

    Args:
        config_path: Path to the YAML file. Defaults to $PRICE_RELAY_CONFIG or config/relay_config.yml

    Returns:
        Validated RelayConfig object

    Raises:
        ConfigurationError: If credentials or endpoint URLs are missing or invalid
    """
    if config_path is None:
        env_path = os.getenv("PRICE_RELAY_CONFIG", "").strip()
        config_path = Path(env_path) if env_path else Path(__file__).parent.parent.parent / "config" / "relay_config.yml"

    data = _read_yaml(config_path)

    upstream = dict(data.get("upstream") or {})
    upstream["bearer_token"] = os.getenv("BEARER_TOKEN", upstream.get("bearer_token", ""))
    upstream["cert_api_url"] = os.getenv("API_URL_CERT", upstream.get("cert_api_url", ""))
    upstream["transactions_api_url"] = os.getenv("API_URL_TRANSACTIONS", upstream.get("transactions_api_url", ""))
    timeout = os.getenv("UPSTREAM_TIMEOUT_SECONDS", "").strip()
    if timeout:
        upstream["timeout_seconds"] = timeout
    data["upstream"] = upstream

    try:
        cfg = RelayConfig(**data)
    except ValidationError as e:
        logger.error("Relay config validation failed: %s", e.errors(include_input=False))
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors(include_input=False)
        )
        raise ConfigurationError(f"Invalid relay configuration ({problems})") from e

    logger.info("Loaded relay config (grade matrix: %s)", ", ".join(cfg.grade_matrix))
    return cfg
