#!/usr/bin/env python3
"""
Look up market prices for one slab from the command line:
- resolve the slab (certificate) number to the upstream asset
- fetch transactions for the requested grade filters (full matrix by default)
- print prices + confidence ratings as JSON, same shape as GET /get-prices

Uses BEARER_TOKEN, API_URL_CERT and API_URL_TRANSACTIONS from the environment or .env.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

load_dotenv()

from src.error_handler import PriceRelayError
from src.integrations.contracts.prices import PriceResponse
from src.integrations.policy.price_lookup_service import build_price_lookup_service
from src.utils.config_loader import load_relay_config


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


async def run(args: argparse.Namespace) -> int:
    try:
        service = build_price_lookup_service(load_relay_config(args.config))
        result = await service.lookup(args.slab_number, args.grading_company, args.grade_number)
    except PriceRelayError as e:
        logging.getLogger(__name__).error("Lookup failed: %s", e)
        return 1

    if result.fallback_used:
        print("(No sales for the requested grade; showing all grades.)", file=sys.stderr)
    print(json.dumps(PriceResponse.from_lookup(result).to_json(), indent=2))
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Fetch slab market prices and confidence ratings")
    parser.add_argument("slab_number", help="Grading certificate (slab) number")
    parser.add_argument("--grading-company", default=None, help="e.g. PSA or BGS")
    parser.add_argument("--grade-number", default=None, help="e.g. 10.0")
    parser.add_argument("--config", type=Path, default=None, help="Path to relay_config.yml")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    setup_logging(args.verbose)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
