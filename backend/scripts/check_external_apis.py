#!/usr/bin/env python3
"""
Check if the product sources (Open Food Facts, Kassalapp, Matvaretabellen) are reachable.
Run from backend: python scripts/check_external_apis.py
Exit 0 if at least one source works; 1 if all fail or none configured.
"""
import logging
import sys
from pathlib import Path
from typing import Tuple

# Add backend to path when run as script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from dotenv import load_dotenv
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

logging.basicConfig(level=logging.INFO)

# Short timeout for health check
HEALTH_TIMEOUT = 8
# Tine Lettmelk, present in both product databases
PROBE_BARCODE = "7038010009457"


def check_open_food_facts() -> Tuple[bool, str]:
    """Return (success, message)."""
    from gronnest.external_apis.open_food_facts import OpenFoodFactsSource
    res = OpenFoodFactsSource(timeout=HEALTH_TIMEOUT, max_retries=1).fetch_by_barcode(PROBE_BARCODE)
    if res.status != "unavailable":
        return True, f"ok ({res.status})"
    return False, res.raw_response_summary or "no result"


def check_kassalapp(api_key: str) -> Tuple[bool, str]:
    """Return (success, message)."""
    if not (api_key or "").strip():
        return False, "no API key (set KASSALAPP_API_KEY)"
    from gronnest.external_apis.kassalapp import KassalappSource
    res = KassalappSource(api_key=api_key, timeout=HEALTH_TIMEOUT, max_retries=1).fetch_by_barcode(PROBE_BARCODE)
    if res.status != "unavailable":
        return True, f"ok ({res.status})"
    return False, res.raw_response_summary or "no result"


def check_matvaretabellen() -> Tuple[bool, str]:
    """Return (success, message)."""
    from gronnest.external_apis.matvaretabellen import MatvaretabellenSource
    foods, summary = MatvaretabellenSource(timeout=HEALTH_TIMEOUT, max_retries=1).load_foods()
    if foods:
        return True, f"ok ({len(foods)} foods)"
    return False, summary or "no result"


def main() -> int:
    from gronnest.config import (
        get_kassalapp_api_key,
        get_matvaretabellen_enabled,
        get_open_food_facts_enabled,
    )
    print("Checking product sources...")
    off_ok = False
    off_msg = "disabled (OPEN_FOOD_FACTS_ENABLED=false)"
    if get_open_food_facts_enabled():
        off_ok, off_msg = check_open_food_facts()
    print(f"  Open Food Facts: {'OK' if off_ok else 'FAIL'} - {off_msg}")
    kl_ok, kl_msg = check_kassalapp(get_kassalapp_api_key())
    print(f"  Kassalapp:       {'OK' if kl_ok else 'FAIL'} - {kl_msg}")
    mvt_ok = False
    mvt_msg = "disabled (MATVARETABELLEN_ENABLED=false)"
    if get_matvaretabellen_enabled():
        mvt_ok, mvt_msg = check_matvaretabellen()
    print(f"  Matvaretabellen: {'OK' if mvt_ok else 'FAIL'} - {mvt_msg}")
    if off_ok or kl_ok or mvt_ok:
        print("At least one source is working.")
        return 0
    print("All configured sources failed or none configured.")
    return 1


if __name__ == "__main__":
    sys.exit(main())
