#!/usr/bin/env python3
"""
BestPrice.gr feed.

Usage:
    python3 scripts/bestprice_feed.py [--validate]

Requires SHOPIFY_ACCESS_TOKEN (environment or .env).
"""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from shopfeeds.cli import main_bestprice

if __name__ == "__main__":
    sys.exit(main_bestprice())
