#!/usr/bin/env python3
"""
Google local inventory feed for the physical store.

Usage:
    python3 scripts/local_inventory_feed.py

Requires SHOPIFY_ACCESS_TOKEN (environment or .env).
"""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from shopfeeds.cli import main_local_inventory

if __name__ == "__main__":
    sys.exit(main_local_inventory())
