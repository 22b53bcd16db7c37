#!/usr/bin/env python3
"""
Google Shopping feeds, one per market.

Usage:
    python3 scripts/google_shopping_feed.py GR|all|list

Requires SHOPIFY_ACCESS_TOKEN (environment or .env).
"""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from shopfeeds.cli import main_google

if __name__ == "__main__":
    sys.exit(main_google())
