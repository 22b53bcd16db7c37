#!/usr/bin/env python3
"""
Meta (Facebook/Instagram) catalog feed for Greece.

Usage:
    python3 scripts/meta_feed.py [--validate]

Requires SHOPIFY_ACCESS_TOKEN (environment or .env).
"""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from shopfeeds.cli import main_meta

if __name__ == "__main__":
    sys.exit(main_meta())
