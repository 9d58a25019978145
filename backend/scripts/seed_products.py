#!/usr/bin/env python3
"""
Seed the catalogue, from a JSON file or from the built-in demo products.

The JSON may be a list of entries or an object with an "items" list; each
entry needs a name and either price_cents or a decimal price.

Usage:
    python scripts/seed_products.py                   # demo catalogue + demo user
    python scripts/seed_products.py --file catalogue.json
    python scripts/seed_products.py --reset
"""
import argparse
import json
import os
import sys

# allow running from repo/scripts
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from storefront.config import settings
from storefront.db import Database
from storefront.db.seed import seed_demo_data, seed_products


def load_entries(path: str):
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise RuntimeError(f"Failed to parse JSON from {path}: {e}")
    if isinstance(data, dict):
        if isinstance(data.get("items"), list):
            return data["items"]
        return list(data.values())
    if isinstance(data, list):
        return data
    return []


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--file", "-f", default=None, help="Path to product json; demo catalogue when omitted")
    parser.add_argument("--reset", action="store_true", help="Drop and recreate all tables first")
    parser.add_argument("--database-url", default=settings.DATABASE_URL)
    args = parser.parse_args()

    if args.file and not os.path.exists(args.file):
        print("File not found:", args.file)
        sys.exit(1)

    database = Database(args.database_url)
    database.init(reset=args.reset)
    try:
        with database.session() as db:
            if args.file:
                products = seed_products(db, load_entries(args.file))
            else:
                products = seed_demo_data(db)
        print("Seeded products:", len(products))
    finally:
        database.dispose()


if __name__ == "__main__":
    main()
