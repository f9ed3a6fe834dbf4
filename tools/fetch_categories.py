#!/usr/bin/env python3
import argparse
import json
import sys
from pathlib import Path

from backend.query import DEFAULT_CATEGORIES_PATH
from backend.yelp import SearchError, YelpClient, restaurant_categories


def main(argv=None):
    parser = argparse.ArgumentParser(description="Refresh the bundled restaurant category table from Yelp")
    parser.add_argument("--out", default=str(DEFAULT_CATEGORIES_PATH), help="Where to write the JSON table")
    parser.add_argument("--parent", action="append", dest="parents",
                        help="Parent alias to keep (repeatable, default: restaurants and food)")
    parser.add_argument("--api-key", default=None, help="Yelp API key (default: $YELP_API_KEY)")
    parser.add_argument("--dry-run", action="store_true", help="Print the table instead of writing it")
    args = parser.parse_args(argv)

    client = YelpClient(api_key=args.api_key)
    if not client.available:
        print("YELP_API_KEY not set. Pass --api-key or export YELP_API_KEY.", file=sys.stderr)
        return 2

    try:
        raw = client.categories()
    except SearchError as exc:
        print(f"Could not fetch categories: {exc}", file=sys.stderr)
        return 1

    table = restaurant_categories(raw, tuple(args.parents or ("restaurants", "food")))
    text = json.dumps(table, ensure_ascii=False, indent=2)
    if args.dry_run:
        print(text)
        return 0

    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text + "\n", encoding="utf-8")
    print(f"Wrote {len(table)} categories to {out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
