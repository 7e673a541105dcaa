#!/usr/bin/env python3
# =============================================================================
# scripts/demo_alterations.py - Alteration Pipeline Walkthrough
# =============================================================================
# Runs a product catalog through an alters map and prints each stage:
# casts, array splitting, related-document lookup, hydration, URLs and
# bind-variable cleanup. Uses in-memory stores only.
#
# Usage:
#   python scripts/demo_alterations.py
#   python scripts/demo_alterations.py --debug      # show every executed step
# =============================================================================

import argparse
import json
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pandas as pd
from pydantic import BaseModel

from alterations import AlterationEngine, AlterTag, CleanFlag
from alterations.frames import alter_dataframe
from app.config import Settings
from app.log_config import configure_logging
from core.services import InMemoryDocumentModel
from lib.container import Container


class Owner(BaseModel):
    id: int
    name: str
    email: str | None = None


def slugify(value, separator="-"):
    return separator.join(str(value).lower().split())


def price_label(document, container, key, value, args):
    currency = args[0] if args else "EUR"
    return f"{document.get('price')} {currency}"


def build_container() -> Container:
    container = Container({"baseUrl": "https://shop.example.com"})
    container.set("users", InMemoryDocumentModel([
        {"id": 1, "name": "Ada", "email": "ada@example.com"},
        {"id": 2, "name": "Linus", "email": ""},
    ]))
    container.set("Owner", Owner)
    container.set("slugify", slugify)
    return container


PRODUCT_ALTERS = {
    "price": AlterTag.FLOAT,
    "stock": AlterTag.INT,
    "archived": AlterTag.NOT,
    "tags": [AlterTag.ARRAY_SPLIT, AlterTag.CLEAN],
    "slug": ["call", "slugify"],
    "owner": [["get", "users"], ["hydrate", "Owner"]],
    "meta": "jsonParse",
    "url": ["url", "/products", "slug"],
    "label": ["map", price_label, "USD"],
}


def print_json(title: str, payload) -> None:
    print(f"\n=== {title} ===")
    print(json.dumps(payload, indent=2, default=lambda o: o.model_dump() if hasattr(o, "model_dump") else str(o)))


def main() -> None:
    parser = argparse.ArgumentParser(description="Alteration pipeline walkthrough")
    parser.add_argument("--debug", action="store_true", help="Log every executed step")
    options = parser.parse_args()

    configure_logging(Settings(DEBUG=True) if options.debug else None)

    engine = AlterationEngine(
        build_container(),
        alters=PRODUCT_ALTERS,
        bind_alters={"list": {"limit": "int", "tags": ["array", "clean"]}},
    )

    valid, errors = engine.validate_alters()
    print(f"Alters valid: {valid} {errors if errors else ''}")

    products = [
        {"id": 10, "price": "19.90", "stock": "3 units", "archived": 0,
         "tags": "summer;;sale; ", "slug": "Straw Hat", "owner": 1,
         "meta": '{"color": "beige"}'},
        {"id": 11, "price": "5", "stock": None, "archived": 1,
         "tags": "", "slug": "Beach Towel", "owner": 2, "meta": "{oops"},
    ]
    print_json("Input", products)

    result = engine.execute(products)
    print_json("Altered", result.document)
    print(f"\nModified keys: {', '.join(result.modified_keys)}")
    print(f"Steps: {len(result.steps)} in {result.total_duration_ms:.2f} ms")

    bind_vars = engine.alter_bind_vars({"limit": "20", "tags": "a;b;", "q": ""}, "list")
    print_json("Bind vars", bind_vars)

    df = pd.DataFrame({"id": [1, 2, 3], "price": ["1.5", None, "abc"]})
    print("\n=== DataFrame ===")
    print(alter_dataframe(engine, df, {"price": "float", "flag": ["value", True]}))

    print(f"\nDefault normalize flags: {CleanFlag.DEFAULT | CleanFlag.RETURN_NULL!r}")


if __name__ == "__main__":
    main()
