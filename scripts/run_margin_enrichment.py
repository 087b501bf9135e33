#!/usr/bin/env python3
"""
Enrich the line items of an event payload with margins.
Reads an event JSON file, looks up one reference document per item and
prints the enriched items as JSON.
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from document_store import (
    DocumentStoreClient,
    DocumentStoreConfig,
    DocumentStoreFactory,
    InMemoryDocumentStore,
)
from item_enrichment import (
    EnrichmentConfigurationError,
    EnrichmentSettings,
    ItemEnricher,
    MarginConfig,
    PayloadError,
    ValueCalculation,
    extract_items,
)
from pydantic import ValidationError

logger = logging.getLogger(__name__)


def load_json(file_path: str) -> Any:
    """Load a JSON file, exiting with an error message when it cannot be read."""
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        print(f"Error: File not found: {file_path}", file=sys.stderr)
        sys.exit(1)
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON in {file_path}: {e}", file=sys.stderr)
        sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Attach margins to the line items of an event payload",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Local run against a JSON file of reference documents
  python run_margin_enrichment.py --event event.json --documents docs.json \\
      --collection products --value-field price

  # REST document store (DOCUMENT_STORE_* environment variables)
  python run_margin_enrichment.py --event event.json --collection products \\
      --value-field cost --return-rate-field return_rate \\
      --value-calculation returnRate --namespace my-project

Available formulas: valueQuantity, returnRate, valueWithDiscount
        """,
    )
    parser.add_argument("--event", required=True, help="Path to event payload JSON file")
    parser.add_argument("--collection", help="Collection holding reference documents")
    parser.add_argument("--value-field", help="Document field holding the item value")
    parser.add_argument(
        "--return-rate-field", help="Document field holding the return rate"
    )
    parser.add_argument(
        "--value-calculation",
        help="Margin formula (default: valueQuantity)",
    )
    parser.add_argument(
        "--documents",
        help="JSON file mapping '<collection>/<item_id>' to document fields (uses the in-memory store)",
    )
    parser.add_argument("--namespace", help="Project/namespace for store reads")
    parser.add_argument("--output", help="Write enriched items to this file instead of stdout")
    parser.add_argument(
        "--strict-formula",
        action="store_true",
        help="Fail when the formula is not recognised instead of using margin 0",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def build_settings(args: argparse.Namespace) -> EnrichmentSettings:
    settings = EnrichmentSettings()
    overrides: dict[str, Any] = {}
    if args.namespace:
        overrides["namespace"] = args.namespace
    if args.strict_formula:
        overrides["strict_formula"] = True
    return settings.model_copy(update=overrides) if overrides else settings


def build_margin_config(
    args: argparse.Namespace, settings: EnrichmentSettings
) -> MarginConfig:
    """Combine command-line values with the settings defaults."""
    return MarginConfig(
        collection_id=args.collection or settings.collection_id or "",
        value_field=args.value_field or settings.value_field or "",
        return_rate_field=args.return_rate_field or settings.return_rate_field,
        value_calculation=args.value_calculation
        or settings.value_calculation
        or ValueCalculation.VALUE_QUANTITY.value,
    )


def build_store(args: argparse.Namespace) -> DocumentStoreClient:
    if args.documents:
        documents = load_json(args.documents)
        if not isinstance(documents, dict):
            print("Error: Documents file must contain a JSON object", file=sys.stderr)
            sys.exit(1)
        return InMemoryDocumentStore(documents)

    try:
        config = DocumentStoreConfig()
    except ValidationError as e:
        raise EnrichmentConfigurationError(f"Invalid document store configuration: {e}") from e
    if args.verbose:
        config.log_configuration()
    return DocumentStoreFactory.create(config)


async def run(args: argparse.Namespace) -> list[Any]:
    """Enrich the items of ``args.event`` and return them."""
    settings = build_settings(args)
    try:
        margin_config = build_margin_config(args, settings)
    except ValidationError as e:
        raise EnrichmentConfigurationError(f"Invalid margin configuration: {e}") from e

    event = load_json(args.event)
    items = extract_items(event)

    store = build_store(args)
    try:
        enricher = ItemEnricher(store, settings=settings)
        return await enricher.enrich(items, margin_config)
    finally:
        await store.close()


async def main(argv: list[str] | None = None) -> int:
    """
    Parse command-line options, run the enrichment and write the result.

    Returns:
        int: Process exit status (0 on success, 2 on configuration/payload errors).
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        items = await run(args)
    except (EnrichmentConfigurationError, PayloadError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    output = json.dumps(items, ensure_ascii=False, indent=2)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output + "\n")
        logger.info(f"Wrote {len(items)} items to {args.output}")
    else:
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
