# ABOUTME: The `biblioenrich enrich` command: runs the full enrichment pipeline over a JSON collection.
# ABOUTME: Loads records, queries every configured source, writes the enriched JSON, prints a summary.

import asyncio
import logging
from collections import Counter
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from biblioenrich.cli.options import (
    cinii_app_id_option,
    concurrency_option,
    google_books_api_key_option,
    isbndb_api_key_option,
    mode_option,
)
from biblioenrich.config import CINII_TARGETS, ApiCredentials
from biblioenrich.core.aggregator import EnrichmentAggregator
from biblioenrich.gateways.base import CollectionGateway, SingleGateway
from biblioenrich.gateways.cinii import CiNiiGateway
from biblioenrich.gateways.google_books import GoogleBooksGateway
from biblioenrich.gateways.http import BiblioHttpClient, HttpClient
from biblioenrich.gateways.isbndb import ISBNdbGateway
from biblioenrich.gateways.kinokuniya import KinokuniyaGateway
from biblioenrich.gateways.mathlib import MathLibCatalogGateway
from biblioenrich.gateways.ndl import NDLGateway
from biblioenrich.gateways.openbd import OpenBDGateway
from biblioenrich.gateways.routing import RegionRoutedGateway
from biblioenrich.records.mapping import RecordFormatError, load_collection, save_collection
from biblioenrich.records.types import BookCollection, BookMode, LookupStatus

logger = logging.getLogger(__name__)


def _create_aggregator(
    http_client: HttpClient,
    credentials: ApiCredentials,
    *,
    concurrency: int,
    mathlib: bool = True,
    kinokuniya: bool = True,
) -> EnrichmentAggregator:
    """Wire the default source chain.

    OpenBD in bulk first, then per record NDL/ISBNdb (ordered by region),
    Google Books, and each CiNii library; finally the collection-wide math
    library catalog and Kinokuniya descriptions.
    """
    single: list[SingleGateway] = [
        RegionRoutedGateway(
            domestic=NDLGateway(http_client),
            international=ISBNdbGateway(http_client, credentials.isbndb_api_key),
        ),
        GoogleBooksGateway(http_client, credentials.google_books_api_key),
    ]
    if credentials.cinii_app_id:
        single.extend(
            CiNiiGateway(http_client, credentials.cinii_app_id, target)
            for target in CINII_TARGETS.values()
        )
    else:
        logger.warning("No CiNii app id configured; library holdings will not be checked")

    collection: list[CollectionGateway] = []
    if mathlib:
        collection.append(MathLibCatalogGateway(http_client))
    if kinokuniya:
        collection.append(KinokuniyaGateway(http_client, concurrency=concurrency))

    return EnrichmentAggregator(
        bulk_gateways=[OpenBDGateway(http_client)],
        single_gateways=single,
        collection_gateways=collection,
        concurrency=concurrency,
    )


async def _run_pipeline(
    collection: BookCollection,
    mode: BookMode,
    credentials: ApiCredentials,
    *,
    concurrency: int,
    mathlib: bool,
    kinokuniya: bool,
) -> BookCollection:
    async with BiblioHttpClient() as http_client:
        aggregator = _create_aggregator(
            http_client,
            credentials,
            concurrency=concurrency,
            mathlib=mathlib,
            kinokuniya=kinokuniya,
        )
        return await aggregator.enrich(collection, mode)


def _default_output(input_path: Path) -> Path:
    return input_path.with_name(f"{input_path.stem}.enriched.json")


def _status_table(collection: BookCollection) -> Table:
    """Per-source tally of lookup outcomes across the collection."""
    tallies: dict[str, Counter[LookupStatus]] = {}
    for record in collection.values():
        for source, status in record.lookup_status.items():
            tallies.setdefault(source, Counter())[status] += 1

    table = Table(title="Lookup results")
    table.add_column("Source", style="bold")
    table.add_column("Found", justify="right", style="green")
    table.add_column("Not found", justify="right", style="yellow")
    table.add_column("Error", justify="right", style="red")
    for source in sorted(tallies):
        counts = tallies[source]
        table.add_row(
            source,
            str(counts[LookupStatus.FOUND]),
            str(counts[LookupStatus.NOT_FOUND]),
            str(counts[LookupStatus.ERROR]),
        )
    return table


@click.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "-o",
    "--output",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Where to write the enriched collection (default: <input>.enriched.json).",
)
@mode_option
@concurrency_option
@cinii_app_id_option
@google_books_api_key_option
@isbndb_api_key_option
@click.option(
    "--mathlib/--no-mathlib",
    default=True,
    help="Check the Sophia mathematics library holdings lists (default: on).",
)
@click.option(
    "--kinokuniya/--no-kinokuniya",
    default=True,
    help="Fetch missing descriptions from Kinokuniya (default: on).",
)
def enrich(
    input_path: Path,
    output_path: Path | None,
    mode: BookMode,
    concurrency: int,
    cinii_app_id: str,
    google_books_api_key: str,
    isbndb_api_key: str,
    mathlib: bool,
    kinokuniya: bool,
) -> None:
    """Enrich a JSON book collection with bibliographic and holdings data."""
    console = Console()

    try:
        collection = load_collection(input_path)
    except (RecordFormatError, OSError) as exc:
        console.print(f"[red]Cannot read {input_path}: {exc}[/red]")
        raise SystemExit(1) from exc

    if not collection:
        console.print("[yellow]No records in the input collection.[/yellow]")

    credentials = ApiCredentials(
        cinii_app_id=cinii_app_id,
        google_books_api_key=google_books_api_key,
        isbndb_api_key=isbndb_api_key,
    )
    enriched = asyncio.run(
        _run_pipeline(
            collection,
            mode,
            credentials,
            concurrency=concurrency,
            mathlib=mathlib,
            kinokuniya=kinokuniya,
        )
    )

    output_path = output_path or _default_output(input_path)
    save_collection(output_path, enriched)

    if enriched:
        console.print(_status_table(enriched))
    console.print(f"\n[dim]{len(enriched)} record(s) written to {output_path}[/dim]")
