# ABOUTME: Shared Click options for biblioenrich CLI commands.
# ABOUTME: Provides API credential options (with environment fallbacks) and run tuning flags.

import click

from biblioenrich.config import (
    DEFAULT_CONCURRENCY,
    ENV_CINII_APP_ID,
    ENV_GOOGLE_BOOKS_API_KEY,
    ENV_ISBNDB_API_KEY,
)
from biblioenrich.records.types import BOOK_MODES

cinii_app_id_option = click.option(
    "--cinii-app-id",
    envvar=ENV_CINII_APP_ID,
    default="",
    show_envvar=True,
    help="CiNii Books application id (library holdings lookups are skipped without it).",
)

google_books_api_key_option = click.option(
    "--google-books-api-key",
    envvar=ENV_GOOGLE_BOOKS_API_KEY,
    default="",
    show_envvar=True,
    help="Google Books API key (optional).",
)

isbndb_api_key_option = click.option(
    "--isbndb-api-key",
    envvar=ENV_ISBNDB_API_KEY,
    default="",
    show_envvar=True,
    help="ISBNdb API key (ISBNdb is skipped without it).",
)

mode_option = click.option(
    "--mode",
    type=click.Choice(BOOK_MODES),
    default="wish",
    show_default=True,
    help="Which book list the input collection came from.",
)

concurrency_option = click.option(
    "-c",
    "--concurrency",
    type=click.IntRange(min=1),
    default=DEFAULT_CONCURRENCY,
    show_default=True,
    help="Maximum records enriched at the same time.",
)
