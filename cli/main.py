"""termcrawl CLI — crawl a URL file and report pages containing a term.

Usage:
    python cli/main.py crawl --term "hello" --infile urls.csv

The URL file is a CSV whose second column holds the URL; matching URLs are
written to the result file one per line as ``<url> has term``.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from termcrawl.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from typing import Optional

import typer

from termcrawl.config import settings
from termcrawl.logs import configure_logging
from termcrawl.pipeline import NO_LIMIT, SinkOpenError, run_crawl

app = typer.Typer(
    name="termcrawl",
    help="Find a search term by crawling a list of URLs.",
    no_args_is_help=True,
)


@app.callback()
def main() -> None:
    """termcrawl command group."""


@app.command("crawl")
def crawl(
    term: Optional[str] = typer.Option(None, help="The search term to look for."),
    infile: str = typer.Option(
        settings.default_infile, help="Location of the url source file (CSV)."
    ),
    limit: int = typer.Option(NO_LIMIT, help="The max urls to crawl (-1 for no limit)."),
    outfile: str = typer.Option(
        settings.default_outfile, help="The name of the result file."
    ),
    regex: bool = typer.Option(
        False, "--regex", help="Treat the term as a regular expression instead of literal text."
    ),
    workers: int = typer.Option(
        settings.fetch_workers, min=1, help="Number of concurrent fetches."
    ),
    buffer_size: int = typer.Option(
        settings.buffer_size, min=1, help="Fetched pages allowed to queue for matching."
    ),
    debug: bool = typer.Option(settings.debug, "--debug", help="Print per-url diagnostics."),
) -> None:
    """Crawl every URL in INFILE and record the ones whose body contains TERM."""
    if not term:
        typer.echo("No search term specified")
        raise typer.Exit(1)

    configure_logging(debug)
    typer.echo(f"Searching for term {term} in file {infile}")

    try:
        summary = run_crawl(
            infile,
            term,
            outfile,
            limit=limit,
            regex=regex,
            workers=workers,
            buffer_size=buffer_size,
        )
    except ValueError as exc:
        typer.echo(str(exc))
        raise typer.Exit(1)
    except SinkOpenError as exc:
        typer.echo(f"Could not open {outfile} for writing results: {exc.strerror}")
        raise typer.Exit(1)
    except OSError as exc:
        typer.echo(f"Crawl failed: {exc}")
        raise typer.Exit(1)

    typer.echo(f"Found {summary.matches} pages with term {term}")
    typer.echo("done")


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
