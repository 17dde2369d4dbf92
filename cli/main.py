"""Policy Watch CLI — entry-point for all backend operations.

Usage:
    python cli/main.py --help

Commands:
    serve     → run the ingestion API (POST /monitor)
    scrape    → filter one policy page and print what survives
    discover  → homepage → login page → policy pages crawl
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that
# `from policywatch.xxx import ...` works when the CLI is invoked as
# `python cli/main.py` from any working directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from typing import Optional

import typer

from policywatch.config import settings

app = typer.Typer(
    name="policywatch",
    help="Policy Watch backend CLI.",
    no_args_is_help=True,
)


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------
@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address (default: settings.host)."),
    port: Optional[int] = typer.Option(None, help="Bind port (default: settings.port)."),
) -> None:
    """Run the ingestion API with uvicorn."""
    import uvicorn

    bind_host = host or settings.host
    bind_port = port or settings.port
    typer.echo(f"[serve] Listening on http://{bind_host}:{bind_port}/monitor")
    uvicorn.run("policywatch.api.app:app", host=bind_host, port=bind_port)


# ---------------------------------------------------------------------------
# Scrape
# ---------------------------------------------------------------------------
@app.command("scrape")
def scrape(
    url: str = typer.Option(..., help="Policy page URL to scrape."),
) -> None:
    """Fetch one policy page, run the relevance filter, and print the result."""
    from policywatch.pipeline import ScrapeOrchestrator
    from policywatch.store import RecordStore

    typer.echo(f"[scrape] Fetching {url!r} …")
    text = ScrapeOrchestrator(RecordStore()).scrape_link(url)
    if not text:
        typer.echo("[scrape] No policy content extracted.")
        raise typer.Exit(1)

    typer.echo(f"[scrape] Fragments: {len(text.splitlines())}")
    typer.echo("")
    typer.echo(text)


# ---------------------------------------------------------------------------
# Discover
# ---------------------------------------------------------------------------
@app.command("discover")
def discover_cmd(
    url: str = typer.Option(..., help="Homepage URL to start from."),
) -> None:
    """Follow login links from a homepage and print every policy page they link to."""
    from policywatch.scraper.discovery import discover

    found = discover(url, echo=typer.echo)
    if not found:
        typer.echo("[discover] No policy pages found.")


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
