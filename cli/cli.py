"""CLI for the business calendar service.

Runs the server, and talks to a running server's admin API to trigger a sync
or download a backup. ``build`` assembles a year locally from the configured
sources without touching any store.
"""

import json
import os
from datetime import date
from email.message import Message
from pathlib import Path

import httpx
import typer
import uvicorn
from loguru import logger
from rich.console import Console
from rich.json import JSON
from rich.table import Table

from business_calendar.calendar.aggregator import Aggregator
from business_calendar.calendar.models import year_to_dict
from business_calendar.core.factory import build_sources
from business_calendar.core.logger import setup_logger
from business_calendar.core.settings import settings

console = Console()

app = typer.Typer(
    name="business-calendar",
    help="Business calendar: aggregated production calendar server and admin tools",
    add_completion=False,
)

ADMIN_USER = "admin"
DEFAULT_SERVER_URL = os.getenv("CAL_SERVER_URL", "http://localhost:8080")


def _admin_url(server_url: str, path: str) -> str:
    return server_url.rstrip("/") + path


def _error_message(resp: httpx.Response) -> str:
    try:
        return str(resp.json().get("msg", resp.text))
    except ValueError:
        return resp.text


def _backup_filename(resp: httpx.Response) -> str:
    default_name = f"cal_{date.today().isoformat()}.db.gz"

    disposition = resp.headers.get("content-disposition")
    if not disposition:
        return default_name

    msg = Message()
    msg["content-disposition"] = disposition
    return msg.get_filename() or default_name


@app.callback()
def main(
    debug: bool = typer.Option(False, "--debug", "-d", envvar="CAL_DEBUG", help="Write debug messages to the log"),
) -> None:
    setup_logger(settings, level="DEBUG" if debug else None)


@app.command()
def server(
    host: str = typer.Option(settings.web_host, "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(settings.web_port, "--port", "-p", help="Port to bind to"),
) -> None:
    """Run the REST server with startup and daily synchronization."""
    logger.info(f"Starting business calendar server on {host}:{port}")
    uvicorn.run("business_calendar.main:create_app", factory=True, host=host, port=port, log_level="info")


@app.command()
def sync(
    years: list[int] = typer.Option(..., "--year", "-y", help="Year to synchronize, may be repeated"),
    server_url: str = typer.Option(DEFAULT_SERVER_URL, "--server-url", "-s", help="URL of the calendar server"),
    passwd: str = typer.Option("", "--passwd", "-p", envvar="CAL_WEB_ADMIN_PASSWD", help="Password of the admin user"),
    timeout: float = typer.Option(60.0, "--timeout", "-t", help="Request timeout in seconds"),
) -> None:
    """Ask a running server to synchronize the given years."""
    url = _admin_url(server_url, "/api/admin/sync")
    logger.debug(f"Sync request: URL={url}, years={years}")

    try:
        resp = httpx.post(url, data={"y": [str(y) for y in years]}, auth=(ADMIN_USER, passwd), timeout=timeout)
    except httpx.HTTPError as e:
        console.print(f"[red]Cannot make request: {e}[/red]")
        raise typer.Exit(1) from e

    if resp.status_code != httpx.codes.OK:
        console.print(f"[red]Sync error (status {resp.status_code}): {_error_message(resp)}[/red]")
        raise typer.Exit(1)

    result = resp.json()
    failures = result.get("failures", {})

    table = Table(title="Sync result")
    table.add_column("Year")
    table.add_column("Result")
    table.add_column("Failed sources")

    failed = False
    for year, status in result.get("years", {}).items():
        style = "green" if status == "ok" else "yellow" if status == "no data" else "red"
        failed = failed or status.startswith("error")
        table.add_row(str(year), f"[{style}]{status}[/{style}]", "\n".join(failures.get(year, [])))

    console.print(table)
    if failed:
        raise typer.Exit(1)


@app.command()
def backup(
    server_url: str = typer.Option(DEFAULT_SERVER_URL, "--server-url", "-s", help="URL of the calendar server"),
    passwd: str = typer.Option("", "--passwd", "-p", envvar="CAL_WEB_ADMIN_PASSWD", help="Password of the admin user"),
    out: Path | None = typer.Option(None, "--out", "-o", help="Backup file. Default: cal_YYYY-MM-DD.db.gz"),
    timeout: float = typer.Option(600.0, "--timeout", "-t", help="Request timeout in seconds"),
) -> None:
    """Download a backup of the server's calendar database."""
    url = _admin_url(server_url, "/api/admin/backup")

    try:
        with httpx.stream("GET", url, auth=(ADMIN_USER, passwd), timeout=timeout) as resp:
            if resp.status_code != httpx.codes.OK:
                resp.read()
                console.print(f"[red]Backup error (status {resp.status_code}): {_error_message(resp)}[/red]")
                raise typer.Exit(1)

            out_path = out or Path(_backup_filename(resp))
            with out_path.open("wb") as f:
                for chunk in resp.iter_bytes():
                    f.write(chunk)
    except httpx.HTTPError as e:
        console.print(f"[red]Cannot make request: {e}[/red]")
        raise typer.Exit(1) from e

    console.print(f"[green]Backup saved to {out_path}[/green]")


@app.command()
def build(
    year: int = typer.Option(..., "--year", "-y", help="Year to build"),
) -> None:
    """Build a year from the configured sources and print it, without storing it."""
    aggregator = Aggregator(build_sources(settings))
    report = aggregator.build_year_report(year)

    for failure in report.failures:
        console.print(f"[yellow]{failure}[/yellow]", highlight=False)

    if report.empty:
        console.print(f"[red]No data for {year}[/red]")
        raise typer.Exit(1)

    console.print(JSON(json.dumps(year_to_dict(report.data), ensure_ascii=False)))


if __name__ == "__main__":
    app()
