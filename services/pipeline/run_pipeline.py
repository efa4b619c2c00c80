#!/usr/bin/env python3
"""
TDX Export Pipeline Runner - read ticket IDs → fetch + normalize → write spreadsheet
Tickets are processed one at a time, in input order.
"""

import sys
from pathlib import Path
from typing import Optional

import click
import httpx
import structlog

from services.export.progress import ProgressReporter
from services.export.spreadsheet import SpreadsheetWriter
from services.export.ticket_ids import read_ticket_ids
from services.ingest.client import TDXClient
from shared.config import Settings
from shared.errors import TicketExportError
from shared.logging import configure_logging
from shared.schemas.ticket import NormalizedRow

log = structlog.get_logger()


def export_tickets(
    client: TDXClient,
    ticket_ids: list[str],
    progress: Optional[ProgressReporter] = None,
) -> list[NormalizedRow]:
    """Fetch and normalize each ticket in order; the first failure aborts the batch"""
    rows = []
    for ticket_id in ticket_ids:
        rows.append(client.fetch_ticket(ticket_id))
        if progress is not None:
            progress.update(len(rows))
    return rows


def run_export(
    settings: Settings,
    tickets_file: str,
    output_file: str,
    transport: Optional[httpx.BaseTransport] = None,
    writer: Optional[SpreadsheetWriter] = None,
) -> list[NormalizedRow]:
    """Run the full export and return the rows written"""
    with TDXClient.from_settings(settings, transport=transport) as client:
        ticket_ids = read_ticket_ids(tickets_file)
        click.secho(f"Found {len(ticket_ids)} tickets in {tickets_file}", fg="cyan")

        progress = ProgressReporter(client, total=len(ticket_ids))
        client.set_refresh_callback(progress.refresh)
        progress.update(0)
        rows = export_tickets(client, ticket_ids, progress)
        progress.finish()

    writer = writer or SpreadsheetWriter(output_file, on_busy=progress.busy)
    writer.write(rows)

    click.secho(f"\nWrote {len(rows)} tickets to {output_file}", fg="cyan")
    log.info("Export complete", tickets=len(rows), output=output_file)
    return rows


def fail(message: str):
    """Report a fatal error and exit with status 1"""
    click.secho(message, fg="red", err=True)
    sys.exit(1)


@click.command()
@click.option("--tickets-file", "-i", default="tickets.txt", show_default=True,
              help="File with one 8-digit ticket ID per line")
@click.option("--output", "-o", "output_file", default="tickets.xlsx", show_default=True,
              help="Spreadsheet to write (overwritten)")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def main(tickets_file: str, output_file: str, verbose: bool):
    """Export TDX tickets to a spreadsheet."""
    configure_logging(verbose)

    try:
        run_export(Settings.from_env(), tickets_file, output_file)
    except (TicketExportError, httpx.HTTPError) as e:
        fail(f"\nError: {e}")
    except OSError as e:
        fail(f"\nError writing {Path(output_file)}: {e}")
    except Exception as e:
        log.exception("Export failed")
        fail(f"\nError: {e}")


if __name__ == "__main__":
    main()
