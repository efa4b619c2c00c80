#!/usr/bin/env python3
"""
TDX Ingest CLI
Command-line tool for pulling raw tickets, feeds and search results from TDX
"""

import argparse
import json
import sys
from pathlib import Path

import httpx

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from services.ingest.client import TDXClient
from shared.config import Settings
from shared.errors import TicketExportError
from shared.logging import configure_logging


def show_ticket(client: TDXClient, ticket_id: str) -> dict:
    """Print a raw ticket payload"""
    ticket = client.get_ticket(ticket_id)
    print(json.dumps(ticket, indent=2, default=str))
    return ticket


def show_feed(client: TDXClient, ticket_id: str) -> list:
    """Print a ticket's activity feed"""
    feed = client.get_feed(ticket_id)
    print(json.dumps(feed, indent=2, default=str))
    return feed


def run_search(client: TDXClient, query: str, output_file: str = None) -> list:
    """Run a ticket search; query is a JSON object"""
    results = client.search_tickets(json.loads(query))
    print(f"✅ Search returned {len(results)} tickets")

    if output_file:
        with open(output_file, "w") as f:
            json.dump(results, f, indent=2, default=str)
        print(f"   Saved to {output_file}")
    else:
        print(json.dumps(results, indent=2, default=str))

    return results


def main(argv=None):
    parser = argparse.ArgumentParser(description="TDX Ingest CLI")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Ticket command
    ticket_parser = subparsers.add_parser("ticket", help="Print a raw ticket")
    ticket_parser.add_argument("ticket_id", help="Ticket ID")

    # Feed command
    feed_parser = subparsers.add_parser("feed", help="Print a ticket's feed")
    feed_parser.add_argument("ticket_id", help="Ticket ID")

    # Search command
    search_parser = subparsers.add_parser("search", help="Search tickets")
    search_parser.add_argument("query", help='Search query as JSON, e.g. \'{"SearchText": "vpn"}\'')
    search_parser.add_argument("--output", "-o", help="Output file")

    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        with TDXClient.from_settings(Settings.from_env()) as client:
            if args.command == "ticket":
                show_ticket(client, args.ticket_id)
            elif args.command == "feed":
                show_feed(client, args.ticket_id)
            elif args.command == "search":
                run_search(client, args.query, args.output)
    except (TicketExportError, httpx.HTTPError, json.JSONDecodeError) as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
