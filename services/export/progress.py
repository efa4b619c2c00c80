"""
Console progress line for the export run
"""

from pathlib import Path

import click

CLEAR_LINE = "\r\x1b[2K"


class ProgressReporter:
    """
    Single, repeatedly overwritten status line:
    processed/total, API tokens left, seconds until the next refill.
    """

    def __init__(self, client, total: int):
        """
        Args:
            client: Anything with `tokens` and `seconds_until_refill()`
            total: Number of tickets to process
        """
        self.client = client
        self.total = total
        self.processed = 0

    def render(self) -> str:
        return (
            click.style(f"Downloading tickets ({self.processed}/{self.total})", fg="yellow")
            + click.style(
                f"\tAPI tokens: {self.client.tokens}"
                f"\tnext refresh: {self.client.seconds_until_refill():.0f}s",
                fg="cyan",
            )
        )

    def update(self, processed: int = None):
        if processed is not None:
            self.processed = processed
        click.echo(CLEAR_LINE + self.render(), nl=False)

    def refresh(self):
        """Token refill hook: redraw with the current count"""
        self.update()

    def finish(self):
        self.update()
        click.echo()

    def busy(self, path: Path):
        click.echo(CLEAR_LINE + click.style(f"Please close {path} to continue.", fg="red"),
                   nl=False, err=True)
