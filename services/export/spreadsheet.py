"""
Spreadsheet Writer
Writes normalized rows to a single-sheet .xlsx workbook
"""

import errno
import sys
import time
from pathlib import Path
from typing import Callable, Optional, Union

import structlog
from openpyxl import Workbook

from shared.schemas.ticket import NormalizedRow

logger = structlog.get_logger()


def is_file_busy(error: OSError) -> bool:
    """True if the write failed because another process holds the file"""
    if error.errno == errno.EBUSY:
        return True
    # Windows reports a workbook held open in Excel as a permission error
    return isinstance(error, PermissionError) and sys.platform == "win32"


class SpreadsheetWriter:
    """
    Writes one row per ticket, overwriting the target file.

    While the file is held open elsewhere the write is retried every
    `retry_interval` seconds, with no retry limit.
    """

    RETRY_INTERVAL = 0.5

    def __init__(
        self,
        path: Union[str, Path],
        retry_interval: float = None,
        sleep: Callable[[float], None] = time.sleep,
        on_busy: Optional[Callable[[Path], None]] = None,
    ):
        self.path = Path(path)
        self.retry_interval = self.RETRY_INTERVAL if retry_interval is None else retry_interval
        self.on_busy = on_busy
        self._sleep = sleep

    def build_workbook(self, rows: list[NormalizedRow]) -> Workbook:
        book = Workbook()
        sheet = book.active
        for row in rows:
            sheet.append(row.to_row())
        return book

    def write(self, rows: list[NormalizedRow]) -> int:
        """
        Write rows to the workbook file.

        Returns:
            Number of save attempts (more than 1 if the file was busy)

        Raises:
            OSError: Any file-system error other than the file being busy
        """
        book = self.build_workbook(rows)
        attempts = 0
        while True:
            attempts += 1
            try:
                book.save(self.path)
                break
            except OSError as e:
                if not is_file_busy(e):
                    raise
                if attempts == 1:
                    logger.warning("Output file is busy, waiting", file=str(self.path))
                if self.on_busy is not None:
                    self.on_busy(self.path)
                self._sleep(self.retry_interval)

        logger.info("Wrote spreadsheet", file=str(self.path), rows=len(rows), attempts=attempts)
        return attempts
