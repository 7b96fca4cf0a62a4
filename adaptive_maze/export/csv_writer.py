"""CSV export functionality for the adaptive maze simulation."""

import csv
from pathlib import Path
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..model.state import Snapshot, TickOutcome

FIELDNAMES = ['tick', 'outcome', 'x', 'y', 'budget', 'obstacles', 'status']


class CSVWriter:
    """
    Exports the tick log to CSV format incrementally.

    Output format:
        tick,outcome,x,y,budget,obstacles,status
        1,advanced,0,1,3,3,running
        ...
    """

    def __init__(self, output_path: Path):
        self.output_path = Path(output_path)
        self.file: Optional[object] = None
        self.writer: Optional[csv.DictWriter] = None
        self._is_open = False

    def open(self) -> None:
        """Initialize file and write header."""
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self.file = open(self.output_path, 'w', newline='')
        self.writer = csv.DictWriter(self.file, fieldnames=FIELDNAMES)
        self.writer.writeheader()
        self._is_open = True

    def append(self, outcome: "TickOutcome", snapshot: "Snapshot") -> None:
        """Write one row for the tick that produced `snapshot`."""
        if not self._is_open:
            self.open()
        self.writer.writerow(snapshot.to_csv_row(outcome))
        self.file.flush()

    def close(self) -> None:
        """Close file handle."""
        if self.file:
            self.file.close()
            self.file = None
            self.writer = None
            self._is_open = False

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
