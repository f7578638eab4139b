"""
CSV export of a displayed table. Pure transform, no server round-trip.
"""

import csv
import io
import re
from typing import Any, Dict, Iterable, List

from flashdash.apps.reports.schemas import Column


def rows_to_csv(columns: List[Column], rows: Iterable[Dict[str, Any]]) -> str:
    """Header of column labels, then one line per row; every cell quoted."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow([column.label for column in columns])
    for row in rows:
        writer.writerow([
            "" if row.get(column.key) is None else row.get(column.key)
            for column in columns
        ])
    return buffer.getvalue()


def export_filename(title: str) -> str:
    """'Opener Metrics' -> 'opener-metrics.csv'"""
    slug = re.sub(r"\s+", "-", title.strip().lower())
    return f"{slug}.csv"
