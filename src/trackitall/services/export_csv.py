"""CSV export helpers for habit logs."""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Iterable, Iterator

from ..errors import ValidationError
from ..models.habit import Habit, HabitLog

CSV_HEADERS = ("Date", "Habit", "Category", "Completed")
CSV_FILENAME = "habit-progress.csv"
SUPPORTED_FORMATS = frozenset({"csv"})


def resolve_export_format(value: str | None) -> str:
    """Normalize the requested format; only CSV is supported."""

    export_format = (value or "csv").strip().lower()
    if export_format not in SUPPORTED_FORMATS:
        raise ValidationError("Only CSV export supported for now")
    return export_format


def _serialize_row(log: HabitLog, habit: Habit) -> list[str]:
    return [
        log.date,
        habit.name or "",
        habit.category or "",
        "Yes" if log.completed else "No",
    ]


def iter_logs_csv(rows: Iterable[tuple[HabitLog, Habit]]) -> Iterator[str]:
    """Yield the export one line at a time.

    The header is plain; every data field is quoted with embedded quotes
    doubled, which is what ``csv.QUOTE_ALL`` produces.
    """

    yield ",".join(CSV_HEADERS) + "\n"
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for log, habit in rows:
        writer.writerow(_serialize_row(log, habit))
        yield buffer.getvalue()
        buffer.seek(0)
        buffer.truncate(0)


def render_logs_csv(rows: Iterable[tuple[HabitLog, Habit]]) -> str:
    return "".join(iter_logs_csv(rows))


def export_logs_csv(*, rows: Iterable[tuple[HabitLog, Habit]], output_path: Path) -> Path:
    """Write the log export to ``output_path`` and return the path written."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    # newline='' keeps the "\n" terminators intact on Windows
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        for line in iter_logs_csv(rows):
            fh.write(line)
    return output_path


__all__ = [
    "CSV_FILENAME",
    "CSV_HEADERS",
    "export_logs_csv",
    "iter_logs_csv",
    "render_logs_csv",
    "resolve_export_format",
]
