"""
Export file naming and file I/O around the CSV codecs.

Exports are named ``<entity-kind>-<ISO date>.csv``, e.g.
``employees-2024-03-08.csv``.
"""

import logging
from datetime import date
from pathlib import Path

from ..config import EXPORT_DIR

logger = logging.getLogger(__name__)


def export_filename(kind: str, on: date | None = None) -> str:
    on = on or date.today()
    return f"{kind}-{on.isoformat()}.csv"


def write_export(
    kind: str,
    text: str,
    directory: str | Path = EXPORT_DIR,
    on: date | None = None,
) -> Path:
    """Write CSV ``text`` under ``directory`` and return the file path."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(kind, on)
    path.write_text(text, encoding="utf-8")
    logger.info("Wrote %s export to %s", kind, path)
    return path


def read_import_file(path: str | Path) -> str:
    """Read a CSV file chosen for import."""
    try:
        return Path(path).read_text(encoding="utf-8-sig")
    except Exception:
        logger.exception("Failed to read import file: %s", path)
        raise
