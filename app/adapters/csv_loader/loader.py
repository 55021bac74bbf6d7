"""CSV loader — reads machines, work orders and assignments from exports."""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from app.adapters.csv_loader.normalizer import (
    clean_string,
    normalize_column_name,
    parse_datetime,
    parse_int,
    parse_status,
)

logger = logging.getLogger(__name__)


def _sniff_dialect(sample: str) -> type[csv.Dialect]:
    """Detect the delimiter (comma/semicolon/tab); spreadsheet exports vary."""
    if not sample:
        return csv.excel

    first_line = sample.splitlines()[0]
    counts = {d: first_line.count(d) for d in (";", ",", "\t")}
    best_delim = max(counts, key=counts.get)

    if counts[best_delim] > 0:
        class DynamicDialect(csv.excel):
            delimiter = best_delim
        return DynamicDialect
    return csv.excel


def _read_csv(file_path: Path, encoding: str = "utf-8-sig") -> list[dict[str, str]]:
    """Read a CSV file with BOM handling and column normalization.

    Args:
        file_path: path to the CSV file.
        encoding: file encoding (utf-8-sig strips BOM automatically).

    Returns:
        List of dicts with normalized column names.
    """
    with open(file_path, encoding=encoding, newline="") as f:
        sample = f.read(4096)
        f.seek(0)
        reader = csv.DictReader(f, dialect=_sniff_dialect(sample))
        if reader.fieldnames is None:
            raise ValueError(f"CSV file {file_path} has no header row")

        col_map = {col: normalize_column_name(col) for col in reader.fieldnames}
        rows = []
        for raw_row in reader:
            row = {col_map[k]: clean_string(v) for k, v in raw_row.items() if k is not None}
            rows.append(row)

    logger.info("Loaded %d rows from %s (columns: %s)", len(rows), file_path.name, list(col_map.values()))
    return rows


def load_machines(file_path: Path) -> list[dict]:
    """Load the machines CSV.

    Expected columns: id, machine_id (code), name, location (optional).
    A row without an id falls back to its code.
    """
    machines = []
    for row in _read_csv(file_path):
        code = row.get("machine_id") or row.get("code")
        machine_id = row.get("id") or code
        if not machine_id or not code:
            logger.warning("Skipping machine row without id/code: %s", row)
            continue
        machines.append({
            "id": machine_id,
            "machine_id": code,
            "name": row.get("name") or code,
            "location": row.get("location") or row.get("group"),
        })
    logger.info("Parsed %d machines", len(machines))
    return machines


def load_work_orders(file_path: Path) -> list[dict]:
    """Load the work orders CSV.

    Expected columns: wo_id, display_id, item_code, customer, quantity.
    """
    work_orders = []
    for row in _read_csv(file_path):
        wo_id = row.get("wo_id") or row.get("id")
        if not wo_id:
            logger.warning("Skipping work order row without wo_id: %s", row)
            continue
        work_orders.append({
            "wo_id": wo_id,
            "display_id": row.get("display_id"),
            "item_code": row.get("item_code"),
            "customer": row.get("customer"),
            "quantity": parse_int(row.get("quantity")),
        })
    logger.info("Parsed %d work orders", len(work_orders))
    return work_orders


def load_assignments(file_path: Path) -> list[dict]:
    """Load the machine assignments CSV.

    Expected columns: id, wo_id, machine_id, scheduled_start, scheduled_end,
    status, quantity_allocated. Rows with unparseable times, an end not after
    the start, or an unknown status are skipped with a warning.
    """
    assignments = []
    for row in _read_csv(file_path):
        start = parse_datetime(row.get("scheduled_start"))
        end = parse_datetime(row.get("scheduled_end"))
        status = parse_status(row.get("status"))

        if not row.get("id") or not row.get("wo_id") or not row.get("machine_id"):
            logger.warning("Skipping assignment row with missing keys: %s", row)
            continue
        if start is None or end is None or end <= start:
            logger.warning("Skipping assignment %s: invalid interval", row.get("id"))
            continue
        if status is None:
            logger.warning("Skipping assignment %s: unknown status %r", row.get("id"), row.get("status"))
            continue

        assignments.append({
            "id": row["id"],
            "wo_id": row["wo_id"],
            "machine_id": row["machine_id"],
            "scheduled_start": start,
            "scheduled_end": end,
            "status": status.value,
            "quantity_allocated": parse_int(row.get("quantity_allocated")),
        })
    logger.info("Parsed %d assignments", len(assignments))
    return assignments
