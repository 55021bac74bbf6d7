"""Seed the schedule database from CSV files.

Usage:
    python -m app.tools.seed_db
    python -m app.tools.seed_db --data-dir data
    python -m app.tools.seed_db --drop  # drop existing data first
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.csv_loader.loader import load_assignments, load_machines, load_work_orders
from app.adapters.persistence.database import async_session_factory
from app.adapters.persistence.models import (
    MachineAssignmentModel,
    MachineModel,
    WorkOrderModel,
)
from app.config import settings
from app.domain.entities.assignment import Assignment
from app.domain.entities.work_order import WorkOrderRef
from app.domain.policies.conflict_detection import find_overlaps
from app.domain.value_objects.enums import AssignmentStatus

logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")
logger = logging.getLogger(__name__)


async def _drop_data(session: AsyncSession) -> None:
    """Delete all data in correct order (respecting FK constraints)."""
    for model in [MachineAssignmentModel, WorkOrderModel, MachineModel]:
        await session.execute(delete(model))
    await session.commit()
    logger.info("Dropped all existing data")


async def seed(data_dir: Path, drop: bool = False) -> dict[str, int]:
    """Main seed function. Returns counts of seeded records."""
    counts = {"machines": 0, "work_orders": 0, "assignments": 0}

    machine_csv = _find_csv(data_dir, ["machines", "resources"])
    work_order_csv = _find_csv(data_dir, ["work_orders", "workorders", "orders"])
    assignment_csv = _find_csv(data_dir, ["assignments", "schedule"])

    if not machine_csv:
        raise FileNotFoundError(f"No machines CSV found in {data_dir}. Expected machines.csv")
    if not work_order_csv:
        raise FileNotFoundError(f"No work orders CSV found in {data_dir}. Expected work_orders.csv")

    async with async_session_factory() as session:
        if drop:
            await _drop_data(session)

        # 1. Machines
        known_machines = set((await session.execute(select(MachineModel.id))).scalars().all())
        for md in load_machines(machine_csv):
            if md["id"] in known_machines:
                logger.debug("Machine '%s' already exists, skipping", md["id"])
                continue
            session.add(MachineModel(**md))
            known_machines.add(md["id"])
            counts["machines"] += 1
        await session.commit()

        # 2. Work orders
        known_orders = set((await session.execute(select(WorkOrderModel.wo_id))).scalars().all())
        for wd in load_work_orders(work_order_csv):
            if wd["wo_id"] in known_orders:
                logger.debug("Work order '%s' already exists, skipping", wd["wo_id"])
                continue
            session.add(WorkOrderModel(**wd))
            known_orders.add(wd["wo_id"])
            counts["work_orders"] += 1
        await session.commit()

        # 3. Assignments (if CSV exists)
        if assignment_csv:
            known = set((await session.execute(select(MachineAssignmentModel.id))).scalars().all())
            for ad in load_assignments(assignment_csv):
                if ad["id"] in known:
                    logger.debug("Assignment '%s' already exists, skipping", ad["id"])
                    continue
                if ad["machine_id"] not in known_machines:
                    logger.warning("Assignment '%s': machine '%s' not found, skipping", ad["id"], ad["machine_id"])
                    continue
                if ad["wo_id"] not in known_orders:
                    logger.warning("Assignment '%s': work order '%s' not found, skipping", ad["id"], ad["wo_id"])
                    continue
                session.add(MachineAssignmentModel(**ad))
                known.add(ad["id"])
                counts["assignments"] += 1
            await session.commit()
        else:
            logger.info("No assignments CSV found — skipping assignment import")

    logger.info(
        "Seed complete: %d machines, %d work orders, %d assignments",
        counts["machines"], counts["work_orders"], counts["assignments"],
    )
    return counts


def _find_csv(data_dir: Path, name_hints: list[str]) -> Path | None:
    """Find a CSV file matching any of the name hints (hints are tried in order)."""
    files = sorted(data_dir.glob("*.csv"))
    for hint in name_hints:
        for f in files:
            if hint in f.stem.lower():
                logger.info("Found CSV: %s (matched hint '%s')", f.name, hint)
                return f
    return None


async def _verify_data() -> None:
    """Print sanity checks after seeding."""
    async with async_session_factory() as session:
        machines = (await session.execute(select(MachineModel))).scalars().all()
        orders = (await session.execute(select(WorkOrderModel))).scalars().all()
        rows = (await session.execute(select(MachineAssignmentModel))).scalars().all()

        print(f"\n{'='*50}")
        print("SEED VERIFICATION")
        print(f"{'='*50}")
        print(f"Machines:    {len(machines)}")
        print(f"Work orders: {len(orders)}")
        print(f"Assignments: {len(rows)}")

        statuses: dict[str, int] = {}
        for r in rows:
            statuses[r.status] = statuses.get(r.status, 0) + 1
        print(f"Status distribution: {statuses}")

        groups = sorted({m.location for m in machines if m.location})
        print(f"Machine groups: {groups}")

        # Stored data may predate the overlap check; report it, don't fix it
        assignments = [
            Assignment(
                id=r.id,
                machine_id=r.machine_id,
                work_order=WorkOrderRef(id=r.wo_id, display_id=None, item_code=None, customer=None),
                scheduled_start=r.scheduled_start,
                scheduled_end=r.scheduled_end,
                status=AssignmentStatus(r.status),
            )
            for r in rows
        ]
        overlaps = find_overlaps(assignments)
        print(f"Overlapping active pairs: {len(overlaps)}")
        for a, b in overlaps:
            print(f"  {a.machine_id}: {a.id} / {b.id}")
        print(f"{'='*50}\n")


def main():
    parser = argparse.ArgumentParser(description="Seed the machine schedule database from CSV files")
    parser.add_argument(
        "--data-dir", type=str, default=settings.csv_data_path,
        help=f"Directory containing CSV files (default: {settings.csv_data_path})",
    )
    parser.add_argument(
        "--drop", action="store_true",
        help="Drop existing data before seeding",
    )
    parser.add_argument(
        "--verify-only", action="store_true",
        help="Only run verification, don't seed",
    )
    args = parser.parse_args()

    data_dir = Path(args.data_dir)
    if not args.verify_only and not data_dir.exists():
        logger.error("Data directory not found: %s", data_dir)
        sys.exit(1)

    if args.verify_only:
        asyncio.run(_verify_data())
    else:
        async def run_all():
            await seed(data_dir, drop=args.drop)
            await _verify_data()
        asyncio.run(run_all())


if __name__ == "__main__":
    main()
