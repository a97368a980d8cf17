"""Load demo or CSV-provided items into the items table."""

from __future__ import annotations

import csv
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from sqlalchemy import select

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from app.config import get_settings  # noqa: E402
from app.database import Base, build_engine, build_session_factory  # noqa: E402
from app import models  # noqa: E402
from app.schemas import ItemCreate  # noqa: E402
from app.services.storage import InventoryStorage  # noqa: E402

DEMO_ITEMS = [
    {
        "sku": "DELL-XPS-001",
        "status": "intake",
        "category": "Laptop",
        "source": "Office Liquidation A",
        "intake_notes": "Screen looks good, no charger.",
        "brand": "Dell",
        "model": "XPS 13 9310",
        "power_test": True,
        "dropoff_type": "pickup",
    },
    {
        "sku": "HP-MON-042",
        "status": "processing",
        "category": "Monitor",
        "source": "Individual Dropoff",
        "intake_notes": "Has scratches on bezel.",
        "brand": "HP",
        "model": "E243i",
        "power_test": True,
        "bench_tested": True,
        "test_notes": "Display is clear, no dead pixels.",
        "dropoff_type": "dropoff",
    },
]


@dataclass
class ImportStats:
    created: int = 0
    skipped: int = 0


def load_existing_skus(session) -> set[str]:
    rows = session.execute(select(models.Item.sku))
    return {row[0] for row in rows if row[0]}


def parse_row(row: dict[str, str]) -> ItemCreate:
    """Blank cells are treated as missing values."""
    return ItemCreate.model_validate({key: value for key, value in row.items() if value not in (None, "")})


def import_rows(rows: Iterable[dict], session_factory, settings) -> ImportStats:
    stats = ImportStats()
    with session_factory() as session:
        storage = InventoryStorage(session, settings)
        existing = load_existing_skus(session)
        for row in rows:
            if row["sku"] in existing:
                stats.skipped += 1
                continue
            storage.create_item(parse_row(row), actor_id="seed")
            existing.add(row["sku"])
            stats.created += 1
    return stats


def read_csv(csv_path: Path) -> list[dict[str, str]]:
    with csv_path.open(newline="", encoding="utf-8") as fh:
        return list(csv.DictReader(fh))


def main(argv: Optional[list[str]] = None) -> None:
    argv = sys.argv[1:] if argv is None else argv
    settings = get_settings()
    engine = build_engine(settings)
    Base.metadata.create_all(bind=engine)

    if argv:
        csv_path = Path(argv[0])
        if not csv_path.exists():
            raise SystemExit(f"CSV file not found: {csv_path}")
        rows = read_csv(csv_path)
    else:
        rows = DEMO_ITEMS

    stats = import_rows(rows, build_session_factory(engine), settings)
    print(f"Created {stats.created} items, skipped {stats.skipped} duplicates.")


if __name__ == "__main__":
    main()
