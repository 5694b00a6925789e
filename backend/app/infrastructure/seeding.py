"""Data Seeding — load JSON fixture files into tables at startup.

Invariants:
    - Table name is the seed file's stem (users.json -> users)
    - Records without "id" are skipped
    - Existing ids are updated only when the file's do_update flag is set
    - One failing record is logged and skipped; the rest still load

Design Decisions:
    - SQLAlchemy Core against Base.metadata: seeds reach any mapped table
      without a per-entity loader
    - One transaction per record: a constraint failure cannot roll back the
      records already written
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from sqlalchemy import DateTime, Table, insert, select, update
from sqlalchemy.ext.asyncio import AsyncEngine

from app.config import SeedFile
from app.db.base import Base

logger = logging.getLogger(__name__)


class SeedReport:
    def __init__(self) -> None:
        self.inserted = 0
        self.updated = 0
        self.failed = 0

    def __repr__(self) -> str:
        return f"SeedReport(inserted={self.inserted}, updated={self.updated}, failed={self.failed})"


def _coerce(table: Table, record: dict[str, Any]) -> dict[str, Any]:
    """Keep known columns; parse ISO strings for datetime columns."""
    values = {}
    for key, value in record.items():
        column = table.columns.get(key)
        if column is None:
            logger.warning(
                f"Unknown column {key} in seed record",
                extra={"table": table.name, "record_id": record.get("id")},
            )
            continue
        if isinstance(column.type, DateTime) and isinstance(value, str):
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        values[key] = value
    return values


def load_records(path: Path) -> list[dict[str, Any]]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"Seed file {path} must contain a JSON array")
    return [r for r in data if isinstance(r, dict)]


async def seed_table(
    engine: AsyncEngine, table: Table, records: list[dict[str, Any]], do_update: bool,
    report: SeedReport,
) -> None:
    ids = [r["id"] for r in records if "id" in r]
    async with engine.connect() as conn:
        result = await conn.execute(select(table.c.id).where(table.c.id.in_(ids)))
        existing = {row[0] for row in result}

    for record in records:
        if "id" not in record:
            continue
        try:
            values = _coerce(table, record)
            async with engine.begin() as conn:
                if record["id"] not in existing:
                    await conn.execute(insert(table).values(**values))
                    report.inserted += 1
                elif do_update:
                    changes = {k: v for k, v in values.items() if k != "id"}
                    await conn.execute(
                        update(table).where(table.c.id == record["id"]).values(**changes)
                    )
                    report.updated += 1
        except Exception as e:
            report.failed += 1
            logger.error(
                f"Seed record failed: {e}",
                extra={"table": table.name, "record_id": record.get("id")},
            )


async def seed_database(
    engine: AsyncEngine, seed_files: list[SeedFile], base_dir: Path | None = None,
) -> SeedReport:
    """Apply every configured seed file in order."""
    import app.models  # noqa: F401

    report = SeedReport()
    for seed in seed_files:
        path = Path(seed.path)
        if base_dir is not None and not path.is_absolute():
            path = base_dir / path
        table = Base.metadata.tables.get(path.stem)
        if table is None:
            logger.error(f"No table named {path.stem} for seed file {path}")
            continue
        try:
            records = load_records(path)
        except (OSError, ValueError) as e:
            logger.error(f"Cannot read seed file {path}: {e}")
            continue
        await seed_table(engine, table, records, seed.do_update, report)
    logger.info(f"Seeding finished: {report!r}")
    return report
