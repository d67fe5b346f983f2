"""Dashboard aggregates over the training history."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from pista.training.model import BlockKind, Category, TrainingRecord
from pista.training.tables import record_segments


@dataclass(frozen=True)
class DashboardStats:
    total_workouts: int = 0
    total_segments: int = 0
    total_aerobic_power: int = 0
    distinct_athletes: int = 0
    by_category: dict[Category, int] = field(default_factory=dict)


def normalize_athlete(name: str) -> str:
    return name.strip().casefold()


def compute_stats(records: Sequence[TrainingRecord]) -> DashboardStats:
    by_category = {category: 0 for category in Category}
    total_segments = 0
    total_aerobic_power = 0
    athletes: set[str] = set()

    for record in records:
        by_category[record.category] = by_category.get(record.category, 0) + 1
        total_segments += len(record_segments(record))
        if record.category.block_kind is BlockKind.AEROBIC_POWER:
            total_aerobic_power += 1
        athletes.add(normalize_athlete(record.athlete_name))

    return DashboardStats(
        total_workouts=len(records),
        total_segments=total_segments,
        total_aerobic_power=total_aerobic_power,
        distinct_athletes=len(athletes),
        by_category=by_category,
    )


def latest_record(records: Sequence[TrainingRecord]) -> TrainingRecord | None:
    return records[-1] if records else None


def find_record(records: Sequence[TrainingRecord], training_id: str) -> TrainingRecord | None:
    for record in records:
        if record.training_id == training_id:
            return record
    return None
