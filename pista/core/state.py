"""Editing state of the new-training form."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from pista.training.builder import DraftBlock, DraftSegment, build_training_record
from pista.training.model import BlockKind, Category, DayOfWeek, TrainingRecord


@dataclass
class FormState:
    athlete_name: str = ""
    day: DayOfWeek = DayOfWeek.MONDAY
    category: Category = Category.SERIES
    segments: list[DraftSegment] = field(default_factory=list)
    fartlek_blocks: list[DraftBlock] = field(default_factory=list)
    power_blocks: list[DraftBlock] = field(default_factory=list)

    @property
    def shows_segments(self) -> bool:
        return self.category.has_segments

    @property
    def shows_fartlek(self) -> bool:
        return self.category.block_kind is BlockKind.FARTLEK

    @property
    def shows_power(self) -> bool:
        return self.category.block_kind is BlockKind.AEROBIC_POWER

    def reset(self) -> None:
        self.athlete_name = ""
        self.day = DayOfWeek.MONDAY
        self.category = Category.SERIES
        self.segments = []
        self.fartlek_blocks = []
        self.power_blocks = []

    def build_record(self, now: datetime | None = None) -> TrainingRecord:
        """Build the record; drafts stay untouched when validation fails."""
        return build_training_record(
            self.athlete_name,
            self.day,
            self.category,
            segments=self.segments,
            fartlek_blocks=self.fartlek_blocks,
            power_blocks=self.power_blocks,
            now=now,
        )
