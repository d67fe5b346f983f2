"""Training domain models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DayOfWeek(str, Enum):
    MONDAY = "Lunes"
    TUESDAY = "Martes"
    WEDNESDAY = "Miércoles"
    THURSDAY = "Jueves"
    FRIDAY = "Viernes"
    SATURDAY = "Sábado"
    SUNDAY = "Domingo"


class BlockKind(str, Enum):
    FARTLEK = "Fartlek"
    AEROBIC_POWER = "Potencia Aeróbica"


class Category(str, Enum):
    SERIES = "Series"
    FARTLEK = "Fartlek"
    AEROBIC_POWER = "Potencia Aeróbica"
    FARTLEK_SERIES = "Fartlek más Series"
    AEROBIC_POWER_SERIES = "Potencia Aeróbica más Series"

    @property
    def block_kind(self) -> BlockKind | None:
        if self in (Category.FARTLEK, Category.FARTLEK_SERIES):
            return BlockKind.FARTLEK
        if self in (Category.AEROBIC_POWER, Category.AEROBIC_POWER_SERIES):
            return BlockKind.AEROBIC_POWER
        return None

    @property
    def has_segments(self) -> bool:
        return self in (
            Category.SERIES,
            Category.FARTLEK_SERIES,
            Category.AEROBIC_POWER_SERIES,
        )


@dataclass(frozen=True)
class Segment:
    distance: float
    time: float  # seconds
    recovery: float = 0.0  # seconds
    note: str = ""


@dataclass(frozen=True)
class Block:
    time: float  # minutes
    distance: float
    note: str = ""


@dataclass(frozen=True)
class SegmentPayload:
    segments: tuple[Segment, ...]


@dataclass(frozen=True)
class BlockPayload:
    kind: BlockKind
    blocks: tuple[Block, ...]


@dataclass(frozen=True)
class CombinedPayload:
    kind: BlockKind
    blocks: tuple[Block, ...]
    segments: tuple[Segment, ...]


TrainingPayload = SegmentPayload | BlockPayload | CombinedPayload


def payload_matches(category: Category, payload: object) -> bool:
    kind = category.block_kind
    if kind is None:
        return isinstance(payload, SegmentPayload)
    if category.has_segments:
        return isinstance(payload, CombinedPayload) and payload.kind is kind
    return isinstance(payload, BlockPayload) and payload.kind is kind


@dataclass(frozen=True)
class TrainingRecord:
    training_id: str
    athlete_name: str
    day: DayOfWeek
    category: Category
    payload: TrainingPayload
    created_at: str

    def __post_init__(self) -> None:
        if not payload_matches(self.category, self.payload):
            raise ValueError(
                f"Payload {type(self.payload).__name__} does not fit category "
                f"'{self.category.value}'"
            )
