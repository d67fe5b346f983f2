"""Pace and duration calculations for recorded trainings."""

from __future__ import annotations

from dataclasses import dataclass

from pista.training.formatting import format_duration
from pista.training.model import (
    Block,
    BlockPayload,
    CombinedPayload,
    Segment,
    SegmentPayload,
    TrainingRecord,
)

REFERENCE_DISTANCE = 100.0
ESTIMATE_FACTOR = 8  # 800 m estimate from the 100 m pace
BLOCK_PACE_DISTANCE = 1000.0
NO_PACE = "N/A"


@dataclass(frozen=True)
class SegmentPace:
    pace_per_100: float
    estimated_800: float


def segment_pace(segment: Segment) -> SegmentPace:
    # Distance 0 only comes from unvalidated data; report a zero pace.
    if segment.distance <= 0:
        return SegmentPace(pace_per_100=0.0, estimated_800=0.0)
    pace = (segment.time / segment.distance) * REFERENCE_DISTANCE
    return SegmentPace(pace_per_100=pace, estimated_800=pace * ESTIMATE_FACTOR)


def block_pace(block: Block) -> str:
    """Pace of a block as ``MM:SS`` per kilometre, or ``N/A`` without distance."""
    if block.distance <= 0:
        return NO_PACE
    return format_duration((block.time * 60) / (block.distance / BLOCK_PACE_DISTANCE))


def _segments_seconds(segments: tuple[Segment, ...]) -> float:
    return sum(segment.time for segment in segments)


def _blocks_seconds(blocks: tuple[Block, ...]) -> float:
    return sum(block.time * 60 for block in blocks)


def total_duration(record: TrainingRecord) -> float:
    payload = record.payload
    if isinstance(payload, SegmentPayload):
        return _segments_seconds(payload.segments)
    if isinstance(payload, BlockPayload):
        return _blocks_seconds(payload.blocks)
    if isinstance(payload, CombinedPayload):
        return _blocks_seconds(payload.blocks) + _segments_seconds(payload.segments)
    return 0
