"""Row projections of a training for on-screen tables, reports and CSV."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Sequence

from pista.training.formatting import format_duration, format_number
from pista.training.model import (
    Block,
    BlockKind,
    BlockPayload,
    CombinedPayload,
    Segment,
    SegmentPayload,
    TrainingRecord,
)
from pista.training.pace import block_pace, segment_pace

SEGMENTS_TITLE = "Detalle de Series"
BLOCK_TITLES = {
    BlockKind.FARTLEK: "Detalle de Fartlek",
    BlockKind.AEROBIC_POWER: "Detalle Potencia Aeróbica",
}

SectionKind = Literal["segments", "blocks"]


@dataclass(frozen=True)
class SegmentRow:
    index: int
    distance: float
    time: str
    recovery: str
    pace_per_100: float
    estimated_800: str
    note: str


@dataclass(frozen=True)
class BlockRow:
    index: int
    time: float  # minutes
    distance: float
    pace: str
    note: str


@dataclass(frozen=True)
class TableSection:
    title: str
    kind: SectionKind
    rows: tuple[SegmentRow, ...] | tuple[BlockRow, ...]


@dataclass(frozen=True)
class SegmentChart:
    labels: tuple[str, ...]
    paces: tuple[float, ...]
    times: tuple[float, ...]


def record_segments(record: TrainingRecord) -> tuple[Segment, ...]:
    payload = record.payload
    if isinstance(payload, (SegmentPayload, CombinedPayload)):
        return payload.segments
    return ()


def record_blocks(record: TrainingRecord) -> tuple[Block, ...]:
    payload = record.payload
    if isinstance(payload, (BlockPayload, CombinedPayload)):
        return payload.blocks
    return ()


def render_segment_rows(segments: Sequence[Segment]) -> list[SegmentRow]:
    rows: list[SegmentRow] = []
    for index, segment in enumerate(segments, start=1):
        pace = segment_pace(segment)
        rows.append(
            SegmentRow(
                index=index,
                distance=segment.distance,
                time=format_duration(segment.time),
                recovery=format_duration(segment.recovery),
                pace_per_100=pace.pace_per_100,
                estimated_800=format_duration(pace.estimated_800),
                note=segment.note,
            )
        )
    return rows


def render_block_rows(blocks: Sequence[Block]) -> list[BlockRow]:
    return [
        BlockRow(
            index=index,
            time=block.time,
            distance=block.distance,
            pace=block_pace(block),
            note=block.note,
        )
        for index, block in enumerate(blocks, start=1)
    ]


def _segment_section(segments: Sequence[Segment]) -> TableSection:
    return TableSection(
        title=SEGMENTS_TITLE,
        kind="segments",
        rows=tuple(render_segment_rows(segments)),
    )


def _block_section(kind: BlockKind, blocks: Sequence[Block]) -> TableSection:
    return TableSection(
        title=BLOCK_TITLES[kind],
        kind="blocks",
        rows=tuple(render_block_rows(blocks)),
    )


def render_training_tables(record: TrainingRecord) -> list[TableSection]:
    payload = record.payload
    if isinstance(payload, SegmentPayload):
        return [_segment_section(payload.segments)]
    if isinstance(payload, BlockPayload):
        return [_block_section(payload.kind, payload.blocks)]
    if isinstance(payload, CombinedPayload):
        return [
            _block_section(payload.kind, payload.blocks),
            _segment_section(payload.segments),
        ]
    return []


SEGMENT_HEADERS = ("#", "Distancia", "Tiempo", "Rec.", "Ritmo/100m", "Est. 800m", "Sensaciones")
BLOCK_HEADERS = ("#", "Tiempo", "Distancia", "Ritmo (min/km)", "Sensaciones")


def segment_row_cells(row: SegmentRow) -> list[str]:
    return [
        str(row.index),
        f"{format_number(row.distance)}m",
        row.time,
        row.recovery,
        f"{row.pace_per_100:.2f}s",
        row.estimated_800,
        row.note or "-",
    ]


def block_row_cells(row: BlockRow) -> list[str]:
    return [
        str(row.index),
        f"{format_number(row.time)} min",
        f"{format_number(row.distance)}m",
        row.pace,
        row.note or "-",
    ]


def section_headers(section: TableSection) -> tuple[str, ...]:
    return SEGMENT_HEADERS if section.kind == "segments" else BLOCK_HEADERS


def section_cells(section: TableSection) -> list[list[str]]:
    """Display strings for every row of a section, in row order."""
    out: list[list[str]] = []
    for row in section.rows:
        if isinstance(row, SegmentRow):
            out.append(segment_row_cells(row))
        else:
            out.append(block_row_cells(row))
    return out


def segment_chart(segments: Sequence[Segment]) -> SegmentChart:
    labels: list[str] = []
    paces: list[float] = []
    times: list[float] = []
    for index, segment in enumerate(segments, start=1):
        labels.append(f"{index}º ({format_number(segment.distance)}m)")
        paces.append(round(segment_pace(segment).pace_per_100, 2))
        times.append(segment.time)
    return SegmentChart(labels=tuple(labels), paces=tuple(paces), times=tuple(times))
