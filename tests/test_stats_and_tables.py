from __future__ import annotations

import pytest

from pista.training.model import (
    Block,
    BlockKind,
    BlockPayload,
    Category,
    CombinedPayload,
    DayOfWeek,
    Segment,
    SegmentPayload,
    TrainingRecord,
)
from pista.training.stats import compute_stats, find_record, latest_record
from pista.training.tables import (
    render_block_rows,
    render_segment_rows,
    render_training_tables,
    section_cells,
    segment_chart,
)


def _record(name: str, category: Category, payload: object, stamp: str) -> TrainingRecord:
    return TrainingRecord(
        training_id=stamp,
        athlete_name=name,
        day=DayOfWeek.WEDNESDAY,
        category=category,
        payload=payload,  # type: ignore[arg-type]
        created_at=stamp,
    )


def _series(count: int) -> SegmentPayload:
    return SegmentPayload(tuple(Segment(400, 80 + i) for i in range(count)))


def test_compute_stats_counts_segments_and_workouts() -> None:
    records = [
        _record("Ana", Category.SERIES, _series(3), "t1"),
        _record("ana ", Category.SERIES, _series(2), "t2"),
        _record(
            "Luis",
            Category.AEROBIC_POWER,
            BlockPayload(BlockKind.AEROBIC_POWER, (Block(5, 1000),)),
            "t3",
        ),
    ]
    stats = compute_stats(records)
    assert stats.total_workouts == 3
    assert stats.total_segments == 5
    assert stats.total_aerobic_power == 1
    assert stats.distinct_athletes == 2
    assert stats.by_category[Category.SERIES] == 2
    assert stats.by_category[Category.FARTLEK] == 0


def test_compute_stats_combined_power_counts_both() -> None:
    combined = CombinedPayload(BlockKind.AEROBIC_POWER, (Block(5, 1000),), (Segment(200, 40),))
    records = [
        _record("Ana", Category.AEROBIC_POWER_SERIES, combined, "t1"),
        _record(
            "Ana",
            Category.FARTLEK,
            BlockPayload(BlockKind.FARTLEK, (Block(3, 700),)),
            "t2",
        ),
    ]
    stats = compute_stats(records)
    assert stats.total_aerobic_power == 1
    assert stats.total_segments == 1
    assert stats.distinct_athletes == 1


def test_compute_stats_empty() -> None:
    stats = compute_stats([])
    assert stats.total_workouts == 0
    assert stats.distinct_athletes == 0


def test_latest_and_find_record() -> None:
    a = _record("Ana", Category.SERIES, _series(1), "t1")
    b = _record("Luis", Category.SERIES, _series(1), "t2")
    assert latest_record([a, b]) is b
    assert latest_record([]) is None
    assert find_record([a, b], "t1") is a
    assert find_record([a, b], "t9") is None


def test_render_segment_rows_order_and_values() -> None:
    segments = [Segment(400, 90, 60, "ok"), Segment(200, 41), Segment(1000, 200)]
    rows = render_segment_rows(segments)
    assert len(rows) == len(segments)
    assert [row.index for row in rows] == [1, 2, 3]
    assert rows[0].time == "01:30"
    assert rows[0].recovery == "01:00"
    assert rows[0].pace_per_100 == pytest.approx(22.5)
    assert rows[0].estimated_800 == "03:00"
    assert rows[0].note == "ok"


def test_render_block_rows() -> None:
    rows = render_block_rows([Block(5, 1000, "suave"), Block(3, 0)])
    assert rows[0].index == 1
    assert rows[0].pace == "05:00"
    assert rows[1].pace == "N/A"


def test_render_training_tables_combined_blocks_first() -> None:
    combined = CombinedPayload(BlockKind.FARTLEK, (Block(5, 1000),), (Segment(400, 90),))
    sections = render_training_tables(_record("Ana", Category.FARTLEK_SERIES, combined, "t1"))
    assert [s.title for s in sections] == ["Detalle de Fartlek", "Detalle de Series"]
    assert [s.kind for s in sections] == ["blocks", "segments"]


def test_render_training_tables_single_section() -> None:
    power = BlockPayload(BlockKind.AEROBIC_POWER, (Block(5, 1000),))
    sections = render_training_tables(_record("Ana", Category.AEROBIC_POWER, power, "t1"))
    assert len(sections) == 1
    assert sections[0].title == "Detalle Potencia Aeróbica"


def test_section_cells_display_strings() -> None:
    sections = render_training_tables(
        _record("Ana", Category.SERIES, SegmentPayload((Segment(400, 90, 60),)), "t1")
    )
    assert section_cells(sections[0]) == [
        ["1", "400m", "01:30", "01:00", "22.50s", "03:00", "-"]
    ]


def test_segment_chart_series() -> None:
    chart = segment_chart([Segment(400, 90), Segment(200, 41)])
    assert chart.labels == ("1º (400m)", "2º (200m)")
    assert chart.paces == (22.5, 20.5)
    assert chart.times == (90, 41)
