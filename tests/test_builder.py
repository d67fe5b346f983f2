from __future__ import annotations

from datetime import datetime, timezone

import pytest

from pista.core.state import FormState
from pista.training.builder import (
    IncompletePayload,
    InvalidDay,
    InvalidDistance,
    InvalidTime,
    MissingAthleteName,
    TrainingValidationError,
    UnknownCategory,
    build_block,
    build_segment,
    build_training_record,
    duplicate_last,
    remove_draft,
)
from pista.training.model import (
    BlockKind,
    BlockPayload,
    Category,
    CombinedPayload,
    DayOfWeek,
    SegmentPayload,
)

NOW = datetime(2026, 2, 25, 10, 0, tzinfo=timezone.utc)


def test_build_segment_composes_time_and_recovery() -> None:
    draft = build_segment("400", "1", "5", "2", "", "  buenas piernas ")
    assert draft.segment.distance == 400
    assert draft.segment.time == 65
    assert draft.segment.recovery == 120
    assert draft.segment.note == "buenas piernas"
    assert draft.temp_id


def test_build_segment_recovery_defaults_to_zero() -> None:
    draft = build_segment(200, None, 38)
    assert draft.segment.time == 38
    assert draft.segment.recovery == 0


@pytest.mark.parametrize("raw", ["0", "-1", "", "abc", None])
def test_build_segment_rejects_bad_distance(raw: object) -> None:
    with pytest.raises(InvalidDistance):
        build_segment(raw, "1", "0")


def test_build_segment_rejects_zero_time() -> None:
    with pytest.raises(InvalidTime):
        build_segment("400", "0", "0")
    with pytest.raises(InvalidTime):
        build_segment("400", "x", "")


def test_build_block_checks_time_before_distance() -> None:
    with pytest.raises(InvalidTime):
        build_block("0", "0")
    with pytest.raises(InvalidDistance):
        build_block("5", "0", kind=BlockKind.AEROBIC_POWER)
    draft = build_block("5", "1000", "")
    assert draft.block.time == 5
    assert draft.block.distance == 1000
    assert draft.block.note == ""


def test_build_block_accepts_decimal_comma() -> None:
    draft = build_block("2,5", "600")
    assert draft.block.time == 2.5


def test_validation_errors_are_value_errors() -> None:
    with pytest.raises(ValueError):
        build_block("-3", "100")
    assert issubclass(UnknownCategory, TrainingValidationError)


def test_duplicate_last_copies_with_new_temp_id() -> None:
    first = build_segment("400", "1", "20")
    drafts = duplicate_last([first])
    assert len(drafts) == 2
    assert drafts[1].segment == first.segment
    assert drafts[1].temp_id != first.temp_id
    assert duplicate_last([]) == []


def test_remove_draft_by_temp_id() -> None:
    a = build_segment("400", "1", "20")
    b = build_segment("200", "0", "40")
    assert remove_draft([a, b], a.temp_id) == [b]
    assert remove_draft([a, b], "missing") == [a, b]


def test_build_record_series() -> None:
    segments = [build_segment("400", "1", "30"), build_segment("400", "1", "28")]
    record = build_training_record("  Ana  ", "Lunes", "Series", segments, now=NOW)

    assert record.athlete_name == "Ana"
    assert record.day is DayOfWeek.MONDAY
    assert record.category is Category.SERIES
    assert isinstance(record.payload, SegmentPayload)
    assert record.payload.segments == tuple(d.segment for d in segments)
    assert record.training_id == record.created_at == NOW.isoformat()


def test_build_record_block_only_uses_matching_kind() -> None:
    fartlek = [build_block("5", "1000")]
    power = [build_block("3", "900", kind=BlockKind.AEROBIC_POWER)]
    record = build_training_record(
        "Luis", DayOfWeek.FRIDAY, Category.AEROBIC_POWER,
        fartlek_blocks=fartlek, power_blocks=power, now=NOW,
    )
    assert isinstance(record.payload, BlockPayload)
    assert record.payload.kind is BlockKind.AEROBIC_POWER
    assert record.payload.blocks == (power[0].block,)


def test_build_record_combined_requires_both_lists() -> None:
    blocks = [build_block("5", "1000")]
    with pytest.raises(IncompletePayload):
        build_training_record("Ana", "Lunes", Category.FARTLEK_SERIES, [], blocks)

    segments = [build_segment("400", "1", "30")]
    record = build_training_record(
        "Ana", "Lunes", Category.FARTLEK_SERIES, segments, blocks, now=NOW
    )
    assert isinstance(record.payload, CombinedPayload)
    assert record.payload.kind is BlockKind.FARTLEK


def test_build_record_rejections() -> None:
    segments = [build_segment("400", "1", "30")]
    with pytest.raises(MissingAthleteName):
        build_training_record("   ", "Lunes", "Series", segments)
    with pytest.raises(UnknownCategory):
        build_training_record("Ana", "Lunes", "Natación", segments)
    with pytest.raises(InvalidDay):
        build_training_record("Ana", "Monday", "Series", segments)
    with pytest.raises(IncompletePayload):
        build_training_record("Ana", "Lunes", "Series", [])
    with pytest.raises(IncompletePayload):
        build_training_record("Ana", "Lunes", "Fartlek", segments)


def test_form_state_keeps_drafts_on_failure() -> None:
    form = FormState(category=Category.AEROBIC_POWER_SERIES)
    form.power_blocks = [build_block("4", "1200", kind=BlockKind.AEROBIC_POWER)]
    form.segments = [build_segment("300", "0", "55")]

    with pytest.raises(MissingAthleteName):
        form.build_record(now=NOW)
    assert len(form.power_blocks) == 1
    assert len(form.segments) == 1

    form.athlete_name = "Marta"
    record = form.build_record(now=NOW)
    assert record.category is Category.AEROBIC_POWER_SERIES
    assert form.shows_segments and form.shows_power and not form.shows_fartlek

    form.reset()
    assert form.segments == [] and form.category is Category.SERIES


def test_build_segment_rejects_non_finite_numbers() -> None:
    with pytest.raises(InvalidTime):
        build_segment("400", "1e400", "0")
    with pytest.raises(InvalidDistance):
        build_segment("inf", "1", "0")
    with pytest.raises(InvalidDistance):
        build_block("5", float("inf"))
