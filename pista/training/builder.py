"""Validation of raw form input into segments, blocks and training records."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Sequence
from uuid import uuid4

from loguru import logger

from pista.training.model import (
    Block,
    BlockKind,
    BlockPayload,
    Category,
    CombinedPayload,
    DayOfWeek,
    Segment,
    SegmentPayload,
    TrainingPayload,
    TrainingRecord,
)


class TrainingValidationError(ValueError):
    """Raised when form input cannot become a segment, block or record."""


class InvalidDistance(TrainingValidationError):
    pass


class InvalidTime(TrainingValidationError):
    pass


class MissingAthleteName(TrainingValidationError):
    pass


class IncompletePayload(TrainingValidationError):
    pass


class UnknownCategory(TrainingValidationError):
    pass


class InvalidDay(TrainingValidationError):
    pass


_BLOCK_LABELS = {
    BlockKind.FARTLEK: "Fartlek",
    BlockKind.AEROBIC_POWER: "Potencia Aeróbica",
}


@dataclass(frozen=True)
class DraftSegment:
    """A segment in the editor, keyed by a session-only id."""

    temp_id: str
    segment: Segment


@dataclass(frozen=True)
class DraftBlock:
    temp_id: str
    block: Block


Draft = DraftSegment | DraftBlock


def _new_temp_id() -> str:
    return uuid4().hex


def _parse_number(raw: object) -> float | None:
    if raw is None:
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip().replace(",", ".")
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            return None
    if not math.isfinite(value):
        return None
    return value


def _parse_minutes_seconds(raw_minutes: object, raw_seconds: object) -> float:
    minutes = _parse_number(raw_minutes) or 0.0
    seconds = _parse_number(raw_seconds) or 0.0
    return minutes * 60 + seconds


def _clean_note(note: object) -> str:
    if note is None:
        return ""
    return str(note).strip()


def build_segment(
    raw_distance: object,
    raw_time_min: object = None,
    raw_time_sec: object = None,
    raw_rec_min: object = None,
    raw_rec_sec: object = None,
    note: object = "",
) -> DraftSegment:
    distance = _parse_number(raw_distance)
    if distance is None or distance <= 0:
        logger.debug(f"Rejected segment distance {raw_distance!r}")
        raise InvalidDistance("La distancia de la serie debe ser un número positivo.")

    total_time = _parse_minutes_seconds(raw_time_min, raw_time_sec)
    if total_time <= 0:
        logger.debug(f"Rejected segment time {raw_time_min!r}:{raw_time_sec!r}")
        raise InvalidTime("El tiempo de la serie debe ser positivo.")

    recovery = _parse_minutes_seconds(raw_rec_min, raw_rec_sec)
    return DraftSegment(
        temp_id=_new_temp_id(),
        segment=Segment(
            distance=distance,
            time=total_time,
            recovery=max(0.0, recovery),
            note=_clean_note(note),
        ),
    )


def build_block(
    raw_time: object,
    raw_distance: object,
    note: object = "",
    *,
    kind: BlockKind = BlockKind.FARTLEK,
) -> DraftBlock:
    label = _BLOCK_LABELS[kind]
    time_min = _parse_number(raw_time)
    if time_min is None or time_min <= 0:
        logger.debug(f"Rejected {label} block time {raw_time!r}")
        raise InvalidTime(f"El tiempo del bloque de {label} debe ser un número positivo.")

    distance = _parse_number(raw_distance)
    if distance is None or distance <= 0:
        logger.debug(f"Rejected {label} block distance {raw_distance!r}")
        raise InvalidDistance(
            f"La distancia del bloque de {label} debe ser un número positivo."
        )

    return DraftBlock(
        temp_id=_new_temp_id(),
        block=Block(time=time_min, distance=distance, note=_clean_note(note)),
    )


def duplicate_last(drafts: Sequence[Draft]) -> list[Draft]:
    out = list(drafts)
    if out:
        out.append(replace(out[-1], temp_id=_new_temp_id()))
    return out


def remove_draft(drafts: Sequence[Draft], temp_id: str) -> list[Draft]:
    return [draft for draft in drafts if draft.temp_id != temp_id]


def _strip_segments(drafts: Sequence[DraftSegment]) -> tuple[Segment, ...]:
    return tuple(draft.segment for draft in drafts)


def _strip_blocks(drafts: Sequence[DraftBlock]) -> tuple[Block, ...]:
    return tuple(draft.block for draft in drafts)


def parse_category(raw: object) -> Category:
    if isinstance(raw, Category):
        return raw
    try:
        return Category(str(raw))
    except ValueError as exc:
        raise UnknownCategory("Tipo de entrenamiento no válido seleccionado.") from exc


def parse_day(raw: object) -> DayOfWeek:
    if isinstance(raw, DayOfWeek):
        return raw
    try:
        return DayOfWeek(str(raw))
    except ValueError as exc:
        raise InvalidDay(f"Día de la semana no válido: {raw!r}") from exc


def _build_payload(
    category: Category,
    segments: Sequence[DraftSegment],
    fartlek_blocks: Sequence[DraftBlock],
    power_blocks: Sequence[DraftBlock],
) -> TrainingPayload:
    kind = category.block_kind
    if kind is None:
        if not segments:
            raise IncompletePayload("Debes añadir al menos una serie.")
        return SegmentPayload(segments=_strip_segments(segments))

    blocks = fartlek_blocks if kind is BlockKind.FARTLEK else power_blocks
    label = _BLOCK_LABELS[kind]
    if not category.has_segments:
        if not blocks:
            raise IncompletePayload(f"Debes añadir al menos un bloque de {label}.")
        return BlockPayload(kind=kind, blocks=_strip_blocks(blocks))

    if not blocks or not segments:
        raise IncompletePayload(
            f"Debes añadir al menos un bloque de {label} Y una serie."
        )
    return CombinedPayload(
        kind=kind,
        blocks=_strip_blocks(blocks),
        segments=_strip_segments(segments),
    )


def build_training_record(
    athlete_name: str,
    day: DayOfWeek | str,
    category: Category | str,
    segments: Sequence[DraftSegment] = (),
    fartlek_blocks: Sequence[DraftBlock] = (),
    power_blocks: Sequence[DraftBlock] = (),
    *,
    now: datetime | None = None,
) -> TrainingRecord:
    name = (athlete_name or "").strip()
    if not name:
        raise MissingAthleteName("Por favor, introduce el nombre del atleta.")

    parsed_category = parse_category(category)
    parsed_day = parse_day(day)
    payload = _build_payload(parsed_category, segments, fartlek_blocks, power_blocks)

    moment = now or datetime.now(tz=timezone.utc)
    stamp = moment.isoformat()
    return TrainingRecord(
        training_id=stamp,
        athlete_name=name,
        day=parsed_day,
        category=parsed_category,
        payload=payload,
        created_at=stamp,
    )
