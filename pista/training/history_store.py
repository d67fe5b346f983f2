"""Local persistence for the training history."""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any

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

_BLOCK_LIST_KEYS = {
    BlockKind.FARTLEK: "fartlekBlocks",
    BlockKind.AEROBIC_POWER: "potenciaBlocks",
}


def _default_history_path() -> Path:
    return Path.home() / ".pista" / "trainings.json"


class HistoryDecodeError(ValueError):
    """Raised when a stored training cannot be turned back into a record."""


def _segment_to_dict(segment: Segment) -> dict[str, Any]:
    return {
        "distance": segment.distance,
        "time": segment.time,
        "recovery": segment.recovery,
        "sensations": segment.note,
    }


def _block_to_dict(block: Block) -> dict[str, Any]:
    return {"time": block.time, "distance": block.distance, "sensations": block.note}


def _payload_to_data(payload: TrainingPayload) -> Any:
    if isinstance(payload, SegmentPayload):
        return [_segment_to_dict(s) for s in payload.segments]
    if isinstance(payload, BlockPayload):
        return [_block_to_dict(b) for b in payload.blocks]
    return {
        _BLOCK_LIST_KEYS[payload.kind]: [_block_to_dict(b) for b in payload.blocks],
        "series": [_segment_to_dict(s) for s in payload.segments],
    }


def record_to_dict(record: TrainingRecord) -> dict[str, Any]:
    return {
        "id": record.training_id,
        "athleteName": record.athlete_name,
        "day": record.day.value,
        "type": record.category.value,
        "data": _payload_to_data(record.payload),
        "date": record.created_at,
    }


def _number(raw: object, field_name: str) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise HistoryDecodeError(f"Field '{field_name}' must be a number")
    if not math.isfinite(raw):
        raise HistoryDecodeError(f"Field '{field_name}' must be finite")
    return float(raw)


def _note(raw: object) -> str:
    return "" if raw is None else str(raw)


def _segment_from_dict(raw: object) -> Segment:
    if not isinstance(raw, dict):
        raise HistoryDecodeError("Series entry must be an object")
    distance = _number(raw.get("distance"), "distance")
    time = _number(raw.get("time"), "time")
    if distance <= 0 or time <= 0:
        raise HistoryDecodeError("Series distance and time must be > 0")
    recovery = _number(raw.get("recovery", 0), "recovery")
    return Segment(
        distance=distance,
        time=time,
        recovery=max(0.0, recovery),
        note=_note(raw.get("sensations")),
    )


def _block_from_dict(raw: object) -> Block:
    if not isinstance(raw, dict):
        raise HistoryDecodeError("Block entry must be an object")
    time = _number(raw.get("time"), "time")
    distance = _number(raw.get("distance"), "distance")
    if distance <= 0 or time <= 0:
        raise HistoryDecodeError("Block distance and time must be > 0")
    return Block(time=time, distance=distance, note=_note(raw.get("sensations")))


def _list(raw: object, field_name: str) -> list[Any]:
    if not isinstance(raw, list):
        raise HistoryDecodeError(f"Field '{field_name}' must be an array")
    return raw


def _payload_from_data(category: Category, data: object) -> TrainingPayload:
    kind = category.block_kind
    if kind is None:
        segments = tuple(_segment_from_dict(s) for s in _list(data, "data"))
        return SegmentPayload(segments=segments)
    if not category.has_segments:
        blocks = tuple(_block_from_dict(b) for b in _list(data, "data"))
        return BlockPayload(kind=kind, blocks=blocks)
    if not isinstance(data, dict):
        raise HistoryDecodeError("Combined training data must be an object")
    block_key = _BLOCK_LIST_KEYS[kind]
    return CombinedPayload(
        kind=kind,
        blocks=tuple(_block_from_dict(b) for b in _list(data.get(block_key), block_key)),
        segments=tuple(_segment_from_dict(s) for s in _list(data.get("series"), "series")),
    )


def record_from_dict(raw: object) -> TrainingRecord:
    if not isinstance(raw, dict):
        raise HistoryDecodeError("Training must be an object")
    try:
        category = Category(raw.get("type"))
    except ValueError as exc:
        raise HistoryDecodeError(f"Unknown training type {raw.get('type')!r}") from exc
    try:
        day = DayOfWeek(raw.get("day"))
    except ValueError as exc:
        raise HistoryDecodeError(f"Unknown day {raw.get('day')!r}") from exc

    training_id = raw.get("id")
    athlete_name = raw.get("athleteName")
    if not isinstance(training_id, str) or not training_id:
        raise HistoryDecodeError("Training field 'id' must be a string")
    if not isinstance(athlete_name, str) or not athlete_name.strip():
        raise HistoryDecodeError("Training field 'athleteName' must be a string")

    created_at = raw.get("date")
    return TrainingRecord(
        training_id=training_id,
        athlete_name=athlete_name.strip(),
        day=day,
        category=category,
        payload=_payload_from_data(category, raw.get("data")),
        created_at=created_at if isinstance(created_at, str) else training_id,
    )


def decode_history(items: object) -> list[TrainingRecord]:
    """Decode a stored JSON array, skipping entries that do not decode."""
    if not isinstance(items, list):
        logger.error("Training history must be a JSON array; ignoring stored data")
        return []
    out: list[TrainingRecord] = []
    seen: set[str] = set()
    for i, item in enumerate(items):
        try:
            record = record_from_dict(item)
        except HistoryDecodeError as exc:
            logger.warning(f"Skipping stored training #{i + 1}: {exc}")
            continue
        if record.training_id in seen:
            logger.warning(f"Skipping duplicate training id {record.training_id}")
            continue
        seen.add(record.training_id)
        out.append(record)
    return out


class TrainingStore:
    """Owns the training history file; every write replaces the whole list.

    Stored entries that do not decode are kept verbatim on append and remove
    so that a write never drops them.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or _default_history_path()

    def _read_raw(self) -> list[Any] | None:
        """Return the stored JSON array, ``[]`` when missing, ``None`` when unusable."""
        if not self.path.exists():
            return []
        try:
            items = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.error(f"Cannot read training history {self.path}: {exc}")
            return None
        if not isinstance(items, list):
            logger.error("Training history must be a JSON array; ignoring stored data")
            return None
        return items

    def _writable_raw(self) -> list[Any]:
        items = self._read_raw()
        if items is not None:
            return items
        backup = self.path.with_suffix(self.path.suffix + ".bak")
        self.path.replace(backup)
        logger.warning(f"Moved unreadable training history to {backup}")
        return []

    def _write_raw(self, items: list[Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(items, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp.replace(self.path)

    def load(self) -> list[TrainingRecord]:
        items = self._read_raw()
        if items is None:
            return []
        return decode_history(items)

    def save(self, records: list[TrainingRecord]) -> None:
        self._write_raw([record_to_dict(record) for record in records])

    def append(self, record: TrainingRecord) -> list[TrainingRecord]:
        items = self._writable_raw()
        if any(isinstance(i, dict) and i.get("id") == record.training_id for i in items):
            raise ValueError(f"Training id already stored: {record.training_id}")
        items.append(record_to_dict(record))
        self._write_raw(items)
        logger.info(
            f"Stored training {record.training_id} "
            f"({record.category.value}, {record.athlete_name})"
        )
        return decode_history(items)

    def remove(self, training_id: str) -> list[TrainingRecord]:
        items = self._read_raw()
        if items is None:
            return []
        kept = [i for i in items if not (isinstance(i, dict) and i.get("id") == training_id)]
        if len(kept) != len(items):
            self._write_raw(kept)
            logger.info(f"Removed training {training_id}")
        return decode_history(kept)

    def clear(self) -> list[TrainingRecord]:
        self._write_raw([])
        logger.info("Cleared training history")
        return []
