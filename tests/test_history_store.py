from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from pista.training.builder import build_block, build_segment, build_training_record
from pista.training.history_store import TrainingStore, record_from_dict, record_to_dict
from pista.training.model import BlockKind, Category, CombinedPayload


def _records() -> tuple:
    r1 = build_training_record(
        "Ana",
        "Lunes",
        Category.SERIES,
        [build_segment("400", "1", "30", "1", "0", "bien")],
        now=datetime(2026, 2, 25, 10, 0, tzinfo=timezone.utc),
    )
    r2 = build_training_record(
        "Luis",
        "Jueves",
        Category.AEROBIC_POWER_SERIES,
        [build_segment("200", "0", "38")],
        power_blocks=[build_block("4", "1200", "duro, pero \"bien\"", kind=BlockKind.AEROBIC_POWER)],
        now=datetime(2026, 2, 26, 10, 0, tzinfo=timezone.utc),
    )
    return r1, r2


def test_append_load_remove_and_clear(tmp_path: Path) -> None:
    store = TrainingStore(tmp_path / "trainings.json")
    r1, r2 = _records()

    assert store.load() == []
    store.append(r1)
    store.append(r2)

    loaded = store.load()
    assert [r.training_id for r in loaded] == [r1.training_id, r2.training_id]
    assert loaded[1] == r2

    remaining = store.remove(r1.training_id)
    assert [r.training_id for r in remaining] == [r2.training_id]
    assert store.load() == remaining

    assert store.clear() == []
    assert store.load() == []


def test_append_rejects_duplicate_id(tmp_path: Path) -> None:
    store = TrainingStore(tmp_path / "trainings.json")
    r1, _ = _records()
    store.append(r1)
    with pytest.raises(ValueError):
        store.append(r1)


def test_json_layout(tmp_path: Path) -> None:
    _, r2 = _records()
    payload = record_to_dict(r2)
    assert payload["type"] == "Potencia Aeróbica más Series"
    assert payload["athleteName"] == "Luis"
    assert set(payload["data"]) == {"potenciaBlocks", "series"}
    assert payload["data"]["series"][0]["time"] == 38
    assert payload["date"] == payload["id"]

    decoded = record_from_dict(json.loads(json.dumps(payload)))
    assert isinstance(decoded.payload, CombinedPayload)
    assert decoded == r2


def test_load_skips_undecodable_entries(tmp_path: Path) -> None:
    path = tmp_path / "trainings.json"
    good = {
        "id": "2025-05-01T08:00:00.000Z",
        "athleteName": "Eva",
        "day": "Sábado",
        "type": "Fartlek",
        "data": [{"time": 5, "distance": 1000, "sensations": ""}],
        "date": "2025-05-01T08:00:00.000Z",
    }
    unknown_type = dict(good, id="x1", type="Natación")
    bad_payload = dict(good, id="x2", data=[{"time": 0, "distance": 1000}])
    duplicate = dict(good)
    path.write_text(
        json.dumps([good, unknown_type, bad_payload, duplicate, "junk"]), encoding="utf-8"
    )

    loaded = TrainingStore(path).load()

    assert len(loaded) == 1
    assert loaded[0].athlete_name == "Eva"
    assert loaded[0].payload.blocks[0].distance == 1000  # type: ignore[union-attr]


def test_load_unreadable_file_is_empty(tmp_path: Path) -> None:
    path = tmp_path / "trainings.json"
    path.write_text("{not json", encoding="utf-8")
    assert TrainingStore(path).load() == []


def test_load_rejects_non_finite_numbers(tmp_path: Path) -> None:
    path = tmp_path / "trainings.json"
    path.write_text(
        '[{"id": "a", "athleteName": "Eva", "day": "Lunes", "type": "Series", '
        '"data": [{"distance": 400, "time": Infinity}], "date": "a"}]',
        encoding="utf-8",
    )
    assert TrainingStore(path).load() == []


def test_writes_keep_undecodable_entries(tmp_path: Path) -> None:
    path = tmp_path / "trainings.json"
    good = {
        "id": "a",
        "athleteName": "Eva",
        "day": "Lunes",
        "type": "Fartlek",
        "data": [{"time": 5, "distance": 1000, "sensations": ""}],
        "date": "a",
    }
    bad = dict(good, id="b", data=[{"time": "5", "distance": 1000}])
    path.write_text(json.dumps([good, bad]), encoding="utf-8")
    store = TrainingStore(path)
    r1, _ = _records()

    loaded = store.append(r1)
    assert [r.training_id for r in loaded] == ["a", r1.training_id]
    stored = json.loads(path.read_text(encoding="utf-8"))
    assert [item["id"] for item in stored] == ["a", "b", r1.training_id]
    assert stored[1] == bad

    store.remove("a")
    stored = json.loads(path.read_text(encoding="utf-8"))
    assert [item["id"] for item in stored] == ["b", r1.training_id]


def test_append_moves_unreadable_file_aside(tmp_path: Path) -> None:
    path = tmp_path / "trainings.json"
    path.write_text("{not json", encoding="utf-8")
    r1, _ = _records()

    assert TrainingStore(path).append(r1) == [r1]
    assert (tmp_path / "trainings.json.bak").read_text(encoding="utf-8") == "{not json"
