"""CSV and printable HTML exports of a single training."""

from __future__ import annotations

import csv
import html
import io
import re
from pathlib import Path
from typing import Any

from loguru import logger

from pista.training.formatting import (
    file_date,
    format_date,
    format_number,
    format_pace_seconds,
)
from pista.training.model import BlockKind, TrainingRecord
from pista.training.tables import (
    BlockRow,
    SegmentRow,
    TableSection,
    render_training_tables,
    section_cells,
    section_headers,
)

BOM = "\ufeff"

CSV_SEGMENT_HEADERS = (
    "#",
    "Distancia (m)",
    "Tiempo",
    "Recuperacion",
    "Ritmo/100m (s)",
    "Est. 800m",
    "Sensaciones",
)
CSV_BLOCK_HEADERS = ("#", "Tiempo (min)", "Distancia (m)", "Ritmo (min/km)", "Sensaciones")
CSV_BLOCK_TITLES = {
    BlockKind.FARTLEK: "Detalle Fartlek",
    BlockKind.AEROBIC_POWER: "Detalle Potencia Aeróbica",
}
CSV_SEGMENTS_TITLE = "Detalle Series"


def _default_export_dir() -> Path:
    return Path.home() / ".pista" / "exports"


def export_basename(record: TrainingRecord) -> str:
    athlete = re.sub(r"[\s/\\]", "_", record.athlete_name)
    return f"entrenamiento-{athlete}-{file_date(record.created_at)}"


def _csv_segment_row(row: SegmentRow) -> list[str]:
    return [
        str(row.index),
        format_number(row.distance),
        row.time,
        row.recovery,
        format_pace_seconds(row.pace_per_100),
        row.estimated_800,
        row.note,
    ]


def _csv_block_row(row: BlockRow) -> list[str]:
    return [
        str(row.index),
        format_number(row.time),
        format_number(row.distance),
        row.pace,
        row.note,
    ]


def _write_csv_section(writer: Any, section: TableSection) -> None:
    if section.kind == "segments":
        writer.writerow(CSV_SEGMENT_HEADERS)
    else:
        writer.writerow(CSV_BLOCK_HEADERS)
    for row in section.rows:
        if isinstance(row, SegmentRow):
            writer.writerow(_csv_segment_row(row))
        else:
            writer.writerow(_csv_block_row(row))


def build_training_csv(record: TrainingRecord) -> str:
    """CSV text of a training, prefixed with a UTF-8 byte-order mark.

    Fields holding a comma, a quote or a line break are quoted and inner
    quotes doubled (``csv.QUOTE_MINIMAL``).
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(["Atleta", record.athlete_name])
    writer.writerow(["Tipo", record.category.value])
    writer.writerow(["Fecha", format_date(record.created_at)])
    writer.writerow([])

    sections = render_training_tables(record)
    kind = record.category.block_kind
    if len(sections) == 2 and kind is not None:
        writer.writerow([CSV_BLOCK_TITLES[kind]])
        _write_csv_section(writer, sections[0])
        writer.writerow([])
        writer.writerow([CSV_SEGMENTS_TITLE])
        _write_csv_section(writer, sections[1])
    else:
        for section in sections:
            _write_csv_section(writer, section)
    return BOM + buffer.getvalue()


def export_training_csv(record: TrainingRecord, out_dir: Path | None = None) -> Path:
    target_dir = out_dir or _default_export_dir()
    target_dir.mkdir(parents=True, exist_ok=True)
    out = target_dir / f"{export_basename(record)}.csv"
    out.write_text(build_training_csv(record), encoding="utf-8")
    logger.info(f"Exported training {record.training_id} to {out}")
    return out


_REPORT_STYLES = """
    body {
        font-family: Arial, sans-serif;
        margin: 40px;
        color: #000;
        font-size: 12pt;
        -webkit-print-color-adjust: exact;
        color-adjust: exact;
    }
    .header {
        text-align: center;
        border-bottom: 2px solid #aaa;
        padding-bottom: 10px;
        margin-bottom: 30px;
        page-break-inside: avoid;
    }
    h1 { font-size: 24pt; margin: 0; }
    h2 { font-size: 18pt; margin: 10px 0; font-weight: normal; }
    h3 {
        font-size: 14pt;
        border-bottom: 1px solid #ccc;
        padding-bottom: 5px;
        margin-top: 30px;
        margin-bottom: 15px;
    }
    p { margin: 5px 0; }
    table { width: 100%; border-collapse: collapse; margin-top: 1em; page-break-inside: auto; }
    tr { page-break-inside: avoid; }
    th, td { border: 1px solid #999; padding: 8px; text-align: left; font-size: 10pt; }
    th { background-color: #e8e8e8; font-weight: bold; }
"""


def _report_table(section: TableSection) -> str:
    head = "".join(f"<th>{html.escape(h)}</th>" for h in section_headers(section))
    body = "".join(
        "<tr>" + "".join(f"<td>{html.escape(cell)}</td>" for cell in cells) + "</tr>"
        for cells in section_cells(section)
    )
    return (
        f"<h3>{html.escape(section.title)}</h3>"
        f"<table><thead><tr>{head}</tr></thead><tbody>{body}</tbody></table>"
    )


def build_report_html(record: TrainingRecord) -> str:
    athlete = html.escape(record.athlete_name)
    tables = "\n".join(_report_table(section) for section in render_training_tables(record))
    return f"""<!DOCTYPE html>
<html lang="es">
<head>
<meta charset="UTF-8">
<title>Informe de Entrenamiento - {athlete}</title>
<style>{_REPORT_STYLES}</style>
</head>
<body>
<div class="header">
<h1>Informe de Entrenamiento</h1>
<h2>{athlete}</h2>
<p><strong>{html.escape(record.day.value)} - {html.escape(record.category.value)}</strong></p>
<p><small>{html.escape(format_date(record.created_at))}</small></p>
</div>
{tables}
</body>
</html>
"""


def export_report_html(record: TrainingRecord, out_dir: Path | None = None) -> Path:
    target_dir = out_dir or _default_export_dir()
    target_dir.mkdir(parents=True, exist_ok=True)
    out = target_dir / f"{export_basename(record)}.html"
    out.write_text(build_report_html(record), encoding="utf-8")
    logger.info(f"Wrote report for training {record.training_id} to {out}")
    return out
