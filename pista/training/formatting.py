"""Display formatting for durations, paces, distances and dates."""

from __future__ import annotations

import math
from datetime import datetime

_MONTHS_ES = (
    "enero",
    "febrero",
    "marzo",
    "abril",
    "mayo",
    "junio",
    "julio",
    "agosto",
    "septiembre",
    "octubre",
    "noviembre",
    "diciembre",
)


def format_duration(seconds: float | None) -> str:
    """Render seconds as ``MM:SS``; missing, non-finite or negative input gives ``00:00``."""
    if seconds is None or not math.isfinite(seconds) or seconds < 0:
        return "00:00"
    # Half-up rounding on the total so 119.6 s carries into "02:00".
    total = int(math.floor(seconds + 0.5))
    minutes, secs = divmod(total, 60)
    return f"{minutes:02d}:{secs:02d}"


def format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")


def format_pace_seconds(value: float) -> str:
    return f"{value:.2f}"


def _parse_iso(iso_text: str) -> datetime | None:
    text = iso_text.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        moment = datetime.fromisoformat(text)
    except ValueError:
        return None
    if moment.tzinfo is not None:
        # Stored instants are UTC; show wall time of the machine.
        moment = moment.astimezone()
    return moment


def format_date(iso_text: str) -> str:
    """Long Spanish date with hour, e.g. ``19 de octubre de 2026, 10:30``."""
    moment = _parse_iso(iso_text)
    if moment is None:
        return iso_text
    month = _MONTHS_ES[moment.month - 1]
    return f"{moment.day} de {month} de {moment.year}, {moment.hour:02d}:{moment.minute:02d}"


def file_date(iso_text: str) -> str:
    moment = _parse_iso(iso_text)
    if moment is None:
        return iso_text.split("T")[0]
    return moment.date().isoformat()
