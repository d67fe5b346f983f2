from __future__ import annotations

from pathlib import Path

from loguru import logger

from pista.core.logger import setup_logger


def test_setup_logger_writes_file_sink(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "pista.log"
    setup_logger(level="INFO", log_file=log_file)
    logger.info("stored training t1")
    logger.complete()

    assert "stored training t1" in log_file.read_text(encoding="utf-8")
    logger.remove()
