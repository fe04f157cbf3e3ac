"""Настройка журналирования: ротация файлов и вывод в консоль."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Iterable, cast

LOG_FORMAT: Final[str] = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_FILE_NAME: Final[str] = "dockpanel.log"
# docker-py пишет каждый HTTP-запрос к daemon через urllib3
NOISY_LOGGERS: Final[tuple[str, ...]] = ("urllib3", "docker")


def resolve_log_level(level_name: str) -> int:
    """Преобразует строковый уровень логирования в числовой."""

    try:
        return cast(int, getattr(logging, level_name.upper()))
    except AttributeError as exc:
        raise ValueError(f"Unknown log level: {level_name}") from exc


def configure_logging(
    log_dir: Path,
    *,
    log_file_name: str = LOG_FILE_NAME,
    level_name: str = "INFO",
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> Path:
    """Подключает файл с ротацией и stdout к корневому логгеру, возвращает путь к файлу."""

    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / log_file_name
    log_level = resolve_log_level(level_name)
    formatter = logging.Formatter(LOG_FORMAT)

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)

    logging.basicConfig(
        level=log_level,
        handlers=[file_handler, stream_handler],
        force=True,
    )
    quiet_loggers(NOISY_LOGGERS, floor=max(log_level, logging.WARNING))
    return log_file


def quiet_loggers(names: Iterable[str], *, floor: int = logging.WARNING) -> None:
    """Поднимает уровень сторонних логгеров, чтобы они не засоряли журнал."""

    for name in names:
        logging.getLogger(name).setLevel(floor)
