from __future__ import annotations

import logging
import sys
from typing import Dict

from colorama import Fore, Style

LOGGER_NAME = "pescabot"

LEVEL_COLORS: Dict[int, str] = {
    logging.DEBUG: Fore.LIGHTBLACK_EX,
    logging.INFO: Fore.CYAN,
    logging.WARNING: Fore.YELLOW,
    logging.ERROR: Fore.RED,
    logging.CRITICAL: Fore.LIGHTRED_EX,
}


class ColoredFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if not color:
            return message
        return message.replace(
            f"[{record.levelname}]",
            f"[{color}{record.levelname}{Style.RESET_ALL}]",
            1,
        )


def setup_logger(level: str | int = logging.INFO, name: str = LOGGER_NAME) -> logging.Logger:
    """Configura o logger raiz do bot; chamadas repetidas não duplicam handlers."""
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        ColoredFormatter(
            "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(handler)
    return logger
