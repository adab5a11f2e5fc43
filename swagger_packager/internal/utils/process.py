"""Запуск внешних процессов списком аргументов"""

import logging
import subprocess
from dataclasses import dataclass
from typing import Callable, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessResult:
    """Код возврата и объединенный вывод stdout/stderr"""

    returncode: int
    output: str


ProcessRunner = Callable[[Sequence[str]], ProcessResult]


def run_process(args: Sequence[str]) -> ProcessResult:
    """
    Синхронный запуск процесса без shell, вывод захватывается целиком.

    Байты, не декодируемые в кодировке локали, заменяются, чтобы
    разбор маркера успеха работал и для вывода в OEM кодировке.
    """
    logger.debug(f"Running {list(args)}")
    completed = subprocess.run(
        list(args),
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        errors="replace",
        check=False,
    )
    logger.debug(f"Process exited with {completed.returncode}")
    return ProcessResult(returncode=completed.returncode, output=completed.stdout or "")
