"""Утилиты для конвейера генерации"""

from .hashing import (
    compute_file_hash,
    relative_catalog_key,
    build_integrity_catalog,
    write_integrity_catalog,
)
from .process import ProcessResult, ProcessRunner, run_process

__all__ = [
    "compute_file_hash",
    "relative_catalog_key",
    "build_integrity_catalog",
    "write_integrity_catalog",
    "ProcessResult",
    "ProcessRunner",
    "run_process",
]
