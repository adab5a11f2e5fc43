"""Каталог хешей сгенерированных файлов"""

import hashlib
import json
from pathlib import Path
from typing import Iterable, Union

from ..types.models import IntegrityCatalog

HASH_ALGORITHM = "SHA512"
_CHUNK_SIZE = 65536


def compute_file_hash(path: Union[str, Path]) -> str:
    """SHA512 содержимого файла в виде hex-строки (верхний регистр)"""
    digest = hashlib.sha512()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest().upper()


def relative_catalog_key(path: Union[str, Path], root: Union[str, Path]) -> str:
    """
    Ключ файла в каталоге: путь относительно корня генерации.

    Разделители приводятся к "/", ведущие и завершающие разделители
    отбрасываются.

    Examples:
        >>> relative_catalog_key("/gen/a/b/Model.cs", "/gen")
        'a/b/Model.cs'
    """
    relative = Path(path).relative_to(Path(root))
    return relative.as_posix().replace("\\", "/").strip("/")


def build_integrity_catalog(
    files: Iterable[Union[str, Path]], root: Union[str, Path]
) -> IntegrityCatalog:
    """Построение каталога хешей для списка файлов"""
    hashes = {
        relative_catalog_key(file_path, root): compute_file_hash(file_path)
        for file_path in files
    }
    return IntegrityCatalog(algorithm=HASH_ALGORITHM, files=hashes)


def write_integrity_catalog(catalog: IntegrityCatalog, path: Union[str, Path]) -> str:
    """Запись каталога в JSON, возвращает хеш самого файла каталога"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(catalog.to_json_dict(), f, indent=4)
    return compute_file_hash(path)
