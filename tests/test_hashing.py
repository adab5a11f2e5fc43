"""
Тесты каталога хешей
"""

import hashlib
import json

import pytest
from pydantic import ValidationError

from swagger_packager.internal.utils.hashing import (
    build_integrity_catalog,
    compute_file_hash,
    relative_catalog_key,
    write_integrity_catalog,
)


class TestIntegrityCatalog:
    """Тесты построения каталога"""

    def test_file_hash(self, tmp_path):
        """Тест SHA512 и его детерминированности"""
        path = tmp_path / "Model.cs"
        path.write_bytes(b"public class Model {}")

        first = compute_file_hash(path)

        assert first == hashlib.sha512(b"public class Model {}").hexdigest().upper()
        assert compute_file_hash(path) == first

    def test_relative_key(self, tmp_path):
        """Тест ключа без ведущего разделителя"""
        path = tmp_path / "a" / "b" / "Model.cs"

        assert relative_catalog_key(path, tmp_path) == "a/b/Model.cs"
        assert relative_catalog_key(str(path), str(tmp_path) + "/") == "a/b/Model.cs"

    def test_build_catalog(self, tmp_path):
        """Тест каталога по вложенным файлам"""
        path = tmp_path / "a" / "b" / "Model.cs"
        path.parent.mkdir(parents=True)
        path.write_text("class Model {}")

        catalog = build_integrity_catalog([path], tmp_path)

        assert catalog.algorithm == "SHA512"
        assert catalog.files == {"a/b/Model.cs": compute_file_hash(path)}

    def test_write_catalog(self, tmp_path):
        """Тест записи JSON и хеша файла каталога"""
        path = tmp_path / "Model.cs"
        path.write_text("class Model {}")
        catalog = build_integrity_catalog([path], tmp_path)
        catalog_path = tmp_path / "catalog" / "GeneratedCsharpCatalog.json"

        catalog_hash = write_integrity_catalog(catalog, catalog_path)

        data = json.loads(catalog_path.read_text(encoding="utf-8"))
        assert data == {"Algorithm": "SHA512", "Model.cs": compute_file_hash(path)}
        assert catalog_hash == compute_file_hash(catalog_path)

    def test_catalog_is_frozen(self, tmp_path):
        """Тест: записанный каталог не изменяется"""
        path = tmp_path / "Model.cs"
        path.write_text("class Model {}")
        catalog = build_integrity_catalog([path], tmp_path)

        with pytest.raises(ValidationError):
            catalog.files = {}
