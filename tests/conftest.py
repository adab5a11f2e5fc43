"""
Общие фикстуры для тестов генератора пакетов
"""

import json
from pathlib import Path

import pytest

from swagger_packager.internal.utils.process import ProcessResult


MINIMAL_SPEC = {
    "swagger": "2.0",
    "info": {
        "title": "Pet Store",
        "version": "1.0.0",
        "description": "Minimal pet store",
        "contact": {"name": "Pet Team", "url": "https://example.com/pets"},
        "license": {"name": "MIT", "url": "https://example.com/license"},
    },
    "paths": {
        "/pets/{petId}": {
            "get": {
                "operationId": "Pets_Get",
                "parameters": [{"name": "petId", "in": "path", "required": True}],
                "responses": {
                    "200": {
                        "description": "OK",
                        "schema": {"$ref": "#/definitions/Pet"},
                    }
                },
            }
        }
    },
    "definitions": {
        "Pet": {
            "type": "object",
            "properties": {"id": {"type": "integer"}, "name": {"type": "string"}},
            "required": ["name"],
        }
    },
}

# Файлы, которые "генерирует" внешний генератор в тестах
GENERATED_FILES = {
    "PetStoreClient.cs": "public class PetStoreClient {}",
    "Models/Pet.cs": "public class Pet { public string Name; }",
    "Program.cs": "class Program { static void Main() {} }",
    "TemporaryGeneratedFile_1.cs": "// scaffold",
    "Azure.CSharp.Generated/AzureClient.cs": "public class AzureClient {}",
}


class FakeRunner:
    """Подмена запуска процессов: генератор пишет файлы, компилятор отвечает маркером"""

    def __init__(self, generator_code: int = 0, compiler_output: str = "Compiling\nTrue"):
        self.generator_code = generator_code
        self.compiler_output = compiler_output
        self.calls = []

    def __call__(self, args):
        args = list(args)
        self.calls.append(args)

        if "-CodeGenerator" in args:
            if self.generator_code == 0:
                output_dir = Path(args[args.index("-OutputDirectory") + 1])
                for name, content in GENERATED_FILES.items():
                    path = output_dir / name
                    path.parent.mkdir(parents=True, exist_ok=True)
                    path.write_text(content, encoding="utf-8")
            return ProcessResult(returncode=self.generator_code, output="generator output")

        if "-OutputAssemblyPath" in args:
            output = Path(args[args.index("-OutputAssemblyPath") + 1])
            if self.compiler_output.split() and self.compiler_output.split()[-1] == "True":
                output.write_bytes(b"MZ")
            return ProcessResult(returncode=0, output=self.compiler_output)

        return ProcessResult(returncode=0, output="")

    @property
    def generator_calls(self):
        return [c for c in self.calls if "-CodeGenerator" in c]

    @property
    def compiler_calls(self):
        return [c for c in self.calls if "-OutputAssemblyPath" in c]


@pytest.fixture
def minimal_spec():
    return json.loads(json.dumps(MINIMAL_SPEC))


@pytest.fixture
def spec_file(tmp_path, minimal_spec):
    path = tmp_path / "petstore.json"
    path.write_text(json.dumps(minimal_spec), encoding="utf-8")
    return path


@pytest.fixture
def output_dir(tmp_path):
    path = tmp_path / "out"
    path.mkdir()
    return path


@pytest.fixture
def fake_runner():
    return FakeRunner()
