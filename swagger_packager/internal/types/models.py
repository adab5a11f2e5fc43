import re
import uuid
from enum import Enum
from pathlib import Path
from typing import Optional, Any, Dict, List
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, field_validator


VERSION_PATTERN = re.compile(r"^\d+(\.\d+){1,3}$")
GENERATED_DIRECTORY_NAME = "Generated.PowerShell.Commands"
# Пространство имен C#: идентификаторы через точку
NAMESPACE_PATTERN = re.compile(r"[A-Za-z_]\w*(\.[A-Za-z_]\w*)*")


class GeneratorVariant(str, Enum):
    STANDARD = "CSharp"
    AZURE = "Azure.CSharp"


class RuntimeTarget(str, Enum):
    FULL = "fullclr"
    CORE = "coreclr"


class GenerationRequest(BaseModel):
    """Параметры одного запуска генерации пакета"""

    model_config = ConfigDict(frozen=True)

    spec_path: Optional[Path] = None
    spec_uri: Optional[str] = None
    output_directory: Path
    name: str
    version: str = "0.0.1"
    prefix: Optional[str] = None

    use_azure_generator: bool = False
    no_assembly: bool = False
    include_core_runtime: bool = False
    core_toolchain_path: Optional[Path] = None
    disable_optimization: bool = False

    @field_validator("version")
    def version_check(cls, value):
        if not VERSION_PATTERN.match(value):
            raise ValueError(f"invalid version: {value}")
        return value

    @field_validator("prefix")
    def prefix_check(cls, value):
        return value or None

    @property
    def generator_variant(self) -> GeneratorVariant:
        return GeneratorVariant.AZURE if self.use_azure_generator else GeneratorVariant.STANDARD

    @property
    def compile_core_runtime(self) -> bool:
        return self.include_core_runtime or self.core_toolchain_path is not None


class SwaggerInfo(BaseModel):
    """Метаданные модуля из секции info"""

    name: str
    version: str
    namespace: str
    title: Optional[str] = None
    description: str = ""
    license_name: Optional[str] = None
    license_uri: Optional[str] = None
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    project_uri: Optional[str] = None
    prefix: Optional[str] = None


class SwaggerDocument(BaseModel):
    """Разобранная спецификация: info, paths, definitions"""

    model_config = ConfigDict(frozen=True)

    info: Dict[str, Any] = {}
    paths: Dict[str, Any] = {}
    definitions: Dict[str, Any] = {}
    raw: Dict[str, Any] = {}

    @classmethod
    def from_dict(cls, document: Dict[str, Any], raw: Dict[str, Any] = None):
        return cls(
            info=dict(document.get("info") or {}),
            paths=dict(document.get("paths") or {}),
            definitions=dict(document.get("definitions") or {}),
            raw=raw if raw is not None else document,
        )


class SwaggerMetaDict(BaseModel):
    """Типизированный набор метаданных для последующих этапов"""

    model_config = ConfigDict(frozen=True)

    info: SwaggerInfo
    namespace: str
    output_directory: Path
    generator_variant: GeneratorVariant = GeneratorVariant.STANDARD

    @property
    def generated_directory(self) -> Path:
        """Директория, куда внешний генератор пишет исходники"""
        return self.output_directory / GENERATED_DIRECTORY_NAME


@dataclass
class CommandCatalog:
    """Накопитель метаданных команд по путям и определениям"""

    path_details: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    definition_details: Dict[str, Dict[str, Any]] = field(default_factory=dict)


class IntegrityCatalog(BaseModel):
    """Каталог хешей сгенерированных файлов"""

    model_config = ConfigDict(frozen=True)

    algorithm: str = "SHA512"
    files: Dict[str, str] = {}

    def to_json_dict(self) -> Dict[str, str]:
        data = {"Algorithm": self.algorithm}
        data.update(self.files)
        return data


class CompiledArtifact(BaseModel):
    target: RuntimeTarget
    path: Path
    toolchain: str


class PackageManifest(BaseModel):
    """Итоговый манифест пакета"""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    description: str = ""
    author: str = ""
    company: str = ""
    copyright: str = ""
    required_modules: List[str] = []
    root_module: str
    functions_to_export: List[str] = []
    formats_to_process: List[str] = []
    prefix: Optional[str] = None
    project_uri: Optional[str] = None
    license_uri: Optional[str] = None

    @property
    def guid(self) -> str:
        return str(uuid.uuid5(uuid.NAMESPACE_URL, f"{self.name}/{self.version}"))


class GenerationResult(BaseModel):
    output_directory: Path
    manifest_path: Path
    catalog_path: Path
    catalog_hash: str
    artifacts: List[CompiledArtifact] = []
    exported_commands: List[str] = []
