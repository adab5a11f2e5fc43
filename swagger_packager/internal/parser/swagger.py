import copy
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Union

import jsonref

from ...config import PackagerConfig
from ..types.errors import ConfigurationError, PackageIOError
from ..types.models import (
    GenerationRequest,
    SwaggerDocument,
    SwaggerMetaDict,
)
from .metadata import MetadataParser, SwaggerMetadataParser, check_namespace

logger = logging.getLogger(__name__)

# Начиная с этой версии хоста модули раскладываются по <name>/<version>
VERSIONED_DIRECTORY_THRESHOLD = (5, 0)


@dataclass(frozen=True)
class LoadedDescription:
    document: SwaggerDocument
    meta: SwaggerMetaDict


def resolve_output_directory(
    output_directory: Union[str, Path],
    name: str,
    version: str,
    host_version: tuple = VERSIONED_DIRECTORY_THRESHOLD,
) -> Path:
    """
    Итоговая директория пакета с учетом соглашения <name>/<version>.

    Если переданный путь уже заканчивается на <name> или <name>/<version>
    (без учета регистра), повторная вложенность не добавляется.
    """
    output_directory = Path(output_directory)
    if tuple(host_version) < VERSIONED_DIRECTORY_THRESHOLD:
        return output_directory

    parts = [p.lower() for p in output_directory.parts]
    if parts[-2:] == [name.lower(), version.lower()]:
        return output_directory
    if parts[-1:] == [name.lower()]:
        return output_directory / version
    return output_directory / name / version


class DescriptionLoader:
    """Загрузчик спецификации и метаданных модуля"""

    def __init__(
        self,
        metadata_parser: MetadataParser = None,
        config: PackagerConfig = None,
    ):
        self.metadata_parser = metadata_parser or SwaggerMetadataParser()
        self.config = config or PackagerConfig()

    def load(self, spec_path: Path, request: GenerationRequest) -> LoadedDescription:
        document = self.read_document(spec_path)

        info, namespace = self.metadata_parser.get_info(
            document, request.name, request.version, request.prefix
        )
        # Подменный парсер метаданных тоже должен вернуть корректное имя
        check_namespace(namespace)

        output_directory = resolve_output_directory(
            request.output_directory,
            request.name,
            request.version,
            self.config.host_version_tuple,
        )
        try:
            output_directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PackageIOError("io_failed", path=output_directory, reason=exc) from exc

        logger.info(f"Package {info.name} {info.version} -> {output_directory}")

        meta = SwaggerMetaDict(
            info=info,
            namespace=namespace,
            output_directory=output_directory,
            generator_variant=request.generator_variant,
        )
        return LoadedDescription(document=document, meta=meta)

    @staticmethod
    def read_document(spec_path: Path) -> SwaggerDocument:
        """Чтение и разбор JSON спецификации, $ref разрешаются через jsonref"""
        try:
            text = Path(spec_path).read_text(encoding="utf-8-sig")
        except OSError as exc:
            raise PackageIOError("io_failed", path=spec_path, reason=exc) from exc

        try:
            raw = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigurationError("invalid_spec", path=spec_path, reason=exc) from exc

        if not isinstance(raw, dict):
            raise ConfigurationError(
                "invalid_spec", path=spec_path, reason="root is not an object"
            )

        # Относительные ссылки на соседние файлы разрешаются от файла спецификации
        try:
            resolved = jsonref.replace_refs(
                copy.deepcopy(raw),
                base_uri=Path(spec_path).absolute().as_uri(),
                proxies=False,
                lazy_load=False,
            )
        except jsonref.JsonRefError as exc:
            raise ConfigurationError("invalid_spec", path=spec_path, reason=exc) from exc

        return SwaggerDocument.from_dict(resolved, raw=raw)
