"""
Главный модуль генератора - чистый интерфейс
"""

import logging
from typing import Optional

import httpx

from .config import PackagerConfig
from .internal.generator.assembler import (
    PackageAssembler,
    resolve_client_runtime_version,
)
from .internal.generator.codegen import CodeGenerator
from .internal.generator.compiler import DualRuntimeCompiler
from .internal.parser.metadata import MetadataParser, SwaggerMetadataParser
from .internal.parser.source import SpecAcquirer
from .internal.parser.swagger import DescriptionLoader
from .internal.types.models import CommandCatalog, GenerationRequest, GenerationResult
from .internal.utils.process import ProcessRunner, run_process
from .internal.validation import validate_options

logger = logging.getLogger(__name__)


class PackageGenerator:
    """Конвейер генерации пакета: этапы выполняются строго последовательно"""

    def __init__(
        self,
        config: PackagerConfig = None,
        runner: ProcessRunner = None,
        metadata_parser: MetadataParser = None,
        http_client: Optional[httpx.Client] = None,
    ):
        self.config = config or PackagerConfig()
        self.runner = runner or run_process
        self.metadata_parser = metadata_parser or SwaggerMetadataParser()

        self.acquirer = SpecAcquirer(client=http_client)
        self.loader = DescriptionLoader(self.metadata_parser, self.config)
        self.code_generator = CodeGenerator(self.runner, self.config.generator_executable)
        self.compiler = DualRuntimeCompiler(self.runner, self.config)
        self.assembler = PackageAssembler(self.config, self.metadata_parser)

    def generate(self, request: GenerationRequest) -> GenerationResult:
        """Генерация пакета по запросу"""
        validate_options(request)

        spec = self.acquirer.acquire(request)
        try:
            return self._generate_from(spec.path, request)
        finally:
            spec.cleanup()

    def _generate_from(self, spec_path, request: GenerationRequest) -> GenerationResult:
        loaded = self.loader.load(spec_path, request)
        meta = loaded.meta

        catalog = CommandCatalog()
        for route, path_item in loaded.document.paths.items():
            self.metadata_parser.collect_path(route, path_item, catalog)
        for name, schema in loaded.document.definitions.items():
            self.metadata_parser.collect_definition(name, schema, catalog)
        logger.info(
            f"Collected {len(catalog.path_details)} operations "
            f"and {len(catalog.definition_details)} definitions"
        )

        generated_files = self.code_generator.run(spec_path, meta)

        client_runtime_version = None
        if not request.no_assembly:
            client_runtime_version = resolve_client_runtime_version(self.config)

        artifacts = self.compiler.compile(
            generated_files, meta, request, client_runtime_version
        )

        return self.assembler.assemble(
            meta,
            generated_files,
            catalog,
            artifacts=artifacts,
            client_runtime_version=client_runtime_version,
        )


def generate_package(
    request: GenerationRequest, config: PackagerConfig = None
) -> GenerationResult:
    """Создание пакета по запросу с настройками по умолчанию"""
    return PackageGenerator(config).generate(request)
