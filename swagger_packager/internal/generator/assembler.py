import logging
import shutil
from pathlib import Path
from typing import List, Optional, Sequence

from ...config import PackagerConfig, RESOURCES_DIR
from ..parser.metadata import MetadataParser, SwaggerMetadataParser
from ..types.errors import NotFoundError, PackageIOError
from ..types.models import (
    CommandCatalog,
    CompiledArtifact,
    GENERATED_DIRECTORY_NAME,
    GenerationResult,
    PackageManifest,
    SwaggerMetaDict,
)
from ..utils.hashing import build_integrity_catalog, write_integrity_catalog
from .templates import render_manifest, render_root_module

logger = logging.getLogger(__name__)

CATALOG_FILE_NAME = "GeneratedCsharpCatalog.json"
FORMAT_FILES_DIRECTORY = "FormatFiles"
FORMAT_FILE_PATTERN = "*.ps1xml"
SHARED_FILES = ("GeneratedHelpers.ps1", "GeneratedHelpers.Resources.psd1")
LOCALIZED_RESOURCES_TEMPLATE = "Generated.Resources.psd1"
CLIENT_RUNTIME_PACKAGE = "microsoft.rest.clientruntime"
# ProjectUri/LicenseUri поддерживаются начиная с этой версии хоста
MANIFEST_URI_THRESHOLD = (5, 0)


def resolve_client_runtime_version(config: PackagerConfig) -> str:
    """
    Закрепленная версия клиентской библиотеки.

    Если кэш пакетов существует, версия должна быть в нем установлена.
    """
    version = config.client_runtime_version
    if not config.client_runtime_packages_dir:
        return version

    package_root = Path(config.client_runtime_packages_dir).expanduser() / CLIENT_RUNTIME_PACKAGE
    if not package_root.is_dir():
        logger.warning(f"Client runtime cache {package_root} not found, using {version}")
        return version

    if not (package_root / version).is_dir():
        raise NotFoundError("client_runtime_missing", version=version, path=package_root)
    return version


def discover_format_files(output_directory: Path) -> List[str]:
    """Пути файлов форматирования относительно корня пакета"""
    format_root = output_directory / GENERATED_DIRECTORY_NAME / FORMAT_FILES_DIRECTORY
    if not format_root.is_dir():
        return []
    return [
        path.relative_to(output_directory).as_posix()
        for path in sorted(format_root.rglob(FORMAT_FILE_PATTERN))
        if path.is_file()
    ]


class PackageAssembler:
    """Сборка итоговой структуры пакета"""

    def __init__(
        self,
        config: PackagerConfig = None,
        metadata_parser: MetadataParser = None,
        resources_dir: Path = RESOURCES_DIR,
    ):
        self.config = config or PackagerConfig()
        self.metadata_parser = metadata_parser or SwaggerMetadataParser()
        self.resources_dir = Path(resources_dir)

    def assemble(
        self,
        meta: SwaggerMetaDict,
        generated_files: Sequence[Path],
        catalog: CommandCatalog,
        artifacts: Sequence[CompiledArtifact] = (),
        client_runtime_version: Optional[str] = None,
    ) -> GenerationResult:
        output_directory = meta.output_directory
        try:
            self._copy_shared_files(output_directory)

            catalog_path = meta.generated_directory / CATALOG_FILE_NAME
            integrity_catalog = build_integrity_catalog(
                generated_files, meta.generated_directory.absolute()
            )
            catalog_hash = write_integrity_catalog(integrity_catalog, catalog_path)
            logger.info(f"Catalogued {len(integrity_catalog.files)} files in {catalog_path}")

            exported_commands = self.metadata_parser.exported_commands(catalog)

            root_module = f"{meta.info.name}.psm1"
            self._write_text(
                output_directory / root_module,
                render_root_module(
                    module_name=meta.info.name,
                    module_version=meta.info.version,
                    client_runtime_version=(
                        client_runtime_version or self.config.client_runtime_version
                    ),
                    namespace=meta.namespace,
                    catalog_path=f"{GENERATED_DIRECTORY_NAME}/{CATALOG_FILE_NAME}",
                    generated_directory=GENERATED_DIRECTORY_NAME,
                ),
            )

            manifest = self.build_manifest(
                meta,
                root_module,
                exported_commands,
                discover_format_files(output_directory),
            )
            manifest_path = output_directory / f"{meta.info.name}.psd1"
            self._write_text(
                manifest_path,
                render_manifest(
                    manifest,
                    include_uris=self.config.host_version_tuple >= MANIFEST_URI_THRESHOLD,
                ),
            )

            shutil.copyfile(
                self.resources_dir / LOCALIZED_RESOURCES_TEMPLATE,
                output_directory / f"{meta.info.name}.Resources.psd1",
            )
        except OSError as exc:
            raise PackageIOError(
                "io_failed", path=getattr(exc, "filename", None) or output_directory, reason=exc
            ) from exc

        return GenerationResult(
            output_directory=output_directory,
            manifest_path=manifest_path,
            catalog_path=catalog_path,
            catalog_hash=catalog_hash,
            artifacts=list(artifacts),
            exported_commands=exported_commands,
        )

    def build_manifest(
        self,
        meta: SwaggerMetaDict,
        root_module: str,
        exported_commands: List[str],
        format_files: List[str],
    ) -> PackageManifest:
        info = meta.info
        author = info.contact_name or self.config.author or ""
        copyright_text = f"(c) {author}. All rights reserved." if author else ""
        if info.license_name:
            copyright_text = f"{copyright_text} {info.license_name}".strip()

        return PackageManifest(
            name=info.name,
            version=info.version,
            description=info.description,
            author=author,
            company=self.config.company or "",
            copyright=copyright_text,
            required_modules=list(self.config.required_modules),
            root_module=root_module,
            functions_to_export=exported_commands,
            formats_to_process=format_files,
            prefix=info.prefix,
            project_uri=info.project_uri,
            license_uri=info.license_uri,
        )

    def _copy_shared_files(self, output_directory: Path) -> None:
        for name in SHARED_FILES:
            shutil.copyfile(self.resources_dir / name, output_directory / name)

    @staticmethod
    def _write_text(path: Path, content: str) -> None:
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
