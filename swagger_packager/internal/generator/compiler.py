"""Компиляция сгенерированного кода под основную и дополнительную среду"""

import logging
import os
import shutil
from pathlib import Path
from typing import List, Optional, Sequence

from ...config import PackagerConfig
from ..types.errors import CompilationError, NotFoundError, PackageIOError
from ..types.models import (
    CompiledArtifact,
    GenerationRequest,
    GeneratorVariant,
    RuntimeTarget,
    SwaggerMetaDict,
)
from ..utils.process import ProcessRunner, run_process

logger = logging.getLogger(__name__)

SUCCESS_MARKER = "True"
ARTIFACT_EXTENSION = "dll"
CORE_TOOLCHAIN_NAME = "pwsh.exe" if os.name == "nt" else "pwsh"


def artifact_path(output_directory: Path, target: RuntimeTarget, namespace: str) -> Path:
    """ref/<runtime-tag>/<namespace>.dll"""
    return Path(output_directory) / "ref" / target.value / f"{namespace}.{ARTIFACT_EXTENSION}"


def is_compilation_successful(output: str) -> bool:
    """
    Успех определяется только по последнему токену вывода.

    Examples:
        >>> is_compilation_successful("Compiling...\\nTrue")
        True
        >>> is_compilation_successful("False")
        False
        >>> is_compilation_successful("")
        False
    """
    tokens = (output or "").split()
    if not tokens:
        return False
    return tokens[-1].endswith(SUCCESS_MARKER)


def resolve_core_toolchain(path: Optional[Path]) -> Path:
    """Путь к компилятору дополнительной среды; директория дополняется именем файла"""
    if path is None:
        found = shutil.which(CORE_TOOLCHAIN_NAME)
        if not found:
            raise NotFoundError("toolchain_not_found", path=CORE_TOOLCHAIN_NAME)
        return Path(found)

    path = Path(path)
    if path.is_dir():
        path = path / CORE_TOOLCHAIN_NAME
    if not path.exists():
        raise NotFoundError("toolchain_not_found", path=path)
    return path


class DualRuntimeCompiler:
    """Компиляция в отдельном процессе для каждой среды, последовательно"""

    def __init__(self, runner: ProcessRunner = None, config: PackagerConfig = None):
        self.runner = runner or run_process
        self.config = config or PackagerConfig()

    def compile(
        self,
        files: Sequence[Path],
        meta: SwaggerMetaDict,
        request: GenerationRequest,
        client_runtime_version: str = None,
    ) -> List[CompiledArtifact]:
        if request.no_assembly:
            logger.info("Assembly compilation skipped")
            return []

        azure = meta.generator_variant == GeneratorVariant.AZURE
        version = client_runtime_version or self.config.client_runtime_version

        artifacts = [
            self._compile_target(
                RuntimeTarget.FULL,
                self.config.primary_toolchain,
                files,
                meta,
                azure=azure,
                client_runtime_version=version,
                disable_optimization=request.disable_optimization,
            )
        ]

        if request.compile_core_runtime:
            toolchain = resolve_core_toolchain(request.core_toolchain_path)
            # Дополнительная среда сама разрешает зависимости
            artifacts.append(
                self._compile_target(
                    RuntimeTarget.CORE, str(toolchain), files, meta, azure=azure
                )
            )

        return artifacts

    def build_arguments(
        self,
        toolchain: str,
        output_path: Path,
        files: Sequence[Path],
        azure: bool = False,
        client_runtime_version: str = None,
        disable_optimization: bool = False,
    ) -> List[str]:
        args = [
            toolchain,
            "-NoProfile",
            "-NonInteractive",
            "-File",
            str(self.config.compile_script_path),
            "-OutputAssemblyPath",
            str(output_path),
            "-SourceFilePaths",
            ",".join(str(f) for f in files),
        ]
        if azure:
            args.append("-CodeCreatedByAzureGenerator")
        if client_runtime_version:
            args.extend(["-ClientRuntimeVersion", client_runtime_version])
        if disable_optimization:
            args.append("-DisableOptimization")
        return args

    def _compile_target(
        self,
        target: RuntimeTarget,
        toolchain: str,
        files: Sequence[Path],
        meta: SwaggerMetaDict,
        azure: bool = False,
        client_runtime_version: str = None,
        disable_optimization: bool = False,
    ) -> CompiledArtifact:
        output_path = artifact_path(meta.output_directory, target, meta.namespace)

        # Старая сборка всегда удаляется, инкрементальной компиляции нет
        try:
            if output_path.exists():
                output_path.unlink()
            output_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PackageIOError("io_failed", path=output_path, reason=exc) from exc

        args = self.build_arguments(
            toolchain,
            output_path,
            files,
            azure=azure,
            client_runtime_version=client_runtime_version,
            disable_optimization=disable_optimization,
        )
        logger.info(f"Compiling {target.value} assembly {output_path}")

        try:
            result = self.runner(args)
        except FileNotFoundError as exc:
            raise CompilationError("toolchain_missing", path=toolchain) from exc

        if not is_compilation_successful(result.output):
            logger.debug(f"Compiler output: {result.output}")
            raise CompilationError("compilation_failed", path=output_path)

        return CompiledArtifact(target=target, path=output_path, toolchain=toolchain)
