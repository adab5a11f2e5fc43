import fnmatch
import logging
from pathlib import Path
from typing import List

from ..types.errors import GenerationError
from ..types.models import SwaggerMetaDict
from ..utils.process import ProcessRunner, run_process

logger = logging.getLogger(__name__)

# Служебные файлы генератора, это не код приложения
EXCLUDED_FILE_PATTERNS = ("Program.cs", "TemporaryGeneratedFile*")
# Заранее сгенерированный облачный клиент
EXCLUDED_SUBTREE = "Azure.CSharp.Generated"
SOURCE_FILE_PATTERN = "*.cs"


def is_excluded(path: Path, root: Path) -> bool:
    relative = path.relative_to(root)
    name = relative.name.lower()
    if any(fnmatch.fnmatch(name, pattern.lower()) for pattern in EXCLUDED_FILE_PATTERNS):
        return True
    return any(part.lower() == EXCLUDED_SUBTREE.lower() for part in relative.parts[:-1])


def collect_generated_files(root: Path) -> List[Path]:
    """Рекурсивный поиск сгенерированных исходников без служебных файлов"""
    root = Path(root).absolute()
    if not root.is_dir():
        return []
    return sorted(
        path
        for path in root.rglob(SOURCE_FILE_PATTERN)
        if path.is_file() and not is_excluded(path, root)
    )


class CodeGenerator:
    """Адаптер внешнего генератора кода"""

    def __init__(self, runner: ProcessRunner = None, executable: str = "autorest"):
        self.runner = runner or run_process
        self.executable = executable

    def build_arguments(self, spec_path: Path, meta: SwaggerMetaDict) -> List[str]:
        return [
            self.executable,
            "-input",
            str(spec_path),
            "-CodeGenerator",
            meta.generator_variant.value,
            "-OutputDirectory",
            str(meta.generated_directory),
            "-NameSpace",
            meta.namespace,
        ]

    def run(self, spec_path: Path, meta: SwaggerMetaDict) -> List[Path]:
        """Запуск генератора, возвращает список сгенерированных файлов"""
        args = self.build_arguments(spec_path, meta)
        logger.info(f"Generating code with {self.executable} ({meta.generator_variant.value})")

        try:
            result = self.runner(args)
        except FileNotFoundError as exc:
            raise GenerationError("generator_missing", path=self.executable) from exc

        if result.returncode != 0:
            raise GenerationError(
                "generator_failed",
                code=result.returncode,
                path=spec_path,
                output=result.output.strip()[-500:],
            )

        files = collect_generated_files(meta.generated_directory)
        logger.debug(f"Collected {len(files)} generated files")
        return files
