"""
Конфигурация для генерации пакета
"""

import os
from pathlib import Path
from typing import List, Optional
import toml
from dataclasses import dataclass, field, fields

CONFIG_FILE_NAME = "swagger-packager.toml"
RESOURCES_DIR = Path(__file__).parent / "resources"

# Последняя версия ClientRuntime конфликтует с пакетом платформы
DEFAULT_CLIENT_RUNTIME_VERSION = "3.3.4"


@dataclass
class PackagerConfig:
    """Конфигурация окружения и значения запроса по умолчанию"""

    generator_executable: str = "autorest"
    primary_toolchain: str = "powershell"
    compile_script: Optional[str] = None
    client_runtime_version: str = DEFAULT_CLIENT_RUNTIME_VERSION
    client_runtime_packages_dir: Optional[str] = None
    host_version: str = "5.1"

    author: Optional[str] = None
    company: Optional[str] = None
    required_modules: List[str] = field(
        default_factory=lambda: ["SwaggerPackager.Utility"]
    )

    output_directory: Optional[str] = None
    name: Optional[str] = None
    version: Optional[str] = None
    prefix: Optional[str] = None

    @property
    def compile_script_path(self) -> Path:
        if self.compile_script:
            return Path(self.compile_script)
        return RESOURCES_DIR / "Invoke-GeneratedCompilation.ps1"

    @property
    def host_version_tuple(self) -> tuple:
        return parse_version(self.host_version)

    @classmethod
    def from_file(
        cls, config_path: str = CONFIG_FILE_NAME, search_dir: str = None
    ) -> Optional["PackagerConfig"]:
        """Загрузка конфигурации из файла"""
        # Если указана директория для поиска, ищем конфиг там
        if search_dir and os.path.isdir(search_dir):
            config_in_dir = os.path.join(search_dir, CONFIG_FILE_NAME)
            if os.path.exists(config_in_dir):
                config_path = config_in_dir

        if not os.path.exists(config_path):
            return None

        try:
            config_data = toml.load(config_path)
        except (toml.TomlDecodeError, OSError):
            return None

        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in config_data.items() if k in known})

    def save_to_file(self, config_path: str = CONFIG_FILE_NAME) -> None:
        """Сохранение конфигурации в файл"""
        # toml не умеет записывать None
        config_data = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

        with open(config_path, "w") as f:
            toml.dump(config_data, f)

    def merge_with_args(self, args) -> "PackagerConfig":
        """Объединение с аргументами командной строки"""
        merged = PackagerConfig(**{f.name: getattr(self, f.name) for f in fields(self)})
        for name in ("output_directory", "name", "version", "prefix"):
            value = getattr(args, name, None)
            if value:
                setattr(merged, name, value)
        return merged


def parse_version(version: str) -> tuple:
    """'5.1.2' -> (5, 1, 2); нечисловые части отбрасываются"""
    parts = []
    for part in str(version).split("."):
        if not part.isdigit():
            break
        parts.append(int(part))
    return tuple(parts)
