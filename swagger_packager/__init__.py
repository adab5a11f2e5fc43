"""Генератор устанавливаемых клиентских пакетов из Swagger спецификаций"""

from .config import PackagerConfig
from .generator import PackageGenerator, generate_package
from .internal.types.errors import (
    PackagerError,
    ConfigurationError,
    NotFoundError,
    FetchError,
    GenerationError,
    CompilationError,
    PackageIOError,
)
from .internal.types.models import GenerationRequest, GenerationResult

__all__ = [
    "PackagerConfig",
    "PackageGenerator",
    "generate_package",
    "GenerationRequest",
    "GenerationResult",
    "PackagerError",
    "ConfigurationError",
    "NotFoundError",
    "FetchError",
    "GenerationError",
    "CompilationError",
    "PackageIOError",
]
