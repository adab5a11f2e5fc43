"""Проверка несовместимых опций до начала любой работы"""

from .types.errors import ConfigurationError
from .types.models import GenerationRequest


def validate_options(request: GenerationRequest) -> None:
    """
    Проверяет запрещенные комбинации опций запроса.

    Не обращается ни к файловой системе, ни к сети, поэтому вызывается
    первым этапом конвейера.

    Raises:
        ConfigurationError: если источник спецификации задан неоднозначно или
            no_assembly передан вместе с опциями компиляции
    """
    if (request.spec_path is None) == (request.spec_uri is None):
        raise ConfigurationError("spec_source_required")

    if not request.no_assembly:
        return

    if request.include_core_runtime:
        raise ConfigurationError("no_assembly_conflict", option="include_core_runtime")
    if request.core_toolchain_path is not None:
        raise ConfigurationError("no_assembly_conflict", option="core_toolchain_path")
    if request.disable_optimization:
        raise ConfigurationError("no_assembly_conflict", option="disable_optimization")
