import argparse
import logging
import sys
from typing import List, Optional

from swagger_packager.config import PackagerConfig, CONFIG_FILE_NAME
from swagger_packager.generator import PackageGenerator
from swagger_packager.internal.types.errors import PackagerError
from swagger_packager.internal.types.models import GenerationRequest

from pydantic import ValidationError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Генерация устанавливаемого пакета из Swagger спецификации"
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--spec-path", type=str, help="Путь к файлу спецификации")
    source.add_argument("--spec-uri", type=str, help="URI спецификации")

    parser.add_argument(
        "--output", dest="output_directory", type=str, help="Выходная директория"
    )
    parser.add_argument("--name", type=str, help="Имя пакета")
    parser.add_argument("--version", type=str, help="Версия пакета")
    parser.add_argument("--prefix", type=str, help="Префикс имен команд")
    parser.add_argument(
        "--azure", action="store_true", help="Использовать облачный генератор кода"
    )
    parser.add_argument(
        "--no-assembly", action="store_true", help="Не компилировать сборку"
    )
    parser.add_argument(
        "--include-core-runtime",
        action="store_true",
        help="Дополнительно компилировать под coreclr",
    )
    parser.add_argument(
        "--core-toolchain-path", type=str, help="Путь к компилятору coreclr"
    )
    parser.add_argument(
        "--disable-optimization",
        action="store_true",
        help="Компилировать без оптимизаций",
    )
    parser.add_argument(
        "--config", type=str, default=CONFIG_FILE_NAME, help="Файл конфигурации"
    )
    parser.add_argument(
        "--init-config",
        action="store_true",
        help=f"Создать конфиг файл {CONFIG_FILE_NAME}",
    )
    parser.add_argument("--verbose", action="store_true", help="Подробный вывод")
    return parser


def build_request(args, config: PackagerConfig) -> GenerationRequest:
    """Запрос генерации из аргументов и конфига"""
    values = dict(
        spec_path=args.spec_path,
        spec_uri=args.spec_uri,
        output_directory=config.output_directory,
        name=config.name,
        prefix=config.prefix,
        use_azure_generator=args.azure,
        no_assembly=args.no_assembly,
        include_core_runtime=args.include_core_runtime,
        core_toolchain_path=args.core_toolchain_path,
        disable_optimization=args.disable_optimization,
    )
    if config.version:
        values["version"] = config.version
    return GenerationRequest(**values)


def generate(argv: Optional[List[str]] = None):
    """Команда генерации пакета"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    # Инициализация конфига
    if args.init_config:
        config = PackagerConfig().merge_with_args(args)
        config.save_to_file(args.config)
        print(f"✅ Создан конфиг файл {args.config}")
        return

    file_config = PackagerConfig.from_file(args.config)
    if file_config:
        print(f"📋 Используется конфиг из {args.config}")
    final_config = (file_config or PackagerConfig()).merge_with_args(args)

    # Проверка обязательных параметров
    if not final_config.name or not final_config.output_directory:
        print("❌ Ошибка: укажите --name и --output в аргументах или в конфиге")
        sys.exit(1)

    try:
        request = build_request(args, final_config)
    except ValidationError as e:
        print(f"❌ Ошибка параметров: {e}")
        sys.exit(1)

    source = request.spec_uri or request.spec_path
    print(f"🚀 Генерация пакета {request.name} {request.version} из {source}")

    try:
        result = PackageGenerator(final_config).generate(request)
    except PackagerError as e:
        print(f"❌ Ошибка генерации: {e}")
        sys.exit(1)

    for artifact in result.artifacts:
        print(f"🔧 Сборка {artifact.target.value}: {artifact.path}")
    print(f"📦 Экспортировано команд: {len(result.exported_commands)}")
    print("✅ Генерация завершена успешно!")
    print(f"📦 Пакет создан в: {result.output_directory}")
    return result


if __name__ == "__main__":
    generate()
