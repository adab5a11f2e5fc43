"""Строковые ресурсы для сообщений об ошибках"""

from typing import Dict

MESSAGES: Dict[str, str] = {
    "spec_source_required": "Укажите путь к спецификации или URI, но не оба сразу",
    "no_assembly_conflict": "Опция no_assembly несовместима с {option}",
    "spec_not_found": "Файл спецификации не найден: {path}",
    "output_not_found": "Выходная директория не найдена или не является директорией: {path}",
    "toolchain_not_found": "Не найден компилятор для дополнительной среды: {path}",
    "fetch_failed": "Не удалось загрузить спецификацию из {uri}: {reason}",
    "invalid_spec": "Не удалось разобрать спецификацию {path}: {reason}",
    "invalid_namespace": "Недопустимое пространство имен {namespace!r}: ожидаются идентификаторы через точку",
    "generator_failed": "Генератор кода завершился с кодом {code} для {path}: {output}",
    "generator_missing": "Не найден исполняемый файл генератора: {path}",
    "compilation_failed": "Не удалось скомпилировать сборку {path}",
    "toolchain_missing": "Не удалось запустить компилятор {path}",
    "client_runtime_missing": "Версия {version} клиентской библиотеки не найдена в {path}",
    "io_failed": "Ошибка записи {path}: {reason}",
}


def format_message(message_id: str, **kwargs) -> str:
    """Получение сообщения по идентификатору"""
    return MESSAGES[message_id].format(**kwargs)
