"""Ошибки конвейера генерации пакета"""

from ..messages import format_message


class PackagerError(Exception):
    """Базовая ошибка генерации пакета"""

    def __init__(self, message_id: str, **kwargs):
        self.message_id = message_id
        self.details = kwargs
        self.message = format_message(message_id, **kwargs)
        super().__init__(self.message)


class ConfigurationError(PackagerError):
    """Недопустимая комбинация опций"""


class NotFoundError(PackagerError):
    """Не найден файл спецификации, выходная директория или компилятор"""

    @property
    def path(self):
        return self.details.get("path")


class FetchError(PackagerError):
    """Ошибка загрузки удаленной спецификации"""


class GenerationError(PackagerError):
    """Внешний генератор кода завершился с ошибкой"""


class CompilationError(PackagerError):
    """Компиляция сборки не подтвердила успех"""

    @property
    def path(self):
        return self.details.get("path")


class PackageIOError(PackagerError):
    """Ошибка файловой системы при сборке пакета"""
