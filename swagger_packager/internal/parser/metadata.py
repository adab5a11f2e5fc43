import re
import logging
from typing import Dict, Any, List, Tuple, Protocol

from ..types.errors import ConfigurationError
from ..types.models import (
    NAMESPACE_PATTERN,
    CommandCatalog,
    SwaggerDocument,
    SwaggerInfo,
)

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "patch", "head", "options")
EXTENSION_PREFIX = "x-"

# Глагол операции (часть operationId после "_") -> глагол команды
OPERATION_VERBS = {
    "list": "Get",
    "get": "Get",
    "listall": "Get",
    "create": "New",
    "createorupdate": "New",
    "add": "Add",
    "update": "Set",
    "set": "Set",
    "patch": "Update",
    "delete": "Remove",
    "remove": "Remove",
    "start": "Start",
    "stop": "Stop",
    "restart": "Restart",
}

# Глагол по HTTP методу, если operationId не задан
METHOD_VERBS = {
    "get": "Get",
    "put": "Set",
    "post": "New",
    "delete": "Remove",
    "patch": "Update",
    "head": "Test",
    "options": "Get",
}


class MetadataParser(Protocol):
    """Разбор info/paths/definitions в метаданные команд"""

    def get_info(
        self, document: SwaggerDocument, name: str, version: str, prefix: str = None
    ) -> Tuple[SwaggerInfo, str]: ...

    def collect_path(
        self, route: str, path_item: Dict[str, Any], catalog: CommandCatalog
    ) -> None: ...

    def collect_definition(
        self, name: str, schema: Dict[str, Any], catalog: CommandCatalog
    ) -> None: ...

    def exported_commands(self, catalog: CommandCatalog) -> List[str]: ...


class SwaggerMetadataParser:
    """Парсер метаданных Swagger 2.0 по умолчанию"""

    def get_info(
        self, document: SwaggerDocument, name: str, version: str, prefix: str = None
    ) -> Tuple[SwaggerInfo, str]:
        info = document.info
        contact = info.get("contact") or {}
        license_info = info.get("license") or {}

        namespace = info.get("x-namespace") or self.default_namespace(name, version)
        check_namespace(namespace)

        swagger_info = SwaggerInfo(
            name=name,
            version=version,
            namespace=namespace,
            title=info.get("title"),
            description=info.get("description") or info.get("title") or "",
            license_name=license_info.get("name"),
            license_uri=license_info.get("url"),
            contact_name=contact.get("name"),
            contact_email=contact.get("email"),
            project_uri=contact.get("url"),
            prefix=prefix,
        )
        return swagger_info, namespace

    @staticmethod
    def default_namespace(name: str, version: str) -> str:
        return f"Microsoft.PowerShell.{_pascal_case(name)}.v{version.replace('.', '')}"

    def collect_path(
        self, route: str, path_item: Dict[str, Any], catalog: CommandCatalog
    ) -> None:
        """Добавление операций одного пути в накопитель"""
        # Ключи расширений "x-..." допустимы рядом с путями
        if route.startswith(EXTENSION_PREFIX) or not isinstance(path_item, dict):
            logger.debug(f"Skipping non-path entry {route}")
            return

        for method, operation in path_item.items():
            if method.lower() not in HTTP_METHODS or not isinstance(operation, dict):
                continue

            operation_id = operation.get("operationId")
            if operation_id:
                command_name = self._command_from_operation_id(operation_id)
            else:
                operation_id = f"{method.upper()} {route}"
                command_name = self._command_from_route(method, route)

            if operation_id in catalog.path_details:
                logger.warning(f"Duplicate operation {operation_id} in {route}")
                continue

            catalog.path_details[operation_id] = {
                "command_name": command_name,
                "route": route,
                "method": method.lower(),
                "description": operation.get("description") or operation.get("summary"),
                "parameters": [
                    p.get("name")
                    for p in operation.get("parameters", [])
                    if isinstance(p, dict) and "name" in p
                ],
            }

    def collect_definition(
        self, name: str, schema: Dict[str, Any], catalog: CommandCatalog
    ) -> None:
        """Добавление определения типа в накопитель"""
        if not isinstance(schema, dict):
            return
        # Команды создаются только для объектных типов
        is_object = (
            schema.get("type") == "object"
            or "properties" in schema
            or "allOf" in schema
        )
        if not is_object:
            return

        catalog.definition_details[name] = {
            "command_name": f"New-{_pascal_case(name)}Object",
            "properties": list((schema.get("properties") or {}).keys()),
            "required": list(schema.get("required") or []),
        }

    def exported_commands(self, catalog: CommandCatalog) -> List[str]:
        """Имена команд без повторов, в порядке появления"""
        commands = []
        seen = set()
        details = list(catalog.path_details.values()) + list(
            catalog.definition_details.values()
        )
        for detail in details:
            command_name = detail["command_name"]
            if command_name not in seen:
                seen.add(command_name)
                commands.append(command_name)
        return commands

    def _command_from_operation_id(self, operation_id: str) -> str:
        # operationId вида "Noun_Verb"
        if "_" in operation_id:
            noun, verb = operation_id.rsplit("_", 1)
            mapped = OPERATION_VERBS.get(verb.lower())
            if mapped:
                return f"{mapped}-{_pascal_case(noun)}"
            return f"Invoke-{_pascal_case(noun)}{_pascal_case(verb)}"
        return f"Invoke-{_pascal_case(operation_id)}"

    def _command_from_route(self, method: str, route: str) -> str:
        segments = [
            s for s in route.strip("/").split("/") if s and not s.startswith("{")
        ]
        noun = "".join(_pascal_case(s) for s in segments) or "Root"
        return f"{METHOD_VERBS.get(method.lower(), 'Invoke')}-{noun}"


def check_namespace(namespace: Any) -> None:
    """Пространство имен попадает в пути сборок и в код модуля"""
    if not isinstance(namespace, str) or not NAMESPACE_PATTERN.fullmatch(namespace):
        raise ConfigurationError("invalid_namespace", namespace=namespace)


def _pascal_case(value: str) -> str:
    """
    Examples:
        >>> _pascal_case("pet_store")
        'PetStore'
        >>> _pascal_case("Pet.Tag")
        'PetTag'
    """
    words = re.split(r"[^0-9A-Za-z]+", value)
    return "".join(w[:1].upper() + w[1:] for w in words if w)
