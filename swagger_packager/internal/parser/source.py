"""Получение файла спецификации: локальный путь или удаленный URI"""

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

import httpx

from ..types.errors import FetchError, NotFoundError
from ..types.models import GenerationRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RewriteRule:
    """Замена хоста веб-интерфейса на хост с сырым содержимым"""

    host: str
    replacement: str

    def matches(self, host: str) -> bool:
        return host.lower() == self.host.lower()


DEFAULT_REWRITE_RULES = (
    RewriteRule(host="github.com", replacement="raw.githubusercontent.com"),
    RewriteRule(host="www.github.com", replacement="raw.githubusercontent.com"),
)


def rewrite_uri(uri: str, rules: Sequence[RewriteRule] = DEFAULT_REWRITE_RULES) -> str:
    """
    Переписывает URI по первому подходящему правилу, путь не меняется.

    Examples:
        >>> rewrite_uri("https://github.com/org/repo/blob/main/spec.json")
        'https://raw.githubusercontent.com/org/repo/blob/main/spec.json'
    """
    try:
        url = httpx.URL(uri)
    except httpx.InvalidURL:
        return uri

    for rule in rules:
        if rule.matches(url.host):
            # Порт и учетные данные сохраняются
            return str(url.copy_with(host=rule.replacement))
    return uri


@dataclass
class AcquiredSpec:
    """Локальный путь к спецификации; temporary=True для скачанного файла"""

    path: Path
    temporary: bool = False

    def cleanup(self) -> None:
        if self.temporary and self.path.exists():
            self.path.unlink()


class SpecAcquirer:
    """Разрешает источник спецификации в локальный файл"""

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        rewrite_rules: Sequence[RewriteRule] = DEFAULT_REWRITE_RULES,
    ):
        self.client = client
        self.rewrite_rules = tuple(rewrite_rules)

    def acquire(self, request: GenerationRequest) -> AcquiredSpec:
        if request.spec_uri:
            spec = self.download(request.spec_uri)
        else:
            spec = AcquiredSpec(path=Path(request.spec_path))

        try:
            if not spec.path.is_file():
                raise NotFoundError("spec_not_found", path=spec.path)
            if not Path(request.output_directory).is_dir():
                raise NotFoundError("output_not_found", path=request.output_directory)
        except NotFoundError:
            spec.cleanup()
            raise

        return spec

    def download(self, uri: str) -> AcquiredSpec:
        """Скачивание спецификации во временный .json файл"""
        target_uri = rewrite_uri(uri, self.rewrite_rules)
        if target_uri != uri:
            logger.info(f"Rewrote {uri} to {target_uri}")

        fd, temp_name = tempfile.mkstemp(suffix=".json")
        os.close(fd)
        temp_path = Path(temp_name)

        try:
            content = self._fetch(target_uri)
            temp_path.write_bytes(content)
        except (httpx.HTTPError, httpx.InvalidURL, OSError) as exc:
            temp_path.unlink(missing_ok=True)
            raise FetchError("fetch_failed", uri=target_uri, reason=exc) from exc

        logger.debug(f"Downloaded {target_uri} to {temp_path}")
        return AcquiredSpec(path=temp_path, temporary=True)

    def _fetch(self, uri: str) -> bytes:
        if self.client is not None:
            response = self.client.get(uri)
        else:
            with httpx.Client(follow_redirects=True) as client:
                response = client.get(uri)
        response.raise_for_status()
        return response.content
