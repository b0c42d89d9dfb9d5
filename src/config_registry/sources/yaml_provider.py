# src/config_registry/sources/yaml_provider.py
"""
Provedor de fontes baseado em arquivos YAML/JSON.

Este módulo implementa o `YamlSourceProvider`, o SourceProvider padrão
dos registries, responsável por ler arquivos de configuração e
hierarquias de diretórios.

Formatos suportados (v1):
    - YAML (.yaml, .yml)
    - JSON (.json)

Política de carregamento:
    - Arquivo inexistente            → `{}`
    - Arquivo vazio ou só espaços    → `{}`
    - Extensão não suportada         → `{}` (ignorado em diretórios)
    - Diretório                      → cada filho é carregado recursivamente,
                                       usando o nome base sem extensão como chave
    - Root que não é mapa            → `ConfigFormatError`
    - Conteúdo sintaticamente inválido → `ConfigFormatError`

Um `renderer` opcional (`str -> str`) é aplicado ao texto do arquivo
antes do parse, permitindo expansão de templates.

Limites explícitos:
    - Não observa alterações no filesystem
    - Não realiza merge entre arquivos (responsabilidade do registry)
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import yaml  # PyYAML

from ..core.errors import ConfigFormatError
from ..core.log import get_logger


SUPPORTED_SUFFIXES = {".yaml", ".yml", ".json"}

Renderer = Callable[[str], str]


def expand_environment(text: str) -> str:
    """Renderer que expande `$VAR` / `${VAR}` a partir das variáveis de ambiente."""
    return os.path.expandvars(text)


class YamlSourceProvider:
    """
    SourceProvider para arquivos YAML/JSON e diretórios de arquivos.

    Args:
        renderer: Função opcional aplicada ao texto antes do parse.
        encoding: Codificação usada na leitura dos arquivos.
    """

    def __init__(self, renderer: Optional[Renderer] = None, encoding: str = "utf-8") -> None:
        self.renderer = renderer
        self.encoding = encoding
        self.logger = get_logger("sources.yaml")

    def load(self, location: Any) -> Dict[str, Any]:
        path = Path(location)

        if not path.exists():
            self.logger.debug("sources.missing", path=str(path))
            return {}

        if path.is_dir():
            return self._load_directory(path)

        if path.suffix.lower() not in SUPPORTED_SUFFIXES:
            return {}

        return self._load_file(path)

    def _load_directory(self, path: Path) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        for child in sorted(path.iterdir()):
            if child.name.startswith("."):
                continue
            if child.is_dir():
                values[child.name] = self._load_directory(child)
            elif child.suffix.lower() in SUPPORTED_SUFFIXES:
                values[child.stem] = self._load_file(child)
        return values

    def _load_file(self, path: Path) -> Dict[str, Any]:
        try:
            text = path.read_text(encoding=self.encoding)
        except UnicodeDecodeError as exc:
            raise ConfigFormatError(
                f"Arquivo {path} não pode ser decodificado como {self.encoding}: {exc}",
                source=str(path),
            ) from exc
        if not text.strip():
            return {}

        if self.renderer is not None:
            text = self.renderer(text)

        try:
            if path.suffix.lower() == ".json":
                data = json.loads(text)
            else:
                data = yaml.safe_load(text)
        except (yaml.YAMLError, json.JSONDecodeError) as exc:
            raise ConfigFormatError(
                f"Conteúdo inválido em {path}: {exc}",
                source=str(path),
            ) from exc

        if data is None:
            data = {}

        if not isinstance(data, dict):
            raise ConfigFormatError(
                f"Config root deve ser dict, recebido: {type(data).__name__}",
                source=str(path),
            )

        self.logger.debug("sources.loaded", path=str(path), entries=len(data))
        return data
