# src/config_registry/sources/__init__.py
"""
Provedores de fontes de configuração.

    - provider       → contrato `SourceProvider` consumido pelo registry
    - yaml_provider  → implementação padrão para arquivos YAML/JSON e diretórios
"""

from .provider import SourceProvider
from .yaml_provider import YamlSourceProvider, expand_environment

__all__ = ["SourceProvider", "YamlSourceProvider", "expand_environment"]
