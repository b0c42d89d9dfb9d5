# src/config_registry/__init__.py
"""
config_registry: registry de objetos de configuração imutáveis por tipo.

Cada tipo declarado (subclasse de `ConfigObject`) possui seu próprio
registry, que materializa um conjunto de objetos identificados por `id`
a partir de fontes declaradas (arquivos YAML/JSON ou diretórios),
overrides inline e defaults em camadas, servindo-os por lookup direto
e por consultas com predicados.

Arquitetura em alto nível:
    - core.merge       → resolução de precedência entre fontes
    - core.materialize → construção de objetos com valores congelados
    - core.query       → consultas por condição com cache
    - core.registry    → ciclo de vida (lazy rebuild, reload, observers)
    - sources          → provedores de fontes (YAML/JSON, diretórios)

Limites explícitos:
    - Não busca configuração via rede
    - Não observa o filesystem (reload é sempre explícito)
    - Não define linguagem de schema nem gerencia segredos
"""

from .core.errors import AttributeAssignmentError, ConfigError, ConfigFormatError
from .core.freeze import freeze_deep
from .core.log import configure_logging
from .core.materialize import predicate
from .core.merge import DEFAULTS_ID
from .core.object import ConfigObject
from .core.registry import Registry
from .sources import SourceProvider, YamlSourceProvider, expand_environment

__all__ = [
    "AttributeAssignmentError",
    "ConfigError",
    "ConfigFormatError",
    "ConfigObject",
    "DEFAULTS_ID",
    "Registry",
    "SourceProvider",
    "YamlSourceProvider",
    "configure_logging",
    "expand_environment",
    "freeze_deep",
    "predicate",
]
