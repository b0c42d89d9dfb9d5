# src/config_registry/core/merge.py
"""
Resolução de merge entre múltiplas fontes de atributos.

Este módulo implementa a política oficial utilizada pelo registry para
combinar N árvores identificador → atributos (uma por fonte declarada),
os overrides inline fornecidos via `configure` e os defaults explícitos
em um único mapa resolvido por identificador.

Política de merge (v1):
    - Ordem de aplicação: fontes declaradas (na ordem de declaração),
      depois overrides inline, depois defaults explícitos
    - Por identificador, o merge é **raso**: chaves novas sobrescrevem
      chaves homônimas; chaves ausentes são preservadas; sub-mapas são
      substituídos por inteiro
    - O identificador reservado `"defaults"` alimenta o acumulador de
      defaults em vez de gerar um objeto
    - Mapa final = defaults ⊕ atributos do identificador ⊕ {"id": identificador}

Invariantes:
    - Nenhum input é mutado
    - A ordem de inserção dos identificadores é preservada
    - O `id` sintético sempre vence qualquer `id` fornecido pelo usuário
    - Valores não-mapa para um identificador interrompem a resolução

Limites explícitos:
    - Não lê arquivos (responsabilidade do SourceProvider)
    - Não congela valores (responsabilidade do materializador)
    - Não realiza merge profundo
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Tuple

from .errors import ConfigFormatError


DEFAULTS_ID = "defaults"
ID_ATTRIBUTE = "id"
INLINE_SOURCE = "<configure>"


@dataclass(frozen=True)
class Resolution:
    """Resultado da resolução: atributos finais por identificador + defaults efetivos."""

    attributes: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    defaults: Dict[str, Any] = field(default_factory=dict)


def stringify_keys(values: Mapping) -> Dict[str, Any]:
    """Normaliza as chaves de primeiro nível para `str` (merge raso)."""
    return {str(key): value for key, value in values.items()}


def merge_attributes(base: Mapping, new: Mapping) -> Dict[str, Any]:
    """Merge raso: `new` sobrescreve `base` chave a chave. Retorna um novo dict."""
    result = dict(base)
    result.update(new)
    return result


def require_mapping(identifier: Any, values: Any, source: Any = None) -> Mapping:
    if not isinstance(values, Mapping):
        raise ConfigFormatError(
            f"Valores definidos para '{identifier}' devem ser um mapa, "
            f"recebido: {type(values).__name__}",
            identifier=str(identifier),
            source=source,
        )
    return values


def _accumulate(
    accumulated: Dict[str, Dict[str, Any]],
    defaults: Dict[str, Any],
    identifier: Any,
    values: Any,
    source: Any,
) -> None:
    identifier = str(identifier)
    values = stringify_keys(require_mapping(identifier, values, source))

    if identifier == DEFAULTS_ID:
        defaults.update(values)
        return

    existing = accumulated.get(identifier)
    accumulated[identifier] = merge_attributes(existing, values) if existing else values


def resolve(
    source_trees: Iterable[Tuple[Any, Any]],
    inline_overrides: Mapping,
    explicit_defaults: Mapping,
) -> Resolution:
    """
    Resolve o mapa final de atributos por identificador.

    Args:
        source_trees: Pares `(fonte, árvore)` na ordem de declaração, onde
            cada árvore mapeia identificador → mapa de atributos.
        inline_overrides: Estado acumulado de `configure` (identificador → atributos).
        explicit_defaults: Defaults acumulados de `set_defaults`.

    Returns:
        Resolution: Atributos finais (com defaults e `id`) e defaults efetivos.

    Raises:
        ConfigFormatError: Se uma árvore ou um valor por identificador não for um mapa.
    """
    accumulated: Dict[str, Dict[str, Any]] = {}
    defaults: Dict[str, Any] = {}

    for source, tree in source_trees:
        if tree is None:
            continue
        if not isinstance(tree, Mapping):
            raise ConfigFormatError(
                f"Fonte deve produzir um mapa identificador → atributos, "
                f"recebido: {type(tree).__name__}",
                source=source,
            )
        for identifier, values in tree.items():
            _accumulate(accumulated, defaults, identifier, values, source)

    for identifier, values in inline_overrides.items():
        _accumulate(accumulated, defaults, identifier, values, INLINE_SOURCE)

    defaults.update(stringify_keys(explicit_defaults))

    attributes = {
        identifier: {**defaults, **values, ID_ATTRIBUTE: identifier}
        for identifier, values in accumulated.items()
    }
    return Resolution(attributes=attributes, defaults=dict(defaults))
