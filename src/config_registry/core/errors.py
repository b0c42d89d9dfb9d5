# src/config_registry/core/errors.py
"""
Exceções canônicas do registry de configuração.

Este módulo define a hierarquia oficial de exceções utilizadas durante
a resolução de fontes, o merge de atributos e a materialização dos
objetos de configuração.

As exceções aqui definidas representam **violações estruturais
explícitas**, e não erros genéricos de execução.

Princípios fundamentais:
    - Exceções são tipadas e semânticas
    - Erros estruturais são tratados como falhas fatais do rebuild
    - Mensagens de erro são claras e direcionadas ao usuário

Invariantes:
    - Todas as exceções do pacote herdam de `ConfigError`
    - Fontes ausentes nunca geram exceção (contribuem com um mapa vazio)
    - Lookups sem resultado retornam `None`, nunca exceção

Limites explícitos:
    - Não realiza fallback ou recovery
    - Não registra logs (responsabilidade de quem captura)

Este módulo existe para garantir clareza,
consistência e previsibilidade no tratamento de erros de configuração.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class ConfigError(Exception):
    """
    Exceção base para erros relacionados ao registry de configuração.

    Todas as exceções levantadas durante carregamento de fontes, merge
    e materialização devem herdar desta classe, permitindo captura
    genérica de erros de configuração.
    """

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = {k: v for k, v in details.items() if v is not None}

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro (para logs estruturados)."""
        return {
            "type": type(self).__name__,
            "message": self.message,
            "details": {k: str(v) for k, v in self.details.items()},
        }


class ConfigFormatError(ConfigError):
    """
    Exceção levantada quando uma fonte produz um valor que não é um mapa
    onde um mapa identificador → atributos era esperado.

    Exemplos:
        - source:  {"item_a": "texto"}         (escalar no lugar de atributos)
        - arquivo: YAML cujo root é uma lista
        - arquivo: YAML sintaticamente inválido

    Decisões arquiteturais:
        - O erro é fatal para o rebuild corrente
        - Nenhum resultado parcial é armazenado em cache
        - O próximo acesso ao registry tenta o rebuild novamente
    """

    def __init__(
        self,
        message: str,
        *,
        identifier: Optional[str] = None,
        source: Optional[Any] = None,
    ) -> None:
        super().__init__(message, identifier=identifier, source=source)
        self.identifier = identifier
        self.source = source


class AttributeAssignmentError(ConfigError):
    """
    Exceção levantada quando um setter rejeita o valor fornecido.

    Setters podem levantar esta exceção diretamente; `TypeError` e
    `ValueError` levantados por setters são encapsulados nela, com a
    exceção original preservada em `__cause__`.

    Decisões arquiteturais:
        - A falha de um único objeto aborta o rebuild inteiro
        - Nenhum conjunto parcial de objetos é publicado
    """

    def __init__(
        self,
        message: str,
        *,
        identifier: Optional[str] = None,
        attribute: Optional[str] = None,
    ) -> None:
        super().__init__(message, identifier=identifier, attribute=attribute)
        self.identifier = identifier
        self.attribute = attribute
