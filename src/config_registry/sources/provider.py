# src/config_registry/sources/provider.py
"""
Contrato de provedores de fontes de configuração.

Um SourceProvider converte uma localização declarada em um registry
(arquivo, diretório ou qualquer identificador de fonte) em uma árvore
aninhada identificador → mapa de atributos, consumida pelo merge.
"""

from __future__ import annotations

from typing import Any, Dict, Protocol, runtime_checkable


@runtime_checkable
class SourceProvider(Protocol):
    """
    Contrato canônico de um provedor de fontes.

    Decisões arquiteturais:
        - Localizações inexistentes ou vazias resolvem para `{}`
        - Expansão de templates, quando existir, ocorre antes do parse
          e não é visível ao registry
        - O protocolo não impõe herança, apenas conformidade estrutural

    Invariantes:
        - O retorno é sempre um mapa (possivelmente vazio)
        - Conteúdo estruturalmente inválido gera `ConfigFormatError`

    Limites explícitos:
        - Não realiza merge entre fontes
        - Não mantém cache entre chamadas (cada rebuild relê as fontes)
    """

    def load(self, location: Any) -> Dict[str, Any]:
        """Carrega a árvore identificador → atributos da localização informada."""
        ...
