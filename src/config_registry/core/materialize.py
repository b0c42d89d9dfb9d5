# src/config_registry/core/materialize.py
"""
Materialização de objetos de configuração a partir de atributos resolvidos.

Este módulo transforma um mapa de atributos já resolvido (saída de
`merge.resolve`) em uma instância do tipo hospedeiro, roteando cada
valor para o setter correspondente ou para o armazenamento bruto do
objeto.

O roteamento é baseado em capacidades declaradas e calculadas uma única
vez por tipo (`HostCapabilities`), em vez de introspecção a cada
atribuição:
    - `settable`   → propriedades com setter (percorrendo o MRO)
    - `predicates` → métodos marcados com `@predicate` ou listados em
                     `__predicates__`, usados pelo motor de consultas

Decisões arquiteturais:
    - Todo valor é congelado (`freeze_deep`) antes da atribuição
    - `id` é sempre gravado no slot dedicado, independentemente de setters
    - Falhas de setter abortam a materialização com `AttributeAssignmentError`

Limites explícitos:
    - Não resolve merge nem defaults
    - Não armazena objetos em cache
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, FrozenSet, Mapping, Type, TypeVar

from .errors import AttributeAssignmentError
from .freeze import freeze_deep
from .merge import ID_ATTRIBUTE


PREDICATE_MARKER = "__config_predicate__"
RAW_SLOT = "_raw_attributes"
ID_SLOT = "_id"

F = TypeVar("F", bound=Callable[..., Any])


def predicate(func: F) -> F:
    """
    Marca um método de argumento único como predicado consultável.

    Quando o nome do método aparece como último segmento de um caminho
    de condição, o motor de consultas o invoca com o valor de comparação
    e considera qualquer resultado truthy como match.

    Exemplo:
        class City(ConfigObject):
            @predicate
            def larger_than(self, population):
                return self.population > population

        City.all({"larger_than": 1_000_000})
    """
    setattr(func, PREDICATE_MARKER, True)
    return func


@dataclass(frozen=True)
class HostCapabilities:
    """Capacidades de um tipo hospedeiro, calculadas no registro do tipo."""

    host_type: Type[Any]
    settable: FrozenSet[str]
    predicates: FrozenSet[str]

    def is_settable(self, name: str) -> bool:
        return name in self.settable

    def is_predicate(self, name: str) -> bool:
        return name in self.predicates


def capabilities_for(host_type: Type[Any]) -> HostCapabilities:
    settable = set()
    predicates = set(getattr(host_type, "__predicates__", ()))
    seen = set()

    for klass in host_type.__mro__:
        for name, member in vars(klass).items():
            if name in seen:
                continue
            seen.add(name)
            if isinstance(member, property):
                if member.fset is not None:
                    settable.add(name)
            elif getattr(member, PREDICATE_MARKER, False):
                predicates.add(name)

    settable.discard(ID_ATTRIBUTE)
    return HostCapabilities(
        host_type=host_type,
        settable=frozenset(settable),
        predicates=frozenset(predicates),
    )


def assign_attributes(
    instance: Any,
    attributes: Mapping[str, Any],
    capabilities: HostCapabilities,
) -> None:
    """
    Atribui cada par (nome, valor) à instância, congelando o valor antes.

    Raises:
        AttributeAssignmentError: Se um setter rejeitar o valor.
    """
    raw = instance.__dict__.setdefault(RAW_SLOT, {})
    identifier = attributes.get(ID_ATTRIBUTE)

    for name, value in attributes.items():
        name = str(name)
        value = freeze_deep(value)

        if name == ID_ATTRIBUTE:
            instance.__dict__[ID_SLOT] = None if value is None else str(value)
        elif capabilities.is_settable(name):
            try:
                setattr(instance, name, value)
            except AttributeAssignmentError as exc:
                if exc.identifier is None and identifier is not None:
                    exc.identifier = str(identifier)
                    exc.details["identifier"] = str(identifier)
                raise
            except (TypeError, ValueError) as exc:
                raise AttributeAssignmentError(
                    f"Valor inválido para o atributo '{name}' de '{identifier}': {exc}",
                    identifier=None if identifier is None else str(identifier),
                    attribute=name,
                ) from exc
        else:
            raw[name] = value


def materialize(host_type: Type[Any], attributes: Mapping[str, Any]) -> Any:
    """Constrói uma instância de `host_type` a partir de atributos resolvidos."""
    return host_type(attributes)
