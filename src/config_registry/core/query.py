# src/config_registry/core/query.py
"""
Motor de consultas por condição sobre objetos materializados.

Uma condição é um mapa `caminho → valor de comparação`, onde o caminho
é uma sequência de segmentos separados por `.`. Um objeto satisfaz a
condição quando **todos** os pares dão match, segundo a regra:

    1. Último segmento declarado como predicado pelo tipo hospedeiro
       (`@predicate`) → o método é invocado com o valor de comparação
    2. Último segmento igual a um operador (`>`, `>=`, `<`, `<=`, `!=`,
       `contains`, `in`) → o operador é aplicado ao valor corrente
    3. Caso contrário o segmento é resolvido (chave de mapa, índice de
       sequência ou atributo); callables de zero argumentos são
       invocados, e callables de um argumento em valores externos são
       tratados como predicados quando o segmento é o último
    4. Valor `None` → match somente se o valor de comparação for `None`;
       padrões (`re.Pattern`) exigem string com `search` bem-sucedido;
       demais valores exigem igualdade estrutural

Exemplos:
    City.all({"name": "Springfield"})
    City.all({"state.name": "Illinois"})
    City.all({"population.>": 1_000_000})
    City.all({"transportation.contains": "train"})
    City.all({"name": re.compile(r"^New")})

Resultados são memoizados por conjunto de condições (independente da
ordem dos pares) dentro de uma mesma geração do registry.
"""

from __future__ import annotations

import inspect
import operator
import re
import threading
from collections.abc import Mapping, Sequence
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Optional, Tuple

from .freeze import freeze_deep
from .materialize import HostCapabilities


OPERATORS: Dict[str, Callable[[Any, Any], Any]] = {
    ">": operator.gt,
    ">=": operator.ge,
    "<": operator.lt,
    "<=": operator.le,
    "!=": operator.ne,
    "contains": operator.contains,
    "in": lambda value, container: value in container,
}

ConditionKey = FrozenSet[Tuple[str, Any]]


def _hashable(value: Any) -> Any:
    if isinstance(value, Mapping):
        return ("mapping", frozenset((str(k), _hashable(v)) for k, v in value.items()))
    if isinstance(value, (list, tuple)):
        return ("sequence", tuple(_hashable(v) for v in value))
    if isinstance(value, (set, frozenset)):
        return ("set", frozenset(_hashable(v) for v in value))
    hash(value)
    return (type(value).__name__, value)


def condition_key(conditions: Mapping) -> Optional[ConditionKey]:
    """
    Chave de cache independente da ordem dos pares.

    Retorna `None` quando algum valor de comparação não pode ser
    representado de forma hashable; nesse caso a consulta não é cacheada.
    """
    try:
        return frozenset((str(path), _hashable(value)) for path, value in conditions.items())
    except TypeError:
        return None


def _capabilities(value: Any) -> Optional[HostCapabilities]:
    caps = getattr(type(value), "__capabilities__", None)
    return caps if isinstance(caps, HostCapabilities) else None


def _required_positional(func: Callable[..., Any]) -> Optional[int]:
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return None
    return sum(
        1
        for param in signature.parameters.values()
        if param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD)
        and param.default is param.empty
    )


def _resolve_segment(current: Any, name: str, caps: Optional[HostCapabilities]) -> Any:
    if name.startswith("__"):
        return None
    if caps is None and isinstance(current, Mapping):
        return current.get(name)
    if isinstance(current, Sequence) and not isinstance(current, (str, bytes)) and name.isdigit():
        index = int(name)
        return current[index] if index < len(current) else None
    return getattr(current, name, None)


def _matches(
    current: Any,
    segments: List[str],
    match_value: Any,
    frozen_match: Any,
) -> bool:
    name, rest = segments[0], segments[1:]
    last = not rest
    caps = _capabilities(current)

    if last and caps is not None and caps.is_predicate(name):
        return bool(getattr(current, name)(match_value))

    if last and name in OPERATORS and current is not None:
        try:
            return bool(OPERATORS[name](current, match_value))
        except TypeError:
            return False

    value = _resolve_segment(current, name, caps)

    if callable(value) and not isinstance(value, type):
        arity = _required_positional(value)
        if last and caps is None and arity in (1, None):
            return bool(value(match_value))
        if arity in (0, None):
            value = value()

    if value is None:
        return match_value is None

    if rest:
        return _matches(value, rest, match_value, frozen_match)

    if isinstance(match_value, re.Pattern):
        return isinstance(value, str) and match_value.search(value) is not None

    return value == frozen_match


def object_matches(obj: Any, path: Any, match_value: Any) -> bool:
    """Verifica se `obj` satisfaz um único par (caminho, valor)."""
    segments = str(path).split(".")
    return _matches(obj, segments, match_value, freeze_deep(match_value))


def select(objects: Iterable[Any], conditions: Mapping) -> List[Any]:
    """Filtra `objects` (na ordem recebida) pelos objetos que satisfazem todas as condições."""
    prepared = [
        (str(path).split("."), value, freeze_deep(value))
        for path, value in conditions.items()
    ]
    return [
        obj
        for obj in objects
        if all(_matches(obj, segments, value, frozen) for segments, value, frozen in prepared)
    ]


class QueryCache:
    """
    Cache de consultas de uma geração do registry.

    Armazena, por conjunto de condições, a tupla ordenada de identificadores
    que deram match. Cada `lookup` devolve uma lista nova, de modo que o
    chamador não consegue corromper o cache.
    """

    def __init__(self, objects: Mapping[str, Any]) -> None:
        self._objects = objects
        self._entries: Dict[ConditionKey, Tuple[str, ...]] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(self, conditions: Mapping) -> List[Any]:
        key = condition_key(conditions)
        if key is None:
            return select(self._objects.values(), conditions)

        with self._lock:
            ids = self._entries.get(key)
            if ids is None:
                ids = tuple(obj.id for obj in select(self._objects.values(), conditions))
                self._entries[key] = ids

        return [self._objects[identifier] for identifier in ids]
