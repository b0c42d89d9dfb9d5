# src/config_registry/core/freeze.py
"""
Congelamento profundo de valores de configuração.

Este módulo implementa `freeze_deep`, utilitário que duplica e torna
imutável qualquer valor atribuído a um objeto de configuração, de modo
que consumidores não consigam alterar acidentalmente o estado
compartilhado (nem o valor original fornecido pelo chamador).

Política de congelamento (v1):
    - Mapping          → `MappingProxyType` sobre um novo dict congelado
    - Sequence         → tuple com elementos congelados (list, deque, UserList)
    - set / frozenset  → frozenset com elementos congelados
    - bytearray        → bytes
    - escalar imutável → retornado como está
    - objeto opaco     → cópia via `copy.deepcopy`; se a cópia falhar,
                         o valor original é retornado (fail-open)

Invariantes:
    - `freeze_deep(freeze_deep(x)) == freeze_deep(x)`
    - O valor retornado é comportamentalmente igual ao original
    - O input nunca é mutado

Limites explícitos:
    - Não congela atributos internos de objetos arbitrários
    - Objetos que não podem ser copiados permanecem mutáveis
      (política permissiva documentada em DESIGN.md)
"""

from __future__ import annotations

import copy
import dataclasses
import re
from collections.abc import Mapping, Sequence, Set
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from pathlib import PurePath
from types import MappingProxyType
from typing import Any

from .log import get_logger


logger = get_logger("freeze")

_IMMUTABLE_SCALARS = (
    type(None),
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    Decimal,
    Fraction,
    date,
    datetime,
    time,
    timedelta,
    Enum,
    re.Pattern,
    PurePath,
    range,
)


def _is_frozen_dataclass(value: Any) -> bool:
    if not dataclasses.is_dataclass(value) or isinstance(value, type):
        return False
    return type(value).__dataclass_params__.frozen


def freeze_deep(value: Any) -> Any:
    """
    Retorna uma cópia profundamente imutável de `value`.

    Args:
        value (Any): Valor arbitrário vindo de uma fonte ou de `configure`.

    Returns:
        Any: Valor equivalente, com todos os containers alcançáveis
        duplicados e imutáveis.
    """
    if isinstance(value, _IMMUTABLE_SCALARS):
        return value

    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze_deep(item) for key, item in value.items()})

    if isinstance(value, tuple) and hasattr(value, "_fields"):
        return type(value)(*(freeze_deep(item) for item in value))

    if isinstance(value, bytearray):
        return bytes(value)

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return tuple(freeze_deep(item) for item in value)

    if isinstance(value, Set):
        return frozenset(freeze_deep(item) for item in value)

    if _is_frozen_dataclass(value):
        return value

    try:
        return copy.deepcopy(value)
    except Exception as exc:  # noqa: BLE001 - fail-open para objetos opacos
        logger.debug("freeze.fail_open", value_type=type(value).__name__, error=str(exc))
        return value
