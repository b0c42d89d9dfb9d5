# src/config_registry/core/hashing.py
"""
Fingerprint canônico da configuração resolvida.

O hash representa a **identidade estrutural** do conjunto de atributos
resolvidos de um registry e é registrado em log a cada rebuild, permitindo
verificar se dois processos servem exatamente a mesma configuração.

Política de hashing (v1):
    - Serialização JSON canônica (chaves ordenadas, separadores compactos)
    - Valores não serializáveis em JSON são representados via `str`
    - Codificação UTF-8
    - Algoritmo SHA-256

Invariantes:
    - O valor gerado é sempre uma string hexadecimal de 64 caracteres
    - Configurações estruturalmente equivalentes produzem o mesmo hash
    - O hash independe da ordem original das chaves
"""

import hashlib
import json
from collections.abc import Mapping
from typing import Any, Dict


def _canonical(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(key): _canonical(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_canonical(item) for item in value]
    if isinstance(value, (set, frozenset)):
        return sorted((_canonical(item) for item in value), key=repr)
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def compute_config_hash(config: Dict[str, Any]) -> str:
    """
    Gera um hash SHA-256 determinístico de um mapa de configuração.

    Raises:
        TypeError: Se o objeto fornecido não for um dicionário.
    """
    if not isinstance(config, dict):
        raise TypeError(
            f"Config para hashing deve ser dict, recebido: {type(config).__name__}"
        )

    canonical_json = json.dumps(
        _canonical(config),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )

    return hashlib.sha256(canonical_json.encode("utf-8")).hexdigest()
