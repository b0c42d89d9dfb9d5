# src/config_registry/core/registry.py
"""
Registry por tipo de objetos de configuração.

Este módulo define o `Registry`, o contêiner explícito de estado de um
tipo hospedeiro: fontes declaradas, overrides inline, defaults, o
conjunto materializado de objetos e o cache de consultas.

Ciclo de vida:
    - O registry nasce vazio
    - O conjunto materializado é construído sob demanda no primeiro acesso
    - Qualquer mutação (`configure`, `set_defaults`, atribuição de
      `sources`, `clear`) ou `reload()` explícito invalida o conjunto e
      notifica os observers
    - Objetos são recriados a cada rematerialização; quem guarda
      instâncias antigas continua com dados congelados e consistentes

Decisões arquiteturais:
    - Objetos materializados e cache de consultas vivem juntos em uma
      única `_Generation`, trocada atomicamente: nunca existe cache
      referenciando um conjunto obsoleto
    - Mutações e o rebuild são seções críticas protegidas por um
      `RLock` por registry; leituras de uma geração já construída não
      bloqueiam
    - Observers são notificados de forma síncrona, na ordem de registro,
      imediatamente após a invalidação e antes de qualquer rebuild
    - Falhas de rebuild não publicam resultado parcial; o próximo acesso
      tenta novamente

Invariantes:
    - A ordem de `all()` e `ids()` é a ordem de resolução (fontes, depois overrides)
    - `ids() == [obj.id for obj in all()]`
    - Listas retornadas são sempre cópias novas

Limites explícitos:
    - Não observa o filesystem (reload é sempre explícito)
    - Mutações in-place em `sources` não invalidam automaticamente
"""

from __future__ import annotations

import inspect
import os
import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, List, Optional, Type, Union

from ..sources.provider import SourceProvider
from ..sources.yaml_provider import YamlSourceProvider
from .errors import ConfigError
from .hashing import compute_config_hash
from .log import get_logger
from .materialize import materialize
from .merge import (
    DEFAULTS_ID,
    INLINE_SOURCE,
    merge_attributes,
    require_mapping,
    resolve,
    stringify_keys,
)
from .query import QueryCache


Callback = Union[Callable[..., Any], str, None]


@dataclass(frozen=True)
class _Generation:
    objects: Dict[str, Any]
    queries: QueryCache
    fingerprint: str


@dataclass(frozen=True)
class _Observer:
    callback: Callable[..., Any]
    passes_registry: bool = field(default=False)


def _accepts_registry(callback: Callable[..., Any]) -> bool:
    try:
        signature = inspect.signature(callback)
    except (TypeError, ValueError):
        return False
    required = [
        param
        for param in signature.parameters.values()
        if param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD)
        and param.default is param.empty
    ]
    return len(required) == 1


def _resolve_callback(subject: Any, callback: Callback) -> _Observer:
    if callback is None:
        callback = subject
    elif isinstance(callback, str):
        callback = getattr(subject, callback)

    if not callable(callback):
        raise TypeError(f"Observer callback deve ser callable, recebido: {type(callback).__name__}")

    return _Observer(callback=callback, passes_registry=_accepts_registry(callback))


def _normalize_locations(locations: Any) -> List[Any]:
    if locations is None:
        return []
    if isinstance(locations, (str, os.PathLike)):
        locations = [locations]

    normalized: List[Any] = []
    for location in locations:
        if isinstance(location, (list, tuple)):
            normalized.extend(_normalize_locations(location))
        else:
            normalized.append(location)
    return normalized


class Registry:
    """
    Contêiner de estado de configuração de um único tipo hospedeiro.

    Normalmente criado automaticamente para cada subclasse de
    `ConfigObject`, mas pode ser instanciado diretamente para qualquer
    tipo construível a partir de um mapa de atributos.

    Args:
        host_type: Tipo materializado para cada identificador.
        provider: SourceProvider usado para resolver as fontes declaradas
            (default: `YamlSourceProvider`).
    """

    def __init__(self, host_type: Type[Any], provider: Optional[SourceProvider] = None) -> None:
        self.host_type = host_type
        self.provider: SourceProvider = provider if provider is not None else YamlSourceProvider()
        self.logger = get_logger("registry", host_type=host_type.__name__)

        self._lock = threading.RLock()
        self._sources: List[Any] = []
        self._inline: Dict[str, Dict[str, Any]] = {}
        self._defaults: Dict[str, Any] = {}
        self._observers: Dict[Any, _Observer] = {}
        self._generation: Optional[_Generation] = None
        self._builds = 0

    def __repr__(self) -> str:
        return f"Registry({self.host_type.__name__}, sources={len(self._sources)})"

    # -----------------------------
    # Fontes, overrides e defaults
    # -----------------------------

    @property
    def sources(self) -> List[Any]:
        """Lista viva de fontes. Alterações in-place exigem `reload()` explícito."""
        return self._sources

    @sources.setter
    def sources(self, locations: Any) -> None:
        with self._lock:
            self._sources = _normalize_locations(locations)
            self._invalidate("sources")
        self._notify_observers()

    @property
    def defaults(self) -> Mapping[str, Any]:
        """Defaults explícitos acumulados via `set_defaults` (somente leitura)."""
        return MappingProxyType(dict(self._defaults))

    def configure(self, config_options: Mapping) -> None:
        """
        Mescla overrides inline (identificador → atributos) ao estado existente.

        Chamadas sucessivas são cumulativas, com merge raso por identificador.
        O identificador reservado `"defaults"` é encaminhado aos defaults.

        Raises:
            ConfigFormatError: Se o argumento ou algum valor não for um mapa.
        """
        require_mapping("configure", config_options, INLINE_SOURCE)
        updates = [
            (str(identifier), stringify_keys(require_mapping(identifier, values, INLINE_SOURCE)))
            for identifier, values in config_options.items()
        ]

        with self._lock:
            for identifier, values in updates:
                if identifier == DEFAULTS_ID:
                    self._defaults = merge_attributes(self._defaults, values)
                else:
                    self._inline[identifier] = merge_attributes(self._inline.get(identifier, {}), values)
            self._invalidate("configure")
        self._notify_observers()

    def set_defaults(self, values: Mapping) -> None:
        """Mescla (raso) `values` aos defaults explícitos; chamadas são cumulativas."""
        values = stringify_keys(require_mapping(DEFAULTS_ID, values, INLINE_SOURCE))
        with self._lock:
            self._defaults = merge_attributes(self._defaults, values)
            self._invalidate("set_defaults")
        self._notify_observers()

    def reload(self) -> None:
        """Invalida objetos e cache de consultas e notifica os observers. O rebuild é lazy."""
        with self._lock:
            self._invalidate("reload")
        self._notify_observers()

    def clear(self) -> None:
        """Remove fontes, overrides e defaults, e então recarrega."""
        with self._lock:
            self._sources = []
            self._inline = {}
            self._defaults = {}
            self._invalidate("clear")
        self._notify_observers()

    # -----------------------------
    # Consultas
    # -----------------------------

    def find(self, identifier_or_conditions: Any) -> Optional[Any]:
        """
        Localiza um objeto por identificador ou pelo primeiro match de um mapa de condições.

        Identificadores são sempre comparados como string, então
        `find("production")` e `find(Env.production)` (cujo `str` seja
        `"production"`) são equivalentes.
        """
        if isinstance(identifier_or_conditions, Mapping):
            matches = self.all(identifier_or_conditions)
            return matches[0] if matches else None
        return self._current().objects.get(str(identifier_or_conditions))

    def all(self, conditions: Optional[Mapping] = None) -> List[Any]:
        """Retorna todos os objetos (ou os que satisfazem `conditions`) em ordem de resolução."""
        generation = self._current()
        if not conditions:
            return list(generation.objects.values())
        if not isinstance(conditions, Mapping):
            raise TypeError(f"conditions deve ser um mapa, recebido: {type(conditions).__name__}")
        return generation.queries.lookup(conditions)

    def ids(self) -> List[str]:
        return list(self._current().objects.keys())

    def fingerprint(self) -> str:
        """Hash SHA-256 dos atributos resolvidos da geração corrente."""
        return self._current().fingerprint

    def __getitem__(self, identifier_or_conditions: Any) -> Optional[Any]:
        return self.find(identifier_or_conditions)

    def __contains__(self, identifier: Any) -> bool:
        return str(identifier) in self._current().objects

    def __len__(self) -> int:
        return len(self._current().objects)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.all())

    # -----------------------------
    # Observers
    # -----------------------------

    def add_observer(self, subject: Any, callback: Callback = None) -> Any:
        """
        Registra `subject` para ser notificado a cada reload.

        `callback` pode ser um callable, o nome de um método de `subject`
        ou omitido quando o próprio `subject` é callable. Callbacks com
        exatamente um parâmetro posicional obrigatório recebem o registry.
        Registrar o mesmo `subject` novamente substitui o callback.
        """
        observer = _resolve_callback(subject, callback)
        with self._lock:
            self._observers[subject] = observer
        return subject

    def remove_observer(self, subject: Any) -> Any:
        with self._lock:
            self._observers.pop(subject, None)
        return subject

    # -----------------------------
    # Internos
    # -----------------------------

    def _invalidate(self, reason: str) -> None:
        self._generation = None
        self.logger.debug("registry.invalidated", reason=reason)

    def _notify_observers(self) -> None:
        with self._lock:
            observers = list(self._observers.values())
        for observer in observers:
            if observer.passes_registry:
                observer.callback(self)
            else:
                observer.callback()

    def _current(self) -> _Generation:
        generation = self._generation
        if generation is not None:
            return generation

        with self._lock:
            if self._generation is None:
                self._generation = self._build()
            return self._generation

    def _build(self) -> _Generation:
        try:
            trees = [(location, self.provider.load(location)) for location in list(self._sources)]
            resolution = resolve(trees, self._inline, self._defaults)
            objects = {
                identifier: materialize(self.host_type, attributes)
                for identifier, attributes in resolution.attributes.items()
            }
        except ConfigError as exc:
            self.logger.error("registry.materialize_failed", **exc.to_dict())
            raise

        self._builds += 1
        fingerprint = compute_config_hash(resolution.attributes)
        self.logger.debug(
            "registry.materialized",
            generation=self._builds,
            objects=len(objects),
            fingerprint=fingerprint,
        )
        return _Generation(
            objects=objects,
            queries=QueryCache(objects),
            fingerprint=fingerprint,
        )
