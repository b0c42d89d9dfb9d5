# src/config_registry/core/object.py
"""
Tipo base de objetos de configuração.

Subclasses de `ConfigObject` recebem, no momento da declaração, um
`Registry` próprio e isolado (nenhum estado é compartilhado com a
classe pai ou com outros tipos) e as capacidades calculadas do tipo
(`HostCapabilities`).

A API de registry fica exposta na própria classe, via metaclasse, de
modo que não colide com atributos de configuração das instâncias:

    class City(ConfigObject):
        @property
        def population(self):
            return self._population

        @population.setter
        def population(self, value):
            self._population = int(value)

    City.sources = ["config/cities.yml"]
    City.find("springfield").population
    City.all({"state.name": "Illinois"})
    City["springfield"]

Instâncias expõem `id` (somente leitura), propriedades declaradas e,
via acesso a atributo, os valores brutos sem setter correspondente.

Um tipo pode declarar `__source_provider__` para trocar o provedor de fontes;
a declaração é herdada por subclasses, cada uma com seu próprio registry.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, List, Mapping, Optional

from .materialize import ID_SLOT, RAW_SLOT, assign_attributes, capabilities_for
from .registry import Callback, Registry


class ConfigObjectMeta(type):
    """Metaclasse que associa um Registry a cada tipo e delega a API de classe a ele."""

    def __init__(cls, name, bases, namespace, **kwargs):
        super().__init__(name, bases, namespace, **kwargs)
        cls.__capabilities__ = capabilities_for(cls)
        if bases:
            cls._registry = Registry(cls, provider=getattr(cls, "__source_provider__", None))

    @property
    def registry(cls) -> Registry:
        try:
            return cls.__dict__["_registry"]
        except KeyError:
            raise TypeError(f"{cls.__name__} não possui registry (classe base abstrata)") from None

    @property
    def sources(cls) -> List[Any]:
        return cls.registry.sources

    @sources.setter
    def sources(cls, locations: Any) -> None:
        cls.registry.sources = locations

    def configure(cls, config_options: Mapping) -> None:
        cls.registry.configure(config_options)

    def set_defaults(cls, values: Mapping) -> None:
        cls.registry.set_defaults(values)

    def reload(cls) -> None:
        cls.registry.reload()

    def clear(cls) -> None:
        cls.registry.clear()

    def find(cls, identifier_or_conditions: Any) -> Optional[Any]:
        return cls.registry.find(identifier_or_conditions)

    def all(cls, conditions: Optional[Mapping] = None) -> List[Any]:
        return cls.registry.all(conditions)

    def ids(cls) -> List[str]:
        return cls.registry.ids()

    def add_observer(cls, subject: Any, callback: Callback = None) -> Any:
        return cls.registry.add_observer(subject, callback)

    def remove_observer(cls, subject: Any) -> Any:
        return cls.registry.remove_observer(subject)

    def __getitem__(cls, identifier_or_conditions: Any) -> Optional[Any]:
        return cls.registry.find(identifier_or_conditions)


class ConfigObject(metaclass=ConfigObjectMeta):
    """
    Objeto de configuração imutável identificado por `id`.

    O construtor recebe o mapa de atributos resolvido e atribui cada
    valor, já congelado, ao setter homônimo ou ao armazenamento bruto.
    """

    def __init__(self, attributes: Mapping[str, Any]) -> None:
        self.__dict__[ID_SLOT] = None
        self.__dict__[RAW_SLOT] = {}
        assign_attributes(self, attributes, type(self).__capabilities__)

    @property
    def id(self) -> Optional[str]:
        return self.__dict__[ID_SLOT]

    def raw_attributes(self) -> Mapping[str, Any]:
        """Atributos sem setter correspondente (somente leitura)."""
        return MappingProxyType(self.__dict__[RAW_SLOT])

    def __getattr__(self, name: str) -> Any:
        raw = self.__dict__.get(RAW_SLOT)
        if raw is not None and name in raw:
            return raw[name]
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r}>"
