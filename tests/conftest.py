# tests/conftest.py
"""
Fixtures compartilhados para testes do config_registry.

Este módulo define fixtures reutilizáveis que fornecem:
- conteúdos YAML semelhantes ao uso real (base + overrides)
- fábricas de tipos `ConfigObject` isolados por teste
- escrita de fontes em diretórios temporários

Decisões arquiteturais:
    - Cada teste declara seus próprios tipos (registries nunca são
      compartilhados entre testes)
    - Arquivos são escritos apenas em `tmp_path`
    - Imports do pacote são realizados de forma lazy para melhorar
      a clareza de erros durante falhas

Invariantes:
    - Nenhuma fixture depende de estado global
    - Nenhuma fixture contém lógica de domínio

Este módulo existe como infraestrutura de teste e não
como validação funcional do registry.
"""

from pathlib import Path

import pytest


# =====================================================
# Conteúdos de fontes
# =====================================================

@pytest.fixture
def cities_yaml() -> str:
    """
    Fixture que fornece um arquivo base de cidades com bloco `defaults`.

    Returns:
        str: Conteúdo YAML com três identificadores e defaults.
    """
    return """\
defaults:
  country: USA
  transportation: [car]
springfield:
  name: Springfield
  population: 116250
  state:
    name: Illinois
    code: IL
new_york:
  name: New York
  population: 8336817
  transportation: [car, train, subway]
  state:
    name: New York
    code: NY
newark:
  name: Newark
  population: 311549
  state:
    name: New Jersey
    code: NJ
"""


@pytest.fixture
def cities_override_yaml() -> str:
    """
    Fixture que fornece um arquivo de overrides aplicado após `cities_yaml`.

    Returns:
        str: Conteúdo YAML sobrescrevendo chaves de `springfield` e defaults.
    """
    return """\
defaults:
  country: United States
springfield:
  population: 117000
  state:
    name: Illinois
chicago:
  name: Chicago
  population: 2746388
"""


# =====================================================
# Tipos hospedeiros
# =====================================================

@pytest.fixture
def make_config_type():
    """
    Fixture factory que declara um novo tipo `ConfigObject` por chamada.

    Cada tipo retornado possui seu próprio registry vazio, garantindo
    isolamento total entre testes.

    Returns:
        Callable[..., type]: Fábrica `make_config_type(name="Item", **namespace)`.
    """
    from config_registry import ConfigObject

    def _make(name: str = "Item", **namespace):
        return type(name, (ConfigObject,), dict(namespace))

    return _make


@pytest.fixture
def City():
    """
    Fixture que declara um tipo `City` com setter de `population` e predicado.

    Returns:
        type: Subclasse de `ConfigObject` com registry próprio.
    """
    from config_registry import ConfigObject, predicate

    class City(ConfigObject):
        @property
        def population(self):
            return self._population

        @population.setter
        def population(self, value):
            self._population = int(value)

        @predicate
        def larger_than(self, population):
            return self.population > population

        def label(self):
            return f"{self.name} ({self.state['code']})"

    return City


@pytest.fixture
def write_source(tmp_path: Path):
    """
    Fixture factory que escreve um arquivo de fonte em `tmp_path`.

    Returns:
        Callable[[str, str], Path]: `write_source("cities.yml", conteudo)`.
    """

    def _write(relative: str, content: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write
