# tests/e2e/test_registry_from_files.py
"""
Testes end-to-end do registry alimentado por arquivos.

Este módulo exercita o fluxo completo de um tipo declarado pelo usuário:
fontes YAML em camadas (base + overrides), bloco `defaults`, overrides
inline, materialização com setters e consultas com predicados,
operadores e padrões.

Os testes asseguram que:
- fontes posteriores sobrescrevem anteriores chave a chave (merge raso)
- o bloco `defaults` é aplicado a todos os identificadores
- setters declarados recebem os valores resolvidos
- consultas combinam predicados, operadores e caminhos aninhados
- diretórios podem ser usados como fontes

Limites explícitos:
    - Não valida concorrência (coberto em test_registry_concurrency.py)
"""

import re

import pytest


@pytest.fixture
def layered_city(City, write_source, cities_yaml, cities_override_yaml):
    City.sources = [
        write_source("config/cities.yml", cities_yaml),
        write_source("config/cities.local.yml", cities_override_yaml),
    ]
    return City


def test_layered_sources_resolve_in_declaration_order(layered_city):
    assert layered_city.ids() == ["springfield", "new_york", "newark", "chicago"]

    springfield = layered_city.find("springfield")
    assert springfield.name == "Springfield"
    assert springfield.population == 117000
    assert dict(springfield.state) == {"name": "Illinois"}


def test_defaults_block_applies_to_every_identifier(layered_city):
    newark = layered_city.find("newark")
    chicago = layered_city.find("chicago")
    new_york = layered_city.find("new_york")

    assert newark.country == "United States"
    assert chicago.transportation == ("car",)
    assert new_york.transportation == ("car", "train", "subway")
    assert layered_city.find("defaults") is None


def test_setters_coerce_resolved_values(layered_city):
    layered_city.configure({"chicago": {"population": "2746389"}})

    assert layered_city.find("chicago").population == 2746389


def test_queries_against_layered_configuration(layered_city):
    def ids(conditions):
        return [city.id for city in layered_city.all(conditions)]

    assert ids({"larger_than": 1_000_000}) == ["new_york", "chicago"]
    assert ids({"population.<": 200_000}) == ["springfield"]
    assert ids({"state.name": "New Jersey"}) == ["newark"]
    assert ids({"state.code": None}) == ["springfield", "chicago"]
    assert ids({"transportation.contains": "subway"}) == ["new_york"]
    assert ids({"name": re.compile(r"^New")}) == ["new_york", "newark"]
    assert ids({"name.in": ["Chicago", "Newark"], "larger_than": 500_000}) == ["chicago"]


def test_find_with_conditions_and_instance_methods(layered_city):
    new_york = layered_city.find({"state.code": "NY"})

    assert new_york.id == "new_york"
    assert new_york.label() == "New York (NY)"
    assert layered_city["new_york"] is new_york


def test_inline_overrides_win_over_files(layered_city):
    layered_city.configure({"springfield": {"name": "Springfield, IL"}, "boston": {"name": "Boston"}})

    assert layered_city.find("springfield").name == "Springfield, IL"
    assert layered_city.find("springfield").population == 117000
    assert layered_city.ids()[-1] == "boston"
    assert layered_city.find("boston").country == "United States"


def test_editing_a_file_requires_reload(layered_city, tmp_path):
    local = tmp_path / "config" / "cities.local.yml"
    local.write_text("chicago:\n  name: Chicago\n  population: 1\n", encoding="utf-8")

    assert layered_city.find("chicago").population == 2746388

    layered_city.reload()
    assert layered_city.find("chicago").population == 1
    assert layered_city.find("springfield").population == 116250
    assert layered_city.find("newark").country == "USA"


def test_directory_source(City, write_source, tmp_path):
    write_source("cities/springfield.yml", "name: Springfield\npopulation: 116250\n")
    write_source("cities/newark.yaml", "name: Newark\npopulation: 311549\n")
    write_source("cities/defaults.yml", "country: USA\n")

    City.sources = tmp_path / "cities"

    assert City.ids() == ["newark", "springfield"]
    assert City.find("springfield").country == "USA"
    assert [city.id for city in City.all({"larger_than": 200_000})] == ["newark"]
