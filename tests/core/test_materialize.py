# tests/core/test_materialize.py
"""
Testes da materialização de objetos de configuração.

Os testes asseguram que:
- valores com setter são roteados ao setter, já congelados
- valores sem setter ficam no armazenamento bruto, acessíveis por atributo
- `id` é sempre gravado no slot dedicado e é somente leitura
- falhas de setter são reportadas como `AttributeAssignmentError`
- capacidades (setters e predicados) são calculadas por tipo
"""

from types import MappingProxyType

import pytest

from config_registry import AttributeAssignmentError, ConfigObject, predicate
from config_registry.core.materialize import capabilities_for, materialize


class Server(ConfigObject):
    @property
    def port(self):
        return self._port

    @port.setter
    def port(self, value):
        if not isinstance(value, int):
            raise AttributeAssignmentError("port must be an int", attribute="port")
        self._port = value

    @property
    def hosts(self):
        return self._hosts

    @hosts.setter
    def hosts(self, value):
        self._hosts = value

    @property
    def read_only(self):
        return "fixed"

    @predicate
    def listens_on(self, port):
        return self.port == port


class CoercingServer(ConfigObject):
    @property
    def timeout(self):
        return self._timeout

    @timeout.setter
    def timeout(self, value):
        self._timeout = float(value)


def test_capabilities_are_computed_per_type():
    caps = capabilities_for(Server)

    assert caps.settable == frozenset({"port", "hosts"})
    assert caps.predicates == frozenset({"listens_on"})
    assert Server.__capabilities__ == caps


def test_explicit_predicate_names_are_honoured():
    class Tagged(ConfigObject):
        __predicates__ = ("has_tag",)

        def has_tag(self, tag):
            return tag in self.tags

    assert Tagged.__capabilities__.is_predicate("has_tag")


def test_setters_receive_frozen_values():
    server = materialize(Server, {"id": "web", "port": 80, "hosts": ["a", "b"]})

    assert server.id == "web"
    assert server.port == 80
    assert server.hosts == ("a", "b")


def test_undeclared_attributes_go_to_raw_slots():
    server = materialize(Server, {"id": "web", "port": 80, "labels": {"tier": "front"}})

    assert server.labels == {"tier": "front"}
    assert isinstance(server.labels, MappingProxyType)
    assert server.raw_attributes() == {"labels": {"tier": "front"}}
    with pytest.raises(AttributeError):
        server.missing


def test_read_only_property_value_is_kept_as_raw_attribute():
    server = materialize(Server, {"id": "web", "port": 80, "read_only": "supplied"})

    assert server.read_only == "fixed"
    assert server.raw_attributes()["read_only"] == "supplied"


def test_id_is_read_only():
    server = materialize(Server, {"id": "web", "port": 80})

    with pytest.raises(AttributeError):
        server.id = "other"


def test_setter_rejection_propagates_with_identifier():
    with pytest.raises(AttributeAssignmentError) as info:
        materialize(Server, {"id": "web", "port": "eighty"})

    assert info.value.identifier == "web"
    assert info.value.attribute == "port"


def test_setter_value_errors_are_wrapped():
    with pytest.raises(AttributeAssignmentError) as info:
        materialize(CoercingServer, {"id": "slow", "timeout": "forever"})

    assert isinstance(info.value.__cause__, ValueError)
    assert info.value.attribute == "timeout"
    assert materialize(CoercingServer, {"id": "ok", "timeout": "1.5"}).timeout == 1.5


def test_mutating_supplied_value_does_not_affect_object():
    hosts = ["a"]
    server = materialize(Server, {"id": "web", "port": 80, "hosts": hosts})

    hosts.append("b")

    assert server.hosts == ("a",)


def test_subclasses_get_isolated_registries():
    class Base(ConfigObject):
        pass

    class Child(Base):
        pass

    assert Base.registry is not Child.registry

    with pytest.raises(TypeError):
        ConfigObject.registry
