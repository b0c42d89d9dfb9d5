# src/config_registry/core/__init__.py
"""
Core do registry de configuração.

Este pacote reúne a implementação canônica do ciclo
fontes → merge → materialização → consulta:

    - errors       → hierarquia de exceções tipadas
    - freeze       → congelamento profundo de valores
    - merge        → resolução de precedência entre fontes, overrides e defaults
    - materialize  → construção de instâncias e capacidades por tipo
    - query        → consultas por condição com cache por geração
    - registry     → estado por tipo, invalidação e observers
    - object       → tipo base `ConfigObject`
    - hashing      → fingerprint da configuração resolvida
    - log          → logging estruturado (structlog)

Invariantes:
    - Objetos materializados e cache de consultas são sempre consistentes
      com as fontes, overrides e defaults correntes
    - Todo atributo materializado é profundamente imutável

Limites explícitos:
    - Não lê formatos de arquivo (responsabilidade de `sources`)
    - Não observa o filesystem
"""
