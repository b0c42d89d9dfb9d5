# src/config_registry/core/log.py
"""
Logging estruturado do registry de configuração.

Os módulos do pacote emitem eventos via structlog (`get_logger`), sempre
com o componente de origem vinculado. Os eventos são encaminhados ao
logger `config_registry` da stdlib, de modo que níveis e handlers da
aplicação hospedeira decidem o que é exibido.

Decisões arquiteturais:
    - O pacote nunca configura logging no import; apenas registra um
      `NullHandler` no próprio logger
    - Loggers são resolvidos de forma lazy a cada evento, então
      `configure_logging` (ou o `structlog.configure` da aplicação) vale
      também para loggers criados antes da configuração
    - `configure_logging` atua apenas no logger do pacote, nunca no root

Limites explícitos:
    - Não define política de retenção nem destinos além de um stream
"""

from __future__ import annotations

import logging
from typing import IO, Any, List, Optional

import structlog
from structlog.types import Processor


LOGGER_NAME = "config_registry"

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())


def _has_structlog_handler(package_logger: logging.Logger) -> bool:
    return any(
        isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter)
        for handler in package_logger.handlers
    )


def _shared_processors(json_logs: bool) -> List[Processor]:
    processors: List[Processor] = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if json_logs:
        processors.append(structlog.processors.format_exc_info)
    return processors


def configure_logging(
    json_logs: bool = False,
    log_level: str = "INFO",
    stream: Optional[IO[str]] = None,
) -> None:
    """
    Direciona os eventos do pacote para um stream, renderizados por structlog.

    Conveniência para aplicações e testes sem setup de logging próprio.
    A função é idempotente: se o logger `config_registry` já possui um
    handler com `ProcessorFormatter`, nada é alterado.

    Args:
        json_logs (bool): Renderiza eventos como JSON em vez do console.
        log_level (str): Nível mínimo do logger do pacote.
        stream: Destino do handler (default: `sys.stderr`).
    """
    package_logger = logging.getLogger(LOGGER_NAME)
    if _has_structlog_handler(package_logger):
        return

    shared = _shared_processors(json_logs)
    structlog.configure(
        processors=shared + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )

    renderer: Processor
    if json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    package_logger.addHandler(handler)
    package_logger.setLevel(log_level.upper())
    package_logger.propagate = False


def get_logger(component: str, **initial_values: Any) -> Any:
    """Retorna um logger structlog sobre `logging.getLogger("config_registry")`."""
    return structlog.wrap_logger(
        logging.getLogger(LOGGER_NAME),
        wrapper_class=structlog.stdlib.BoundLogger,
        component=component,
        **initial_values,
    )
