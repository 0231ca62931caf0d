"""
Logging de la API con structlog.
Salida por stderr: consola legible en desarrollo o líneas JSON (LOG_JSON=true)
para el agregador de logs. Los logs de librerías (uvicorn, starlette) pasan
por el mismo formateador.
"""

import logging
import sys

import structlog


def configure_logging(level: str = "INFO", log_json: bool = False) -> None:
    pre_chain = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    renderer = structlog.processors.JSONRenderer() if log_json else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(foreign_pre_chain=pre_chain, processor=renderer)
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)
