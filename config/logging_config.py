"""
Logging del importador.

Usa contextvars para marcar todos los eventos de una importación con el
nombre del archivo que se está procesando.
"""

import logging
import sys
from contextvars import ContextVar
from typing import Optional


# Archivo que se está importando en el contexto actual
current_source: ContextVar[str] = ContextVar('current_source', default='')


def set_current_source(source: Optional[str]) -> None:
    current_source.set(source or '')


def clear_current_source() -> None:
    current_source.set('')


def get_current_source() -> str:
    return current_source.get()


class SourceFormatter(logging.Formatter):
    """Expone el archivo en curso como %(source_prefix)s."""

    def format(self, record: logging.LogRecord) -> str:
        source = current_source.get()
        record.source_prefix = f"[{source}] " if source else ""
        return super().format(record)


def setup_logging(level: str = "INFO", stream=None) -> None:
    """Configura el logger raíz con un único handler (stdout por defecto)."""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setFormatter(SourceFormatter(
        fmt='%(asctime)s | %(name)s | %(levelname)s | %(source_prefix)s%(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    root_logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
