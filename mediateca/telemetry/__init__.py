"""Helpers de telemetría (logging estructurado)."""

from .logger import JsonFormatter, RequestContextFilter, setup_logging

__all__ = ["JsonFormatter", "RequestContextFilter", "setup_logging"]
